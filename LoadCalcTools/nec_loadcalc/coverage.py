"""Which equipment and reference items a learner has worked through so far."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Set

from .steps import CalculationStep


@dataclass(frozen=True, slots=True)
class QuickReferenceItem:
    id: str
    label: str
    value: str
    covered_after_step: str


def accounted_equipment_ids(steps: Sequence[CalculationStep], scenario: Any, step_index: int) -> Set[str]:
    """Equipment ids accounted for by steps ``0..step_index`` inclusive."""
    accounted: Set[str] = set()
    for step in steps[: max(step_index + 1, 0)]:
        accounted.update(step.covers(scenario))
    return accounted


def is_quick_ref_covered(
    items: Sequence[QuickReferenceItem],
    steps: Sequence[CalculationStep],
    item_id: str,
    current_index: int,
) -> bool:
    """True once the learner has moved past the step that covers *item_id*.

    Items whose covering step is not in *steps* are never covered.
    """
    item = next((i for i in items if i.id == item_id), None)
    if item is None:
        return False
    step_ids = [step.id for step in steps]
    if item.covered_after_step not in step_ids:
        return False
    return current_index > step_ids.index(item.covered_after_step)
