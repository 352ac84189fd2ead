"""Drive a calculation one step at a time.

The caller owns the answer map (step id -> stored value) and threads it
forward. Wrong or unusable answers are ordinary negative results, never
exceptions.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .calculators import commercial, residential
from .coverage import QuickReferenceItem, accounted_equipment_ids, is_quick_ref_covered
from .models import CommercialScenario, HouseScenario
from .steps import Answers, CalculationStep
from .utils.validation import coerce_answer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Submission:
    """Outcome of checking one answer."""

    expected: float
    accepted: bool
    # None when the answer was rejected
    stored: Optional[float]


def _prior_view(step: CalculationStep, scenario: Any, answers: Mapping[str, float]) -> Dict[str, float]:
    """Only the prior answers *step* declares it reads."""
    return {k: answers[k] for k in step.requires(scenario) if k in answers}


def expected(step: CalculationStep, scenario: Any, answers: Mapping[str, float]) -> float:
    return step.expected_answer(scenario, _prior_view(step, scenario, answers))


def is_acceptable(step: CalculationStep, user_value: Any, expected_value: float) -> bool:
    value = coerce_answer(user_value)
    if value is None:
        logger.debug("%s: rejected non-numeric answer %r", step.id, user_value)
        return False
    return step.validate_answer(value, expected_value)


def stored_value(step: CalculationStep, scenario: Any, answers: Mapping[str, float], user_value: Any) -> float:
    """Value to record for an accepted answer; catalog steps snap to the catalog.

    Unusable input stores 0, the same value a missing answer reads as.
    """
    value = coerce_answer(user_value)
    if value is None:
        logger.debug("%s: storing 0 for non-numeric answer %r", step.id, user_value)
        return 0
    if step.store is None:
        return value
    return step.store(value)


def hint_text(step: CalculationStep, scenario: Any, answers: Mapping[str, float]) -> str:
    return step.hint.render(scenario, _prior_view(step, scenario, answers))


def submit(step: CalculationStep, scenario: Any, answers: Mapping[str, float], user_value: Any) -> Submission:
    target = expected(step, scenario, answers)
    if not is_acceptable(step, user_value, target):
        return Submission(target, False, None)
    return Submission(target, True, stored_value(step, scenario, answers, user_value))


def steps_for(scenario: Any) -> Tuple[CalculationStep, ...]:
    if isinstance(scenario, HouseScenario):
        return residential.active_steps(scenario)
    if isinstance(scenario, CommercialScenario):
        return commercial.active_steps(scenario)
    raise TypeError(f"unsupported scenario type {type(scenario).__name__}")


def quick_reference_items(scenario: Any) -> Tuple[QuickReferenceItem, ...]:
    if isinstance(scenario, HouseScenario):
        return residential.QUICK_REFERENCE_ITEMS
    return commercial.QUICK_REFERENCE_ITEMS


class GuidedCalculation:
    """A scenario bound to its active steps, addressed by step index."""

    def __init__(self, scenario: Any) -> None:
        self.scenario = scenario
        self.steps: Tuple[CalculationStep, ...] = steps_for(scenario)

    def __len__(self) -> int:
        return len(self.steps)

    def index_of(self, step_id: str) -> int:
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        raise KeyError(step_id)

    def expected(self, index: int, answers: Answers) -> float:
        return expected(self.steps[index], self.scenario, answers)

    def is_acceptable(self, index: int, user_value: Any, answers: Answers) -> bool:
        return is_acceptable(self.steps[index], user_value, self.expected(index, answers))

    def stored_value(self, index: int, answers: Answers, user_value: Any) -> float:
        return stored_value(self.steps[index], self.scenario, answers, user_value)

    def hint(self, index: int, answers: Answers) -> str:
        return hint_text(self.steps[index], self.scenario, answers)

    def submit(self, index: int, answers: Answers, user_value: Any) -> Submission:
        return submit(self.steps[index], self.scenario, answers, user_value)

    def accounted_equipment(self, index: int) -> set:
        return accounted_equipment_ids(self.steps, self.scenario, index)

    def quick_ref_covered(self, item_id: str, index: int) -> bool:
        return is_quick_ref_covered(quick_reference_items(self.scenario), self.steps, item_id, index)

    def solve(self) -> Dict[str, float]:
        """Answer every step with its expected value, storing as a learner would."""
        answers: Dict[str, float] = {}
        for step in self.steps:
            target = expected(step, self.scenario, answers)
            answers[step.id] = stored_value(step, self.scenario, answers, target)
        logger.debug("%s solved: %s", self.scenario.id, answers)
        return answers

    def worked_rows(self) -> List[Tuple[CalculationStep, float, str]]:
        """``(step, stored answer, hint)`` for every step of the solved calculation."""
        answers = self.solve()
        return [(step, answers[step.id], hint_text(step, self.scenario, answers)) for step in self.steps]

