"""Building blocks shared by the residential and commercial step lists.

A step is a frozen record of plain functions. ``expected_answer`` and the
hint receive the scenario and a mapping of prior stored answers holding only
the step ids returned by ``requires``; anything missing reads as 0.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple

Answers = Mapping[str, float]
ExpectedFn = Callable[[Any, Answers], float]
ValidateFn = Callable[[float, float], bool]
StepIds = Callable[[Any], Tuple[str, ...]]


@dataclass(frozen=True, slots=True)
class StaticHint:
    """Fixed hint text."""

    text: str

    def render(self, scenario: Any, prior: Answers) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class DerivedHint:
    """Hint worked out from the scenario and prior answers."""

    build: Callable[[Any, Answers], str]

    def render(self, scenario: Any, prior: Answers) -> str:
        return self.build(scenario, prior)


Hint = StaticHint | DerivedHint


def _no_ids(_scenario: Any) -> Tuple[str, ...]:
    return ()


def ids(*step_ids: str) -> StepIds:
    """A ``requires``/``covers`` function returning the same ids for every scenario."""
    return lambda _scenario: step_ids


@dataclass(frozen=True, slots=True)
class CalculationStep:
    id: str
    title: str
    prompt: str
    nec_reference: str
    expected_answer: ExpectedFn
    validate_answer: ValidateFn
    hint: Hint
    formula: Optional[str] = None
    requires: StepIds = _no_ids
    covers: StepIds = _no_ids
    # Maps an accepted user value onto the catalog value later steps read
    store: Optional[Callable[[float], float]] = None


def within(tolerance: float) -> ValidateFn:
    """Accept answers within +/- *tolerance* of the expected value."""

    def validate(user: float, expected: float) -> bool:
        return abs(user - expected) <= tolerance

    return validate


def exactly(user: float, expected: float) -> bool:
    return user == expected


def catalog_at_least(catalog: Iterable[float], slack: float = 0) -> ValidateFn:
    """Accept catalog members no smaller than ``expected - slack``."""
    members = frozenset(catalog)

    def validate(user: float, expected: float) -> bool:
        return user in members and user >= expected - slack

    return validate


def catalog_exact(catalog: Iterable[float]) -> ValidateFn:
    members = frozenset(catalog)

    def validate(user: float, expected: float) -> bool:
        return user in members and user == expected

    return validate


def prior(answers: Answers, step_id: str) -> float:
    return answers.get(step_id, 0) or 0


def va(value: float) -> str:
    """Format a load for hint text: ``12,345`` or ``1,234.5``."""
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,.1f}"
