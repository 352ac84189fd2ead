"""Validation helpers for scenario data and user answers."""
from __future__ import annotations

from math import isfinite
from typing import Any


class ValidationError(ValueError):
    """Raised when validation fails."""


def non_negative(val: float | None, field: str) -> float | None:
    """Return value if non-negative or None; raise otherwise."""
    if val is None:
        return None
    if val < 0:
        raise ValidationError(f"{field} must not be negative")
    return val


def coerce_answer(value: Any) -> float | None:
    """Return *value* as a finite float, or None if it is not a usable number.

    Strings may carry thousands separators and surrounding whitespace
    ("36,800"). Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.replace(",", "").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        return None
    return number if isfinite(number) else None
