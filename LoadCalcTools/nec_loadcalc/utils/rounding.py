"""Rounding helpers matching NEC worked-example arithmetic."""
from math import floor


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, halves going up (2179.5 -> 2180)."""
    return int(floor(value + 0.5))
