"""Standard service size selection utilities."""
from bisect import bisect_left


STANDARD_SERVICE_SIZES = (100, 125, 150, 200, 225, 400)


def next_standard_service(amps: float) -> int:
    """Return the smallest standard service size that is at least *amps*.

    Loads beyond the largest size stay at the largest size.
    """
    index = bisect_left(STANDARD_SERVICE_SIZES, amps)
    if index < len(STANDARD_SERVICE_SIZES):
        return STANDARD_SERVICE_SIZES[index]
    return STANDARD_SERVICE_SIZES[-1]
