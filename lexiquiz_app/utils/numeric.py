"""Small numeric helpers shared by the scheduling engines."""
import math


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Constrain value to [minimum, maximum]."""
    return min(maximum, max(minimum, value))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with .5 going up (2.5 -> 3).

    Python's round() uses banker's rounding (round(2.5) == 2), which would
    shift quality scores and session quotas at every half-way point.
    """
    return int(math.floor(value + 0.5))
