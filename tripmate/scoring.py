"""
Score scale normalization.

Scores arrive either as a fraction in [0, 1] or already as a percentage in
[0, 100], independently per field. A value of exactly 1 is a fraction.
"""

import math
from typing import Any, Optional


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _round_half_up(number: float) -> int:
    return int(math.floor(number + 0.5))


def to_percent(value: Any) -> int:
    """
    Map a fraction or percentage to an integer percentage.

    None and anything non-numeric give 0. The result is not clamped;
    use display_percent for anything shown to a user.
    """
    number = _as_number(value)
    if number is None:
        return 0
    if number <= 1:
        return _round_half_up(number * 100)
    return _round_half_up(number)


def clamp_percent(value: Any) -> int:
    """Clamp an already-scaled percentage into [0, 100]."""
    number = _as_number(value)
    if number is None:
        return 0
    return int(min(100, max(0, _round_half_up(number))))


def display_percent(value: Any) -> int:
    return clamp_percent(to_percent(value))


def optional_display_percent(value: Any) -> Optional[int]:
    """display_percent, except that an absent score stays absent."""
    if value is None:
        return None
    return display_percent(value)
