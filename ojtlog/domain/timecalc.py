"""
Clock-time arithmetic and duration formatting.

Clock times are local "HH:MM" strings without a date. Durations are decimal
hours. Spans never wrap past midnight: a time-out earlier than the time-in
yields zero hours.
"""

import math
import re

from .errors import InvalidTimeFormat

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR


def parse_clock(value: str) -> int:
    """
    Parse an "HH:MM" clock time into minutes since midnight.

    Args:
        value: Clock time such as "09:00" or "9:00"

    Returns:
        Minutes since midnight (0..1439)

    Raises:
        InvalidTimeFormat: if the value is not a valid clock time
    """
    if not isinstance(value, str):
        raise InvalidTimeFormat(value)

    match = _CLOCK_RE.match(value.strip())
    if not match:
        raise InvalidTimeFormat(value)

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(value)

    return hours * MINUTES_PER_HOUR + minutes


def hours_between(time_in: str, time_out: str) -> float:
    """Decimal hours from time_in to time_out, clamped at zero."""
    diff_minutes = parse_clock(time_out) - parse_clock(time_in)
    return max(0.0, diff_minutes / MINUTES_PER_HOUR)


def _total_minutes(hours: float) -> int:
    # Round half up, negative durations count as zero
    return max(0, int(math.floor(hours * MINUTES_PER_HOUR + 0.5)))


def _plural_hours(hrs: int) -> str:
    return f"{hrs} hr" if hrs == 1 else f"{hrs} hrs"


def format_hours_minutes(hours: float) -> str:
    """
    Format decimal hours as "X hrs Y min".

    Examples:
        0    -> "0 min"
        0.75 -> "45 min"
        1.5  -> "1 hr 30 min"
        2    -> "2 hrs"
    """
    hrs, mins = divmod(_total_minutes(hours), MINUTES_PER_HOUR)

    if hrs == 0:
        return f"{mins} min"
    if mins == 0:
        return _plural_hours(hrs)
    return f"{_plural_hours(hrs)} {mins} min"


def format_days_hours_minutes(hours: float) -> str:
    """
    Format decimal hours with a day component, e.g. "1 day 2 hrs 5 min".

    Zero units are omitted; a zero duration is "0 min".
    """
    days, remainder = divmod(_total_minutes(hours), MINUTES_PER_DAY)
    hrs, mins = divmod(remainder, MINUTES_PER_HOUR)

    parts = []
    if days > 0:
        parts.append(f"{days} day" if days == 1 else f"{days} days")
    if hrs > 0:
        parts.append(_plural_hours(hrs))
    if mins > 0:
        parts.append(f"{mins} min")

    return " ".join(parts) if parts else "0 min"
