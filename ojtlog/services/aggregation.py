"""
Aggregation of logged hours.

Pure functions over already-loaded entries. Entry totals are always
recomputed from the tasks, never taken from what storage says. Sums use
math.fsum so that durations made of whole minutes add up exactly
(six 10 minute tasks are 1.0 hour, not 0.9999...).
"""

import math
from datetime import date
from typing import Dict, Iterable, List

from ojtlog.domain.errors import InvalidTarget
from ojtlog.domain.models import Entry, Stats


def entry_hours(entry: Entry) -> float:
    """Total hours of an entry, summed from its tasks"""
    return math.fsum(task.hours_rendered for task in entry.tasks)


def total_hours(entries: Iterable[Entry]) -> float:
    """Total hours across entries, summed task by task"""
    return math.fsum(task.hours_rendered for entry in entries for task in entry.tasks)


def month_key(day: date) -> str:
    """Month bucket label, e.g. "May 2024" """
    return day.strftime("%b %Y")


def compute_stats(entries: Iterable[Entry], required_hours: float) -> Stats:
    """
    Compute progress against the required-hours target.

    Args:
        entries: Entries of one owner
        required_hours: Target hours, must be positive

    Returns:
        Stats with progress clamped to [0, 100]

    Raises:
        InvalidTarget: if required_hours is zero or negative
    """
    if required_hours is None or required_hours <= 0:
        raise InvalidTarget(required_hours)

    entries = list(entries)
    completed = total_hours(entries)

    return Stats(
        required_hours=required_hours,
        completed_hours=completed,
        remaining_hours=max(0.0, required_hours - completed),
        progress_percentage=min(100.0, completed / required_hours * 100),
        entries_count=len(entries),
    )


def days_remaining(stats: Stats) -> int:
    """
    Estimated number of logged days still needed to reach the target.

    Uses the average hours per entry so far; with no hours logged yet each
    remaining hour counts as one day. Zero once nothing remains.
    """
    if stats.remaining_hours <= 0:
        return 0

    average = stats.completed_hours / stats.entries_count if stats.entries_count else 0.0
    return math.ceil(stats.remaining_hours / (average or 1.0))


def category_breakdown(entries: Iterable[Entry]) -> Dict[str, float]:
    """
    Hours per task category, largest first.

    Categories without any task are left out.
    """
    hours: Dict[str, List[float]] = {}
    for entry in entries:
        for task in entry.tasks:
            hours.setdefault(task.category.value, []).append(task.hours_rendered)

    totals = {key: math.fsum(values) for key, values in hours.items()}
    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))


def category_percentages(breakdown: Dict[str, float], completed_hours: float) -> Dict[str, float]:
    """Share of completed hours per category, in percent (same order as breakdown)"""
    if completed_hours <= 0:
        return {key: 0.0 for key in breakdown}
    return {key: hours / completed_hours * 100 for key, hours in breakdown.items()}


def monthly_breakdown(entries: Iterable[Entry]) -> Dict[str, float]:
    """
    Hours per calendar month of the entry date ("Mon YYYY"), newest first.
    """
    months: Dict[date, List[Entry]] = {}
    for entry in entries:
        months.setdefault(entry.entry_date.replace(day=1), []).append(entry)

    return {month_key(m): total_hours(months[m]) for m in sorted(months, reverse=True)}
