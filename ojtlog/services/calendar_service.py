"""
Calendar Service - Buckets entries and out-of-office notes by calendar day.

Any number of entries can share a day; they are merged into one bucket that
keeps a reference to each original entry for the day-detail view.
"""

import calendar
import datetime
import math
from typing import Dict, Iterable, List, Tuple

from pydantic import BaseModel, Field

from ojtlog.domain.models import Entry, Note, NoteType
from ojtlog.services.aggregation import total_hours
from ojtlog.services.log_service import FlatTask, flatten_entry
from ojtlog.domain.timecalc import parse_clock


class DayBucket(BaseModel):
    """All entries logged on one calendar day"""
    total_hours: float = 0.0
    count: int = 0
    entries: List[Entry] = Field(default_factory=list)


def day_key(day: datetime.date) -> str:
    """Canonical key of a calendar day ("2024-05-01")"""
    if isinstance(day, datetime.datetime):
        day = day.date()
    return day.isoformat()


def group_by_day(entries: Iterable[Entry]) -> Dict[str, DayBucket]:
    """Merge entries into one bucket per calendar day"""
    buckets: Dict[str, DayBucket] = {}
    for entry in entries:
        bucket = buckets.setdefault(day_key(entry.entry_date), DayBucket())
        bucket.count += 1
        bucket.entries.append(entry)

    for bucket in buckets.values():
        bucket.total_hours = total_hours(bucket.entries)
    return buckets


def tasks_for_day(entries: Iterable[Entry], day: datetime.date) -> List[FlatTask]:
    """
    All tasks logged on a day, earliest time-in first.

    Times are compared as minutes since midnight, so "9:00" sorts
    before "10:00".
    """
    key = day_key(day)
    tasks: List[FlatTask] = []
    for entry in entries:
        if day_key(entry.entry_date) == key:
            tasks.extend(flatten_entry(entry))

    return sorted(tasks, key=lambda t: parse_clock(t.time_in))


def day_total(tasks: Iterable[FlatTask]) -> float:
    return math.fsum(t.hours_rendered for t in tasks)


def ooo_by_day(notes: Iterable[Note]) -> Dict[str, List[Note]]:
    """Out-of-office notes keyed by their OOO date. Regular notes are skipped."""
    days: Dict[str, List[Note]] = {}
    for note in notes:
        if note.note_type != NoteType.OOO or note.ooo_date is None:
            continue
        days.setdefault(day_key(note.ooo_date), []).append(note)
    return days


def month_grid(year: int, month: int) -> Tuple[int, List[int]]:
    """
    Layout of a Sunday-first month calendar.

    Returns:
        (number of leading blank cells, list of day numbers)
    """
    first_weekday, days_in_month = calendar.monthrange(year, month)
    # calendar uses Monday=0, the grid starts on Sunday
    blanks = (first_weekday + 1) % 7
    return blanks, list(range(1, days_in_month + 1))


class CalendarService:
    """
    Month views over entries and OOO notes.
    """

    def month_view(self, entries: Iterable[Entry], year: int, month: int) -> Dict[str, DayBucket]:
        """Day buckets of a single month"""
        in_month = [e for e in entries if e.entry_date.year == year and e.entry_date.month == month]
        return group_by_day(in_month)

    def ooo_month_view(self, notes: Iterable[Note], year: int, month: int) -> Dict[str, List[Note]]:
        """OOO notes of a single month keyed by day"""
        prefix = f"{year:04d}-{month:02d}-"
        return {k: v for k, v in ooo_by_day(notes).items() if k.startswith(prefix)}

    def day_detail(self, entries: Iterable[Entry], day: datetime.date) -> Tuple[List[FlatTask], float]:
        """Tasks of a day plus their total hours"""
        tasks = tasks_for_day(entries, day)
        return tasks, day_total(tasks)
