"""
Log table: flattening, sorting and day-aligned pagination of tasks.

Pages are filled with whole calendar days. A day is never split across two
pages, even when it alone holds more tasks than the page size.
"""

import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from ojtlog.domain.errors import InvalidPageSize
from ojtlog.domain.models import Entry
from ojtlog.domain.timecalc import parse_clock


class SortMode(str, Enum):
    CREATED = "created"  # most recently added first
    TIME = "time"        # newest day first, then by time-in within the day


class FlatTask(BaseModel):
    """A task together with the entry it belongs to"""
    entry_id: Optional[int] = None
    task_id: Optional[int] = None
    entry_date: datetime.date
    supervisor: str = ""
    task_name: str
    time_in: str
    time_out: str
    hours_rendered: float
    category: str
    status: str
    learning_outcome: str = "-"
    created_at: datetime.datetime
    is_first_of_day: bool = False


class LogPage(BaseModel):
    number: int
    tasks: List[FlatTask] = Field(default_factory=list)


class PaginatedLog(BaseModel):
    pages: List[LogPage] = Field(default_factory=list)
    total_pages: int = 0

    def page(self, number: int) -> LogPage:
        """1-based page lookup, an out of range page is empty"""
        if 1 <= number <= self.total_pages:
            return self.pages[number - 1]
        return LogPage(number=number)


def flatten_entry(entry: Entry) -> List[FlatTask]:
    return [
        FlatTask(
            entry_id=entry.id,
            task_id=task.id,
            entry_date=entry.entry_date,
            supervisor=entry.supervisor,
            task_name=task.task_name,
            time_in=task.time_in,
            time_out=task.time_out,
            hours_rendered=task.hours_rendered,
            category=task.category.value,
            status=task.status.value,
            learning_outcome=entry.learning_outcome,
            created_at=task.created_at,
        )
        for task in entry.tasks
    ]


def flatten_and_sort(entries: Iterable[Entry], mode: SortMode = SortMode.CREATED) -> List[FlatTask]:
    """
    Flatten every task of every entry and order them.

    Both sorts are stable, so ties keep their input order.
    """
    flat: List[FlatTask] = []
    for entry in entries:
        flat.extend(flatten_entry(entry))

    if SortMode(mode) == SortMode.TIME:
        return sorted(flat, key=lambda t: (-t.entry_date.toordinal(), parse_clock(t.time_in)))
    return sorted(flat, key=lambda t: t.created_at, reverse=True)


def _group_days(flat_tasks: Iterable[FlatTask]) -> List[List[FlatTask]]:
    # Days keep the order in which they first appear
    days: Dict[datetime.date, List[FlatTask]] = {}
    for task in flat_tasks:
        days.setdefault(task.entry_date, []).append(task)
    return list(days.values())


def paginate(flat_tasks: Iterable[FlatTask], page_size: int) -> PaginatedLog:
    """
    Split sorted tasks into pages of whole days.

    A day is added to the current page unless that would push a non-empty
    page past page_size; then a new page starts. An oversized day gets a
    page of its own. Each task is marked is_first_of_day for the first task
    of its day on the page.

    Raises:
        InvalidPageSize: if page_size is zero or negative
    """
    if page_size is None or page_size <= 0:
        raise InvalidPageSize(page_size)

    chunks: List[List[FlatTask]] = []
    current: List[FlatTask] = []
    for day_tasks in _group_days(flat_tasks):
        if current and len(current) + len(day_tasks) > page_size:
            chunks.append(current)
            current = []
        current.extend(day_tasks)
    if current:
        chunks.append(current)

    pages = []
    for number, chunk in enumerate(chunks, start=1):
        seen = set()
        tasks = []
        for task in chunk:
            tasks.append(task.model_copy(update={"is_first_of_day": task.entry_date not in seen}))
            seen.add(task.entry_date)
        pages.append(LogPage(number=number, tasks=tasks))

    return PaginatedLog(pages=pages, total_pages=len(pages))
