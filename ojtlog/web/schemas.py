"""
Request and response bodies of the HTTP API.
"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ojtlog.domain.models import Entry, Note, Task
from ojtlog.services.calendar_service import DayBucket
from ojtlog.services.log_service import FlatTask


class EntryIn(BaseModel):
    """Entry as submitted by the client; totals are computed server side"""
    entry_date: date
    supervisor: str = Field(default="", max_length=200)
    notes: Optional[str] = None
    tasks: List[Task] = Field(default_factory=list)

    def to_entry(self) -> Entry:
        return Entry(
            entry_date=self.entry_date,
            supervisor=self.supervisor,
            notes=self.notes or None,
            tasks=self.tasks,
        )


class TaskDeleted(BaseModel):
    entry_deleted: bool
    entry: Optional[Entry] = None


class NoteUpdate(BaseModel):
    """Editable note fields; the note type cannot change"""
    title: str = Field(..., min_length=1, max_length=200)
    content: str = ""
    ooo_date: Optional[date] = None
    ooo_time_start: Optional[str] = None
    ooo_time_end: Optional[str] = None
    is_full_day: bool = False


class LogPageOut(BaseModel):
    page: int
    page_size: int
    total_pages: int
    tasks: List[FlatTask]


class CalendarMonth(BaseModel):
    year: int
    month: int
    blanks: int
    days: List[int]
    buckets: Dict[str, DayBucket]


class DayDetail(BaseModel):
    day: date
    tasks: List[FlatTask]
    total_hours: float
    total_label: str


class OOOMonth(BaseModel):
    year: int
    month: int
    blanks: int
    days: List[int]
    notes: Dict[str, List[Note]]


class Success(BaseModel):
    success: bool = True
