"""
Domain Models using Pydantic for validation.

Architecture Decision: Why Pydantic?
Pydantic provides runtime data validation, so clock times, categories and
targets are checked once at the boundary (HTTP body, database row) and the
aggregation code can trust what it receives. Derived values (task hours,
entry totals) are recomputed here on every validation instead of being read
back from storage.
"""

import math
from datetime import date, datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from .timecalc import hours_between, parse_clock


class Category(str, Enum):
    """Kind of work a task represents"""
    LEARNING = "Learning"
    DEVELOPMENT = "Development/Coding"
    PROJECT_WORK = "Project Work"
    ADMIN = "Admin"
    MEETING = "Meeting"
    RESEARCH = "Research"
    DOCUMENTATION = "Documentation"


class Status(str, Enum):
    """Review status of a task"""
    COMPLETED = "Completed"
    IN_PROGRESS = "In Progress"
    PENDING_REVIEW = "Pending Review"
    APPROVED = "Approved"


class NoteType(str, Enum):
    REGULAR = "regular"
    OOO = "ooo"


DEFAULT_REQUIRED_HOURS = 500.0


def normalize_clock(value: str) -> str:
    """Validate a clock time and return it zero-padded ("9:05" -> "09:05")"""
    hours, minutes = divmod(parse_clock(value), 60)
    return f"{hours:02d}:{minutes:02d}"


class Task(BaseModel):
    """
    A block of work inside a daily entry.

    hours_rendered is always derived from time_in/time_out; a value passed
    in by the caller is overwritten. The value is kept unrounded; only
    display formatting rounds (to whole minutes).
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    time_in: str
    time_out: str
    hours_rendered: float = 0.0
    task_name: str = Field(..., min_length=1, max_length=500)
    category: Category
    status: Status = Status.COMPLETED
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("time_in", "time_out")
    @classmethod
    def _check_clock(cls, value: str) -> str:
        return normalize_clock(value)

    @model_validator(mode="after")
    def _derive_hours(self) -> "Task":
        self.hours_rendered = hours_between(self.time_in, self.time_out)
        return self


class Entry(BaseModel):
    """
    One logged day of training: a date, a supervisor and its tasks.

    total_hours is the sum of the tasks' hours and is recomputed on every
    validation, so a stale stored total never leaks out.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    entry_date: date
    tasks: List[Task] = Field(default_factory=list)
    supervisor: str = Field(default="", max_length=200)
    notes: Optional[str] = None
    total_hours: float = 0.0
    owner_id: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def _derive_total(self) -> "Entry":
        self.total_hours = math.fsum(task.hours_rendered for task in self.tasks)
        return self

    @property
    def learning_outcome(self) -> str:
        """Entry notes as shown next to each task ("-" when empty)"""
        return self.notes or "-"


class Note(BaseModel):
    """
    Free-form note or out-of-office record.

    OOO fields only apply to OOO notes and are cleared on regular notes.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    content: str = ""
    note_type: NoteType = NoteType.REGULAR

    ooo_date: Optional[date] = None
    ooo_time_start: Optional[str] = None
    ooo_time_end: Optional[str] = None
    is_full_day: bool = False

    owner_id: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("ooo_time_start", "ooo_time_end")
    @classmethod
    def _check_clock(cls, value: Optional[str]) -> Optional[str]:
        if value in (None, ""):
            return None
        return normalize_clock(value)

    @model_validator(mode="after")
    def _check_ooo_fields(self) -> "Note":
        if self.note_type == NoteType.REGULAR:
            self.ooo_date = None
            self.ooo_time_start = None
            self.ooo_time_end = None
            self.is_full_day = False
        elif self.ooo_date is None:
            raise ValueError("Out-of-office notes require a date")
        elif self.is_full_day:
            self.ooo_time_start = None
            self.ooo_time_end = None
        return self

    def time_range_label(self) -> str:
        """Human readable time span of an OOO note"""
        if self.is_full_day:
            return "Full Day"
        if self.ooo_time_start and self.ooo_time_end:
            return f"{self.ooo_time_start} - {self.ooo_time_end}"
        return ""


class TrainingSettings(BaseModel):
    """Per-user training configuration"""
    model_config = ConfigDict(from_attributes=True)

    required_hours: float = Field(default=DEFAULT_REQUIRED_HOURS, gt=0, description="Hours the training requires")
    student_name: str = Field(default="", max_length=200)
    start_date: Optional[date] = Field(default=None, description="First day of the training window")
    end_date: Optional[date] = Field(default=None, description="Last day of the training window")
    theme: str = Field(default="auto", pattern="^(light|dark|auto)$", description="Theme preference")

    @model_validator(mode="after")
    def _check_window(self) -> "TrainingSettings":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("Training end date is before the start date")
        return self


class Stats(BaseModel):
    """Progress summary against the required-hours target"""
    required_hours: float
    completed_hours: float
    remaining_hours: float
    progress_percentage: float
    entries_count: int
