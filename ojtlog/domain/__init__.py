"""Domain layer - Pure business entities and logic"""

from .models import Category, Status, NoteType, Task, Entry, Note, TrainingSettings, Stats
from .errors import OJTError, InvalidTimeFormat, InvalidTarget, InvalidPageSize, EmptyEntry, RecordNotFound
from .theme import ThemeState

__all__ = [
    "Category", "Status", "NoteType", "Task", "Entry", "Note", "TrainingSettings", "Stats", "ThemeState",
    "OJTError", "InvalidTimeFormat", "InvalidTarget", "InvalidPageSize", "EmptyEntry", "RecordNotFound",
]
