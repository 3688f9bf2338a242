"""Infrastructure layer - Database, persistence and configuration"""

from .db import DatabaseEngine, get_engine, init_db
from .models import EntryModel, TaskModel, NoteModel, SettingsModel

__all__ = ["DatabaseEngine", "get_engine", "init_db", "EntryModel", "TaskModel", "NoteModel", "SettingsModel"]
