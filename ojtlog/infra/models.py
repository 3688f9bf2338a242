"""
SQLAlchemy ORM models.
Separated from db.py for cleaner imports.
"""

from .db import EntryModel, TaskModel, NoteModel, SettingsModel, Base

__all__ = ["EntryModel", "TaskModel", "NoteModel", "SettingsModel", "Base"]
