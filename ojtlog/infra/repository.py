"""
Repository Pattern Implementation.

Architecture Decision: Why Repository Pattern?
Separates data access logic from business logic. Makes it easy to:
- Switch database implementations
- Mock data for testing
- Enforce owner scoping in one place

Every method takes the authenticated owner id as its first argument and
filters on it in the query itself. A record owned by someone else is treated
exactly like a missing record.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ojtlog.domain.errors import EmptyEntry, RecordNotFound
from ojtlog.domain.models import Entry, Task, Note, NoteType, TrainingSettings, DEFAULT_REQUIRED_HOURS
from ojtlog.infra.db import EntryModel, TaskModel, NoteModel, SettingsModel, get_engine

logger = logging.getLogger(__name__)


class _Repository:
    """Shared session handling: injected session (tests) or a fresh one"""

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session

    async def _get_session(self) -> AsyncSession:
        """Get session - either injected or create new one"""
        if self.session:
            return self.session
        engine = get_engine()
        return engine.get_session()


def _task_model(task: Task) -> TaskModel:
    return TaskModel(
        time_in=task.time_in,
        time_out=task.time_out,
        hours_rendered=task.hours_rendered,
        task_name=task.task_name,
        category=task.category.value,
        status=task.status.value,
        created_at=task.created_at,
    )


class EntryRepository(_Repository):
    """
    Handles Entry and Task persistence.

    Tasks are only ever written through their entry.
    """

    async def _load(self, session: AsyncSession, owner_id: str, entry_id: int) -> Optional[EntryModel]:
        result = await session.execute(
            select(EntryModel)
            .where(EntryModel.id == entry_id, EntryModel.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_owner(self, owner_id: str) -> List[Entry]:
        """Get all entries of an owner, newest date first"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                select(EntryModel)
                .where(EntryModel.owner_id == owner_id)
                .order_by(EntryModel.entry_date.desc(), EntryModel.id.desc())
            )
            return [Entry.model_validate(m) for m in result.scalars().all()]

    async def get(self, owner_id: str, entry_id: int) -> Optional[Entry]:
        """Get a specific entry by ID"""
        session = await self._get_session()
        async with session:
            model = await self._load(session, owner_id, entry_id)
            return Entry.model_validate(model) if model else None

    async def create(self, owner_id: str, entry: Entry) -> Entry:
        """Create a new entry together with its tasks"""
        if not entry.tasks:
            raise EmptyEntry()

        session = await self._get_session()
        async with session:
            model = EntryModel(
                owner_id=owner_id,
                entry_date=entry.entry_date,
                supervisor=entry.supervisor,
                notes=entry.notes,
                total_hours=entry.total_hours,
                tasks=[_task_model(t) for t in entry.tasks],
            )
            session.add(model)
            await session.commit()

            model = await self._load(session, owner_id, model.id)
            logger.info(f"Entry {model.id} created for {owner_id} with {len(model.tasks)} task(s)")
            return Entry.model_validate(model)

    async def replace(self, owner_id: str, entry_id: int, entry: Entry) -> Entry:
        """
        Replace an entry's fields and its whole task list.

        Old tasks are removed and the submitted ones inserted in the same
        transaction, so no reader ever sees the entry without tasks.

        Raises:
            RecordNotFound: entry does not exist for this owner
            EmptyEntry: the submitted entry has no tasks
        """
        if not entry.tasks:
            raise EmptyEntry()

        session = await self._get_session()
        async with session:
            model = await self._load(session, owner_id, entry_id)
            if model is None:
                raise RecordNotFound("Entry", entry_id)

            model.entry_date = entry.entry_date
            model.supervisor = entry.supervisor
            model.notes = entry.notes
            model.total_hours = entry.total_hours
            model.updated_at = datetime.now()
            model.tasks.clear()
            model.tasks.extend(_task_model(t) for t in entry.tasks)

            await session.commit()

            model = await self._load(session, owner_id, entry_id)
            logger.info(f"Entry {entry_id} replaced with {len(model.tasks)} task(s)")
            return Entry.model_validate(model)

    async def delete(self, owner_id: str, entry_id: int) -> None:
        """Delete an entry and its tasks"""
        session = await self._get_session()
        async with session:
            model = await self._load(session, owner_id, entry_id)
            if model is None:
                raise RecordNotFound("Entry", entry_id)

            await session.delete(model)
            await session.commit()
            logger.info(f"Entry {entry_id} deleted")

    async def delete_task(self, owner_id: str, entry_id: int, task_id: int) -> Optional[Entry]:
        """
        Delete a single task from an entry.

        Removing the last task deletes the entry itself.

        Returns:
            The updated entry, or None if the entry was deleted
        """
        session = await self._get_session()
        async with session:
            model = await self._load(session, owner_id, entry_id)
            if model is None:
                raise RecordNotFound("Entry", entry_id)

            task_model = next((t for t in model.tasks if t.id == task_id), None)
            if task_model is None:
                raise RecordNotFound("Task", task_id)

            if len(model.tasks) == 1:
                await session.delete(model)
                await session.commit()
                logger.info(f"Last task {task_id} removed, entry {entry_id} deleted")
                return None

            model.tasks.remove(task_model)
            remaining = Entry.model_validate(model)
            model.total_hours = remaining.total_hours
            model.updated_at = datetime.now()
            await session.commit()

            model = await self._load(session, owner_id, entry_id)
            logger.info(f"Task {task_id} removed from entry {entry_id}")
            return Entry.model_validate(model)

    async def delete_all(self, owner_id: str) -> int:
        """Delete all entries of an owner. Returns count of deleted entries."""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                select(EntryModel).where(EntryModel.owner_id == owner_id)
            )
            models = result.scalars().all()
            for model in models:
                await session.delete(model)
            await session.commit()
            return len(models)


class NoteRepository(_Repository):
    """
    Handles Note persistence (regular notes and out-of-office records).
    """

    async def _load(self, session: AsyncSession, owner_id: str, note_id: int) -> Optional[NoteModel]:
        result = await session.execute(
            select(NoteModel).where(NoteModel.id == note_id, NoteModel.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def list_for_owner(self, owner_id: str, note_type: Optional[NoteType] = None) -> List[Note]:
        """Get notes of an owner, newest first, optionally of one type"""
        session = await self._get_session()
        async with session:
            stmt = select(NoteModel).where(NoteModel.owner_id == owner_id)
            if note_type is not None:
                stmt = stmt.where(NoteModel.note_type == note_type.value)

            result = await session.execute(stmt.order_by(NoteModel.created_at.desc(), NoteModel.id.desc()))
            return [Note.model_validate(m) for m in result.scalars().all()]

    async def get(self, owner_id: str, note_id: int) -> Optional[Note]:
        session = await self._get_session()
        async with session:
            model = await self._load(session, owner_id, note_id)
            return Note.model_validate(model) if model else None

    async def create(self, owner_id: str, note: Note) -> Note:
        """Create a new note"""
        session = await self._get_session()
        async with session:
            model = NoteModel(
                owner_id=owner_id,
                title=note.title,
                content=note.content,
                note_type=note.note_type.value,
                ooo_date=note.ooo_date,
                ooo_time_start=note.ooo_time_start,
                ooo_time_end=note.ooo_time_end,
                is_full_day=note.is_full_day,
                created_at=note.created_at,
                updated_at=note.updated_at,
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return Note.model_validate(model)

    async def update(self, owner_id: str, note_id: int, note: Note) -> Note:
        """Update title, content and OOO details of a note. The type is fixed at creation."""
        session = await self._get_session()
        async with session:
            model = await self._load(session, owner_id, note_id)
            if model is None:
                raise RecordNotFound("Note", note_id)

            # Revalidate against the stored type so OOO rules still apply
            merged = Note.model_validate({**note.model_dump(), "note_type": model.note_type})

            model.title = merged.title
            model.content = merged.content
            model.ooo_date = merged.ooo_date
            model.ooo_time_start = merged.ooo_time_start
            model.ooo_time_end = merged.ooo_time_end
            model.is_full_day = merged.is_full_day
            model.updated_at = datetime.now()

            await session.commit()
            await session.refresh(model)
            return Note.model_validate(model)

    async def delete(self, owner_id: str, note_id: int) -> None:
        """Delete a note"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                delete(NoteModel).where(NoteModel.id == note_id, NoteModel.owner_id == owner_id)
            )
            await session.commit()
            if result.rowcount == 0:
                raise RecordNotFound("Note", note_id)
            logger.info(f"Note {note_id} deleted")


class SettingsRepository(_Repository):
    """
    Handles the per-owner TrainingSettings row.

    The row is created lazily on first read. The unique constraint on
    owner_id makes concurrent first reads safe: the losing insert rolls
    back and reads the winner's row.
    """

    def __init__(self, session: Optional[AsyncSession] = None,
                 default_required_hours: float = DEFAULT_REQUIRED_HOURS):
        super().__init__(session)
        self.default_required_hours = default_required_hours

    async def _load(self, session: AsyncSession, owner_id: str) -> Optional[SettingsModel]:
        result = await session.execute(
            select(SettingsModel).where(SettingsModel.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, owner_id: str, student_name: str = "") -> TrainingSettings:
        """Get an owner's settings, creating the default row if absent"""
        session = await self._get_session()
        async with session:
            model = await self._load(session, owner_id)
            if model is None:
                session.add(SettingsModel(
                    owner_id=owner_id,
                    required_hours=self.default_required_hours,
                    student_name=student_name,
                ))
                try:
                    await session.commit()
                    logger.info(f"Default settings created for {owner_id}")
                except IntegrityError:
                    await session.rollback()
                    logger.info(f"Settings for {owner_id} created concurrently, re-reading")
                model = await self._load(session, owner_id)
            return TrainingSettings.model_validate(model)

    @staticmethod
    def _apply(model: SettingsModel, settings: TrainingSettings):
        model.required_hours = settings.required_hours
        model.student_name = settings.student_name
        model.start_date = settings.start_date
        model.end_date = settings.end_date
        model.theme = settings.theme

    async def update(self, owner_id: str, settings: TrainingSettings) -> TrainingSettings:
        """
        Create or update an owner's settings.

        If another request creates the row between the lookup and the
        insert, the insert is rolled back and that row is updated instead.
        """
        session = await self._get_session()
        async with session:
            model = await self._load(session, owner_id)
            if model is None:
                model = SettingsModel(owner_id=owner_id)
                self._apply(model, settings)
                session.add(model)
                try:
                    await session.commit()
                    logger.info(f"Settings created for {owner_id}")
                    return TrainingSettings.model_validate(model)
                except IntegrityError:
                    await session.rollback()
                    logger.info(f"Settings for {owner_id} created concurrently, updating")
                    model = await self._load(session, owner_id)

            self._apply(model, settings)
            await session.commit()
            return TrainingSettings.model_validate(model)
