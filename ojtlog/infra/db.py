"""
SQLAlchemy database models and configuration.

Architecture Decision: Why SQLAlchemy?
- Provides ORM for cleaner code and prevents SQL injection
- Supports async operations for non-blocking database access
- Easy to migrate to PostgreSQL or other databases if needed

Every table carries an owner_id; repositories filter on it in every query.
"""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, Float, Date, DateTime, Boolean, Text, ForeignKey


# Base class for all models
class Base(DeclarativeBase):
    pass


class EntryModel(Base):
    """SQLAlchemy model for Entry entity"""
    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    supervisor: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Written on every save for reporting tools, never read back as truth
    total_hours: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    tasks: Mapped[List["TaskModel"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TaskModel.created_at",
    )


class TaskModel(Base):
    """SQLAlchemy model for Task entity"""
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entry_id: Mapped[int] = mapped_column(Integer, ForeignKey("entries.id", ondelete="CASCADE"), nullable=False)
    time_in: Mapped[str] = mapped_column(String(5), nullable=False)
    time_out: Mapped[str] = mapped_column(String(5), nullable=False)
    hours_rendered: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    task_name: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=False)

    entry: Mapped[EntryModel] = relationship(back_populates="tasks")


class NoteModel(Base):
    """SQLAlchemy model for Note entity (regular and out-of-office)"""
    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    note_type: Mapped[str] = mapped_column(String(20), default="regular", nullable=False)
    ooo_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    ooo_time_start: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    ooo_time_end: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    is_full_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)


class SettingsModel(Base):
    """SQLAlchemy model for per-user training settings (one row per owner)"""
    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    required_hours: Mapped[float] = mapped_column(Float, nullable=False)
    student_name: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    theme: Mapped[str] = mapped_column(String(10), default="auto", nullable=False)


class DatabaseEngine:
    """
    Manages database connection and session lifecycle.

    Singleton pattern ensures only one engine exists per application.
    """
    _instance: Optional['DatabaseEngine'] = None

    def __init__(self, db_url: str):
        self.engine = create_async_engine(db_url, echo=False)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    @classmethod
    def get_instance(cls, db_url: Optional[str] = None) -> 'DatabaseEngine':
        """Get or create the database engine instance"""
        if cls._instance is None:
            if db_url is None:
                from ojtlog.infra.config import get_settings
                db_url = get_settings().get_db_url()

            cls._instance = cls(db_url)
        return cls._instance

    @classmethod
    async def reset(cls):
        """Dispose the current engine so the next call creates a new one"""
        if cls._instance is not None:
            await cls._instance.engine.dispose()
            cls._instance = None

    async def create_tables(self):
        """Create all tables in the database"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def get_session(self) -> AsyncSession:
        """Get a new database session"""
        return self.session_factory()


# Convenience functions
def get_engine(db_url: Optional[str] = None) -> DatabaseEngine:
    """Get the database engine instance"""
    return DatabaseEngine.get_instance(db_url)


async def init_db(db_url: Optional[str] = None):
    """Initialize the database (create tables)"""
    engine = get_engine(db_url)
    await engine.create_tables()
