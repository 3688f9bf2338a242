"""
Pytest configuration and fixtures.
"""

import sys
from datetime import date, datetime
from pathlib import Path
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from ojtlog.infra.db import Base
from ojtlog.domain.models import Category, Entry, Task


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite database for testing"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create a new session for a test"""
    async_session = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


def make_task(time_in, time_out, name="Task", category=Category.DEVELOPMENT, created_at=None, **kwargs):
    """Build a Task; created_at defaults to a fixed timestamp"""
    return Task(
        time_in=time_in,
        time_out=time_out,
        task_name=name,
        category=category,
        created_at=created_at or datetime(2024, 5, 1, 18, 0),
        **kwargs,
    )


def make_entry(day, *tasks, notes=None, supervisor="M. Santos", **kwargs):
    """Build an Entry for a date given as date or ISO string"""
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return Entry(entry_date=day, tasks=list(tasks), notes=notes, supervisor=supervisor, **kwargs)


@pytest.fixture
def scenario_entries():
    """
    Two entries on 2024-05-01:
    - 09:00-12:00 (3h) and 13:00-17:00 (4h)
    - 08:00-09:00 (1h)
    """
    return [
        make_entry(
            "2024-05-01",
            make_task("09:00", "12:00", "Build login form", created_at=datetime(2024, 5, 1, 12, 5)),
            make_task("13:00", "17:00", "Write API tests", category=Category.LEARNING,
                      created_at=datetime(2024, 5, 1, 17, 5)),
            notes="Learned form validation",
        ),
        make_entry(
            "2024-05-01",
            make_task("08:00", "09:00", "Stand-up", category=Category.MEETING,
                      created_at=datetime(2024, 5, 1, 9, 5)),
        ),
    ]


def ten_minute_tasks(count=6):
    """Back-to-back 10 minute tasks from 09:00 (six of them make exactly one hour)"""
    tasks = []
    for i in range(count):
        start, end = 9 * 60 + i * 10, 9 * 60 + (i + 1) * 10
        tasks.append(make_task(f"{start // 60:02d}:{start % 60:02d}", f"{end // 60:02d}:{end % 60:02d}", f"Block {i + 1}"))
    return tasks
