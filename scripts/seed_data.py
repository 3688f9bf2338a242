"""
Data Seeder for OJT Log.
Populates the database with realistic entries for one demo owner.

Usage:
    python scripts/seed_data.py [owner-id]
"""

import asyncio
import random
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ojtlog.domain.models import Category, Entry, Note, NoteType, Task, TrainingSettings
from ojtlog.infra.db import init_db
from ojtlog.infra.repository import EntryRepository, NoteRepository, SettingsRepository

SUPERVISORS = ["M. Santos", "J. Reyes"]
OUTCOMES = [
    "Learned how the deployment pipeline works",
    "Paired with the team on code review, picked up testing conventions",
    None,
]

# (time in, time out, task, category)
DAY_TEMPLATE = [
    ("08:00", "09:00", "Daily stand-up and planning", Category.MEETING),
    ("09:00", "12:00", "Feature implementation", Category.DEVELOPMENT),
    ("13:00", "15:00", "Reading internal documentation", Category.LEARNING),
    ("15:00", "17:00", "Write-up of findings", Category.DOCUMENTATION),
]


async def seed(owner_id: str):
    await init_db()
    print(f"Seeding data for owner: {owner_id}")

    entry_repo = EntryRepository()
    note_repo = NoteRepository()
    settings_repo = SettingsRepository()

    await settings_repo.update(owner_id, TrainingSettings(
        required_hours=486,
        student_name="Demo Student",
        start_date=date(2026, 1, 5),
        end_date=date(2026, 4, 30),
    ))

    removed = await entry_repo.delete_all(owner_id)
    if removed:
        print(f"Removed {removed} existing entries")

    current = date(2026, 1, 5)
    end = date(2026, 2, 27)
    count = 0
    while current <= end:
        if current.weekday() < 5:
            tasks = []
            for offset, (time_in, time_out, name, category) in enumerate(DAY_TEMPLATE):
                # Skip some afternoon blocks for variety
                if offset == 3 and random.random() < 0.3:
                    continue
                tasks.append(Task(
                    time_in=time_in,
                    time_out=time_out,
                    task_name=name,
                    category=category,
                    created_at=datetime.combine(current, datetime.min.time()) + timedelta(hours=17, minutes=offset),
                ))

            await entry_repo.create(owner_id, Entry(
                entry_date=current,
                supervisor=random.choice(SUPERVISORS),
                notes=random.choice(OUTCOMES),
                tasks=tasks,
            ))
            count += 1
        current += timedelta(days=1)

    await note_repo.create(owner_id, Note(
        title="Dentist appointment",
        note_type=NoteType.OOO,
        ooo_date=date(2026, 2, 12),
        ooo_time_start="13:00",
        ooo_time_end="15:00",
    ))

    print(f"Seeding complete: {count} entries")


if __name__ == "__main__":
    asyncio.run(seed(sys.argv[1] if len(sys.argv) > 1 else "demo-user"))
