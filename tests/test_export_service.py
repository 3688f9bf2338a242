"""
Tests for CSV and Excel export of time logs.
"""

import io
from datetime import date, datetime

import pytest

from ojtlog.domain.models import Category
from ojtlog.infra.repository import EntryRepository
from ojtlog.services.export_service import (
    ExportService, RowKind, export_filename, format_created_at, format_export_date,
    to_csv, to_table, to_xlsx,
)
from conftest import make_entry, make_task, ten_minute_tasks


def test_format_export_date():
    assert format_export_date(date(2024, 5, 1)) == "May 1, 2024"
    assert format_export_date(date(2024, 12, 25)) == "Dec 25, 2024"


def test_format_created_at():
    assert format_created_at(datetime(2024, 5, 1, 17, 5)) == "May 01, 2024, 05:05 PM"


def test_export_filename():
    assert export_filename("csv", date(2024, 5, 1)) == "OJT_Time_Logs_2024-05-01.csv"
    assert export_filename(".xlsx", date(2024, 5, 1), basename="Logs") == "Logs_2024-05-01.xlsx"


class TestTable:

    def test_scenario_layout(self, scenario_entries):
        rows = to_table(scenario_entries)

        assert [r.kind for r in rows] == [
            RowKind.TASK, RowKind.TASK, RowKind.TASK,
            RowKind.DAY_TOTAL, RowKind.SPACER, RowKind.GRAND_TOTAL,
        ]
        # Tasks of both entries merged, newest created first
        assert [r.task for r in rows[:3]] == ["Write API tests", "Build login form", "Stand-up"]

        first = rows[0]
        assert first.date == "May 1, 2024"
        assert first.day == "Wednesday"
        assert first.hours_rendered == "4 hrs"
        assert first.category == "Learning"
        assert first.learning_outcome == "Learned form validation"
        assert rows[2].learning_outcome == "-"

        assert rows[3].task == "TOTAL FOR May 1, 2024"
        assert rows[3].hours_rendered == "8 hrs"
        assert rows[5].task == "GRAND TOTAL"
        assert rows[5].hours_rendered == "8 hrs"

    def test_days_newest_first(self):
        entries = [
            make_entry("2024-04-30", make_task("09:00", "10:30")),
            make_entry("2024-05-02", make_task("09:00", "10:00")),
        ]
        totals = [r for r in to_table(entries) if r.kind != RowKind.TASK and r.task]

        assert [r.task for r in totals] == [
            "TOTAL FOR May 2, 2024", "TOTAL FOR Apr 30, 2024", "GRAND TOTAL",
        ]
        assert totals[-1].hours_rendered == "2 hrs 30 min"

    def test_minute_tasks_total_one_hour(self):
        rows = to_table([make_entry("2024-05-01", *ten_minute_tasks())])

        assert {r.hours_rendered for r in rows if r.kind == RowKind.TASK} == {"10 min"}
        assert rows[-3].task == "TOTAL FOR May 1, 2024"
        assert rows[-3].hours_rendered == "1 hr"
        assert rows[-1].hours_rendered == "1 hr"

    def test_no_entries_gives_grand_total_only(self):
        rows = to_table([])
        assert len(rows) == 1
        assert rows[0].hours_rendered == "0 min"


class TestCsv:

    def test_header_and_quoting(self, scenario_entries):
        lines = to_csv(scenario_entries).split("\n")

        assert lines[0] == (
            '"Date","Day","Task","Time In","Time Out","Hours Rendered",'
            '"Category","Learning Outcome","Created At"'
        )
        assert lines[1].startswith('"May 1, 2024","Wednesday","Write API tests","13:00","17:00","4 hrs"')

    def test_commas_in_text_fields_replaced(self):
        entry = make_entry(
            "2024-05-01",
            make_task("09:00", "10:00", "Design, review", category=Category.DOCUMENTATION),
            notes="Specs, diagrams",
        )
        text = to_csv([entry])

        assert '"Design; review"' in text
        assert '"Specs; diagrams"' in text
        # Dates keep their comma
        assert '"May 1, 2024"' in text

    def test_spacer_is_blank_line(self, scenario_entries):
        lines = to_csv(scenario_entries).split("\n")

        assert lines[4].startswith('"","","TOTAL FOR May 1, 2024"')
        assert lines[5] == ""
        assert lines[6].startswith('"","","GRAND TOTAL"')


class TestXlsx:

    def test_writes_workbook_to_stream(self, scenario_entries):
        buffer = io.BytesIO()
        to_xlsx(scenario_entries, buffer)

        # xlsx files are zip archives
        assert buffer.getvalue()[:2] == b"PK"

    def test_writes_workbook_to_path(self, tmp_path, scenario_entries):
        path = tmp_path / "logs.xlsx"
        to_xlsx(scenario_entries, str(path))
        assert path.read_bytes()[:2] == b"PK"


@pytest.mark.asyncio
async def test_export_service_scoped_to_owner(db_session, scenario_entries):
    repo = EntryRepository(session=db_session)
    for entry in scenario_entries:
        await repo.create("alice", entry)
    await repo.create("bob", make_entry("2024-06-01", make_task("09:00", "10:00", "Bob's task")))

    service = ExportService(entry_repo=repo)
    filename, content = await service.export_csv("alice", today=date(2024, 5, 2))

    assert filename == "OJT_Time_Logs_2024-05-02.csv"
    assert "Write API tests" in content
    assert "Bob's task" not in content

    filename, data = await service.export_xlsx("alice", today=date(2024, 5, 2))
    assert filename.endswith(".xlsx")
    assert data[:2] == b"PK"
