"""
Export Service - Renders time logs as an Excel workbook (XlsxWriter) or CSV.

Both formats share one row layout:
- days newest first, tasks of a day newest-created first
- a "TOTAL FOR <date>" row and a blank spacer row after each day
- a final "GRAND TOTAL" row

Durations are written as "X hrs Y min" rather than decimal hours.
"""

import csv
import datetime
import io
import logging
from typing import BinaryIO, Dict, Iterable, List, Optional, Tuple, Union

import xlsxwriter
from pydantic import BaseModel

from ojtlog.domain.models import Entry
from ojtlog.domain.timecalc import format_hours_minutes
from ojtlog.infra.repository import EntryRepository
from ojtlog.services.aggregation import total_hours

logger = logging.getLogger(__name__)

DEFAULT_BASENAME = "OJT_Time_Logs"
SHEET_NAME = "Time Logs"

# (header, row field, column width)
EXPORT_COLUMNS: List[Tuple[str, str, int]] = [
    ("Date", "date", 15),
    ("Day", "day", 12),
    ("Task", "task", 35),
    ("Time In", "time_in", 10),
    ("Time Out", "time_out", 10),
    ("Hours Rendered", "hours_rendered", 15),
    ("Category", "category", 20),
    ("Learning Outcome", "learning_outcome", 40),
    ("Created At", "created_at", 20),
]

# Free-text fields get commas replaced in CSV output
CSV_TEXT_FIELDS = ("task", "learning_outcome")


class RowKind:
    TASK = "task"
    DAY_TOTAL = "day_total"
    SPACER = "spacer"
    GRAND_TOTAL = "grand_total"


class ExportRow(BaseModel):
    """One line of the exported table; every cell is text"""
    kind: str = RowKind.TASK
    date: str = ""
    day: str = ""
    task: str = ""
    time_in: str = ""
    time_out: str = ""
    hours_rendered: str = ""
    category: str = ""
    learning_outcome: str = ""
    created_at: str = ""

    def cells(self) -> List[str]:
        return [getattr(self, field) for _, field, _ in EXPORT_COLUMNS]


def format_export_date(day: datetime.date) -> str:
    """Export date, e.g. "May 1, 2024"."""
    return f"{day:%b} {day.day}, {day.year}"


def format_created_at(value: datetime.datetime) -> str:
    """Creation timestamp, e.g. "May 01, 2024, 09:30 AM"."""
    return value.strftime("%b %d, %Y, %I:%M %p")


def export_filename(extension: str, today: Optional[datetime.date] = None,
                    basename: str = DEFAULT_BASENAME) -> str:
    """File name with the export date embedded, e.g. OJT_Time_Logs_2024-05-01.csv"""
    today = today or datetime.date.today()
    return f"{basename}_{today.isoformat()}.{extension.lstrip('.')}"


def to_table(entries: Iterable[Entry]) -> List[ExportRow]:
    """Build the export rows for a set of entries"""
    entries = list(entries)

    days: Dict[datetime.date, List[Entry]] = {}
    for entry in entries:
        days.setdefault(entry.entry_date, []).append(entry)

    rows: List[ExportRow] = []
    for day in sorted(days, reverse=True):
        day_entries = days[day]
        date_str = format_export_date(day)
        day_name = day.strftime("%A")

        tasks = [(task, entry) for entry in day_entries for task in entry.tasks]
        tasks.sort(key=lambda pair: pair[0].created_at, reverse=True)

        for task, entry in tasks:
            rows.append(ExportRow(
                date=date_str,
                day=day_name,
                task=task.task_name,
                time_in=task.time_in,
                time_out=task.time_out,
                hours_rendered=format_hours_minutes(task.hours_rendered),
                category=task.category.value,
                learning_outcome=entry.learning_outcome,
                created_at=format_created_at(task.created_at),
            ))

        rows.append(ExportRow(
            kind=RowKind.DAY_TOTAL,
            task=f"TOTAL FOR {date_str}",
            hours_rendered=format_hours_minutes(total_hours(day_entries)),
        ))
        rows.append(ExportRow(kind=RowKind.SPACER))

    rows.append(ExportRow(
        kind=RowKind.GRAND_TOTAL,
        task="GRAND TOTAL",
        hours_rendered=format_hours_minutes(total_hours(entries)),
    ))
    return rows


def to_csv(entries: Iterable[Entry]) -> str:
    """
    Render entries as CSV text.

    Every field is quoted; commas inside task names and learning outcomes
    are replaced with semicolons. Spacer rows are empty lines.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')

    writer.writerow([header for header, _, _ in EXPORT_COLUMNS])

    for row in to_table(entries):
        if row.kind == RowKind.SPACER:
            writer.writerow([])
            continue

        if row.kind == RowKind.TASK:
            row = row.model_copy(update={
                field: getattr(row, field).replace(",", ";") for field in CSV_TEXT_FIELDS
            })
        writer.writerow(row.cells())

    return output.getvalue()


def to_xlsx(entries: Iterable[Entry], output: Union[str, BinaryIO]) -> None:
    """
    Write entries to a single-sheet workbook.

    Args:
        entries: Entries to export
        output: File path or binary stream (e.g. io.BytesIO)
    """
    rows = to_table(entries)

    workbook = xlsxwriter.Workbook(output, {'in_memory': True})
    try:
        fmt_header = workbook.add_format({
            'bold': True, 'bg_color': '#4472C4', 'font_color': 'white', 'border': 1
        })
        fmt_day_total = workbook.add_format({
            'bold': True, 'bg_color': '#FFF2CC', 'border': 1
        })
        fmt_grand_total = workbook.add_format({
            'bold': True, 'bg_color': '#DDEBF7', 'border': 1
        })

        worksheet = workbook.add_worksheet(SHEET_NAME)
        for col, (header, _, width) in enumerate(EXPORT_COLUMNS):
            worksheet.set_column(col, col, width)
            worksheet.write_string(0, col, header, fmt_header)
        worksheet.freeze_panes(1, 0)

        row_formats = {
            RowKind.DAY_TOTAL: fmt_day_total,
            RowKind.GRAND_TOTAL: fmt_grand_total,
        }
        for row_idx, row in enumerate(rows, start=1):
            if row.kind == RowKind.SPACER:
                continue
            fmt = row_formats.get(row.kind)
            for col, value in enumerate(row.cells()):
                if fmt is not None:
                    worksheet.write_string(row_idx, col, value, fmt)
                elif value:
                    worksheet.write_string(row_idx, col, value)
    finally:
        workbook.close()


class ExportService:
    """
    Loads an owner's entries and produces downloadable exports.
    """

    def __init__(self, entry_repo: Optional[EntryRepository] = None,
                 basename: str = DEFAULT_BASENAME):
        self.entry_repo = entry_repo or EntryRepository()
        self.basename = basename

    async def export_csv(self, owner_id: str, today: Optional[datetime.date] = None) -> Tuple[str, str]:
        """Returns (filename, csv text)"""
        entries = await self.entry_repo.list_for_owner(owner_id)
        content = to_csv(entries)
        filename = export_filename("csv", today, self.basename)
        logger.info(f"CSV export {filename} with {len(entries)} entries for {owner_id}")
        return filename, content

    async def export_xlsx(self, owner_id: str, today: Optional[datetime.date] = None) -> Tuple[str, bytes]:
        """Returns (filename, workbook bytes)"""
        entries = await self.entry_repo.list_for_owner(owner_id)
        buffer = io.BytesIO()
        to_xlsx(entries, buffer)
        filename = export_filename("xlsx", today, self.basename)
        logger.info(f"Excel export {filename} with {len(entries)} entries for {owner_id}")
        return filename, buffer.getvalue()
