"""
HTTP routes.

Every route resolves the owner through get_owner_id and hands it to the
repositories; no route fetches a record and compares owners itself.
"""

import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from ojtlog.domain.models import Entry, Note, NoteType, TrainingSettings
from ojtlog.domain.errors import RecordNotFound
from ojtlog.domain.theme import ThemeState
from ojtlog.domain.timecalc import format_hours_minutes
from ojtlog.infra.config import Settings
from ojtlog.infra.repository import EntryRepository, NoteRepository, SettingsRepository
from ojtlog.services.calendar_service import CalendarService, month_grid
from ojtlog.services.export_service import ExportService
from ojtlog.services.log_service import SortMode, flatten_and_sort, paginate
from ojtlog.services.report_service import ProgressReport, ReportService
from ojtlog.web.deps import (
    get_app_settings, get_owner_id, get_entry_repo, get_note_repo, get_settings_repo,
)
from ojtlog.web.schemas import (
    EntryIn, TaskDeleted, NoteUpdate, LogPageOut, CalendarMonth, DayDetail, OOOMonth, Success,
)


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _month_or_current(year: Optional[int], month: Optional[int]):
    today = datetime.date.today()
    return year or today.year, month or today.month


# --- Entries -----------------------------------------------------------------

entries_router = APIRouter(prefix="/api/entries", tags=["entries"])


@entries_router.get("", response_model=List[Entry])
async def list_entries(owner_id: str = Depends(get_owner_id),
                       entry_repo: EntryRepository = Depends(get_entry_repo)):
    return await entry_repo.list_for_owner(owner_id)


@entries_router.post("", response_model=Entry, status_code=201)
async def create_entry(body: EntryIn,
                       owner_id: str = Depends(get_owner_id),
                       entry_repo: EntryRepository = Depends(get_entry_repo)):
    return await entry_repo.create(owner_id, body.to_entry())


@entries_router.put("/{entry_id}", response_model=Entry)
async def replace_entry(entry_id: int, body: EntryIn,
                        owner_id: str = Depends(get_owner_id),
                        entry_repo: EntryRepository = Depends(get_entry_repo)):
    return await entry_repo.replace(owner_id, entry_id, body.to_entry())


@entries_router.delete("/{entry_id}", response_model=Success)
async def delete_entry(entry_id: int,
                       owner_id: str = Depends(get_owner_id),
                       entry_repo: EntryRepository = Depends(get_entry_repo)):
    await entry_repo.delete(owner_id, entry_id)
    return Success()


@entries_router.delete("/{entry_id}/tasks/{task_id}", response_model=TaskDeleted)
async def delete_task(entry_id: int, task_id: int,
                      owner_id: str = Depends(get_owner_id),
                      entry_repo: EntryRepository = Depends(get_entry_repo)):
    entry = await entry_repo.delete_task(owner_id, entry_id, task_id)
    return TaskDeleted(entry_deleted=entry is None, entry=entry)


# --- Log table and calendar ----------------------------------------------------

logs_router = APIRouter(prefix="/api", tags=["logs"])


@logs_router.get("/logs", response_model=LogPageOut)
async def log_page(sort: SortMode = SortMode.CREATED,
                   page: int = Query(1, ge=1),
                   page_size: Optional[int] = None,
                   owner_id: str = Depends(get_owner_id),
                   settings: Settings = Depends(get_app_settings),
                   entry_repo: EntryRepository = Depends(get_entry_repo)):
    size = settings.page_size if page_size is None else page_size
    entries = await entry_repo.list_for_owner(owner_id)
    log = paginate(flatten_and_sort(entries, sort), size)
    return LogPageOut(page=page, page_size=size, total_pages=log.total_pages, tasks=log.page(page).tasks)


@logs_router.get("/calendar", response_model=CalendarMonth)
async def calendar_month(year: Optional[int] = Query(None, ge=1),
                         month: Optional[int] = Query(None, ge=1, le=12),
                         owner_id: str = Depends(get_owner_id),
                         entry_repo: EntryRepository = Depends(get_entry_repo)):
    year, month = _month_or_current(year, month)
    entries = await entry_repo.list_for_owner(owner_id)
    blanks, days = month_grid(year, month)
    return CalendarMonth(
        year=year, month=month, blanks=blanks, days=days,
        buckets=CalendarService().month_view(entries, year, month),
    )


@logs_router.get("/calendar/{day}", response_model=DayDetail)
async def calendar_day(day: datetime.date,
                       owner_id: str = Depends(get_owner_id),
                       entry_repo: EntryRepository = Depends(get_entry_repo)):
    entries = await entry_repo.list_for_owner(owner_id)
    tasks, total = CalendarService().day_detail(entries, day)
    return DayDetail(day=day, tasks=tasks, total_hours=total, total_label=format_hours_minutes(total))


# --- Notes -----------------------------------------------------------------------

notes_router = APIRouter(prefix="/api", tags=["notes"])


@notes_router.get("/notes", response_model=List[Note])
async def list_notes(note_type: Optional[NoteType] = Query(None, alias="type"),
                     owner_id: str = Depends(get_owner_id),
                     note_repo: NoteRepository = Depends(get_note_repo)):
    return await note_repo.list_for_owner(owner_id, note_type)


@notes_router.post("/notes", response_model=Note, status_code=201)
async def create_note(body: Note,
                      owner_id: str = Depends(get_owner_id),
                      note_repo: NoteRepository = Depends(get_note_repo)):
    return await note_repo.create(owner_id, body)


@notes_router.put("/notes/{note_id}", response_model=Note)
async def update_note(note_id: int, body: NoteUpdate,
                      owner_id: str = Depends(get_owner_id),
                      note_repo: NoteRepository = Depends(get_note_repo)):
    existing = await note_repo.get(owner_id, note_id)
    if existing is None:
        raise RecordNotFound("Note", note_id)

    note = Note.model_validate({**body.model_dump(), "note_type": existing.note_type})
    return await note_repo.update(owner_id, note_id, note)


@notes_router.delete("/notes/{note_id}", response_model=Success)
async def delete_note(note_id: int,
                      owner_id: str = Depends(get_owner_id),
                      note_repo: NoteRepository = Depends(get_note_repo)):
    await note_repo.delete(owner_id, note_id)
    return Success()


@notes_router.get("/ooo/calendar", response_model=OOOMonth)
async def ooo_month(year: Optional[int] = Query(None, ge=1),
                    month: Optional[int] = Query(None, ge=1, le=12),
                    owner_id: str = Depends(get_owner_id),
                    note_repo: NoteRepository = Depends(get_note_repo)):
    year, month = _month_or_current(year, month)
    notes = await note_repo.list_for_owner(owner_id, NoteType.OOO)
    blanks, days = month_grid(year, month)
    return OOOMonth(
        year=year, month=month, blanks=blanks, days=days,
        notes=CalendarService().ooo_month_view(notes, year, month),
    )


# --- Settings, stats and export --------------------------------------------------

reports_router = APIRouter(prefix="/api", tags=["reports"])


@reports_router.get("/settings", response_model=TrainingSettings)
async def read_settings(owner_id: str = Depends(get_owner_id),
                        settings_repo: SettingsRepository = Depends(get_settings_repo)):
    return await settings_repo.get_or_create(owner_id)


@reports_router.put("/settings", response_model=TrainingSettings)
async def update_settings(body: TrainingSettings,
                          owner_id: str = Depends(get_owner_id),
                          settings_repo: SettingsRepository = Depends(get_settings_repo)):
    if "theme" not in body.model_fields_set:
        # Keep the stored theme when the client only edits training fields
        current = await settings_repo.get_or_create(owner_id)
        body = body.model_copy(update={"theme": current.theme})
    return await settings_repo.update(owner_id, body)


@reports_router.get("/theme", response_model=ThemeState)
async def read_theme(system_dark: bool = False,
                     owner_id: str = Depends(get_owner_id),
                     settings_repo: SettingsRepository = Depends(get_settings_repo)):
    settings = await settings_repo.get_or_create(owner_id)
    return ThemeState.load(settings.theme, system_prefers_dark=system_dark)


@reports_router.post("/theme/toggle", response_model=ThemeState)
async def toggle_theme(system_dark: bool = False,
                       owner_id: str = Depends(get_owner_id),
                       settings_repo: SettingsRepository = Depends(get_settings_repo)):
    """Flip the resolved theme and store it as an explicit preference"""
    settings = await settings_repo.get_or_create(owner_id)
    theme = ThemeState.load(settings.theme, system_prefers_dark=system_dark).toggle()
    await settings_repo.update(owner_id, settings.model_copy(update={"theme": theme.theme}))
    return theme


@reports_router.get("/stats", response_model=ProgressReport)
async def progress(owner_id: str = Depends(get_owner_id),
                   entry_repo: EntryRepository = Depends(get_entry_repo),
                   settings_repo: SettingsRepository = Depends(get_settings_repo)):
    return await ReportService(entry_repo, settings_repo).build(owner_id)


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@reports_router.get("/export/csv")
async def export_csv(owner_id: str = Depends(get_owner_id),
                     settings: Settings = Depends(get_app_settings),
                     entry_repo: EntryRepository = Depends(get_entry_repo)):
    filename, content = await ExportService(entry_repo, settings.export_basename).export_csv(owner_id)
    return Response(content=content, media_type="text/csv; charset=utf-8", headers=_attachment(filename))


@reports_router.get("/export/xlsx")
async def export_xlsx(owner_id: str = Depends(get_owner_id),
                      settings: Settings = Depends(get_app_settings),
                      entry_repo: EntryRepository = Depends(get_entry_repo)):
    filename, content = await ExportService(entry_repo, settings.export_basename).export_xlsx(owner_id)
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=_attachment(filename))
