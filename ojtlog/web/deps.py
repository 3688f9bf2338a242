"""
Request dependencies: identity, configuration and database session.

Authentication itself happens upstream (auth gateway / reverse proxy); it
forwards the verified user id in a header. Requests without it are rejected.
"""

from typing import AsyncIterator

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ojtlog.infra.config import Settings, get_settings
from ojtlog.infra.db import get_engine
from ojtlog.infra.repository import EntryRepository, NoteRepository, SettingsRepository


def get_app_settings() -> Settings:
    return get_settings()


def get_owner_id(request: Request, settings: Settings = Depends(get_app_settings)) -> str:
    """Authenticated owner id, taken from the identity header"""
    owner_id = request.headers.get(settings.identity_header, "").strip()
    if not owner_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return owner_id


async def get_session() -> AsyncIterator[AsyncSession]:
    """Request-scoped session, closed when the request finishes"""
    async with get_engine().get_session() as session:
        yield session


def get_entry_repo(session: AsyncSession = Depends(get_session)) -> EntryRepository:
    return EntryRepository(session=session)


def get_note_repo(session: AsyncSession = Depends(get_session)) -> NoteRepository:
    return NoteRepository(session=session)


def get_settings_repo(session: AsyncSession = Depends(get_session),
                      settings: Settings = Depends(get_app_settings)) -> SettingsRepository:
    return SettingsRepository(session=session, default_required_hours=settings.default_required_hours)
