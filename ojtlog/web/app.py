"""
FastAPI application factory.

Domain errors are translated here so route handlers can let them propagate:
missing/foreign records become 404, other domain errors 400 and model
validation failures 422.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ojtlog.domain.errors import OJTError, RecordNotFound
from ojtlog.infra.config import get_settings
from ojtlog.infra.db import init_db
from ojtlog.web.routes import entries_router, logs_router, notes_router, reports_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db(get_settings().get_db_url())
    logger.info("Database ready")
    yield


async def _not_found(request: Request, exc: RecordNotFound):
    logger.info(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=404, content={"error": str(exc)})


async def _bad_request(request: Request, exc: OJTError):
    logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _invalid(request: Request, exc: ValidationError):
    logger.warning(f"{request.method} {request.url.path} invalid: {exc.error_count()} error(s)")
    return JSONResponse(
        status_code=422,
        content={"error": "Validation failed", "detail": exc.errors(include_url=False, include_context=False, include_input=False)},
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_exception_handler(RecordNotFound, _not_found)
    app.add_exception_handler(OJTError, _bad_request)
    app.add_exception_handler(ValidationError, _invalid)

    app.include_router(entries_router)
    app.include_router(logs_router)
    app.include_router(notes_router)
    app.include_router(reports_router)
    return app
