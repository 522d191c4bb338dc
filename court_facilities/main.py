"""
FastAPI entrypoint for Court Facilities.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool

from court_facilities.api import router
from court_facilities.config import Settings, get_settings
from court_facilities.db.session import get_connection_pool
from court_facilities.errors import CourtFacilitiesError, NotFoundError
from court_facilities.facilities import FacilitiesService
from court_facilities.ingestion import TermImportPipeline
from court_facilities.terms import TermService

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": {"code": code, "message": message}})


def create_app(settings: Settings | None = None, db_pool: ConnectionPool | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(), format="[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    )
    db_pool = db_pool if db_pool is not None else get_connection_pool(settings)
    term_service = TermService(db_pool)
    facilities_service = FacilitiesService(db_pool, settings)
    import_pipeline = TermImportPipeline(settings, term_service, db_pool)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if db_pool.closed:
            logger.info("Opening database pool")
            db_pool.open()
        yield
        db_pool.close()

    app = FastAPI(title="Court Facilities", version="0.1.0", lifespan=lifespan)
    app.include_router(router)
    app.state.settings = settings
    app.state.db_pool = db_pool
    app.state.term_service = term_service
    app.state.facilities_service = facilities_service
    app.state.import_pipeline = import_pipeline

    @app.exception_handler(CourtFacilitiesError)
    async def handle_domain_error(request: Request, exc: CourtFacilitiesError):
        status_code = 404 if isinstance(exc, NotFoundError) else 400
        return _error_response(status_code, exc.code, str(exc))

    @app.exception_handler(ValueError)
    async def handle_value_error(request: Request, exc: ValueError):
        logger.warning("Rejected request to %s: %s", request.url.path, exc)
        return _error_response(400, "invalid_request", str(exc))

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
