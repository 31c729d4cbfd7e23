from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from themekit.api.errors import register_api_exception_handlers
from themekit.api.router import router as api_router
from themekit.db.session import check_database, close_engine
from themekit.http.middleware import (
    PendingCookieMiddleware,
    RequestLoggingMiddleware,
    parse_skip_paths,
)
from themekit.logging_config import configure_logging, parse_redact_fields
from themekit.settings import settings
from themekit.web.routers import files as files_router

configure_logging(
    level=settings.log_level,
    log_format=settings.log_format,
    redact_fields=parse_redact_fields(settings.log_redact_fields),
    include_uvicorn_access=settings.log_uvicorn_access,
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    await close_engine()


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
register_api_exception_handlers(app)
app.add_middleware(PendingCookieMiddleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret_key,
    same_site="lax",
    https_only=settings.session_cookie_secure,
)
app.add_middleware(
    RequestLoggingMiddleware,
    log_requests=settings.log_requests,
    skip_paths=parse_skip_paths(settings.log_request_skip_paths),
)
app.include_router(api_router)
app.include_router(files_router.router)
app.mount(
    "/theme",
    StaticFiles(directory=Path(settings.themes_root), check_dir=False),
    name="theme",
)


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    if await check_database():
        return {"status": "ok"}
    raise HTTPException(status_code=500, detail="database unavailable")
