# api/main.py
from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from api.core.config import settings
from api.core.exceptions import BaseAPIException, SheetsInitializationError
from api.core.logging import configure_structlog, get_structlog_logger
from api.middleware.logging import LoggingMiddleware
from api.middleware.request_id import RequestIdMiddleware
from api.routes import forms, health
from api.services.sheets import SheetsClient

configure_structlog()
logger = get_structlog_logger(__name__)


def _init_sentry() -> None:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        integrations=[FastApiIntegration(), StarletteIntegration()],
        traces_sample_rate=1.0 if settings.is_development else 0.1,
        send_default_pii=False,
    )
    logger.info("sentry.initialized")


def _init_sheets_client(app: FastAPI) -> None:
    """Build the shared Sheets client unless one was injected already."""
    if getattr(app.state, "sheets_client", None) is not None:
        return

    client = SheetsClient.from_settings(settings)
    try:
        client.initialize()
    except SheetsInitializationError as e:
        # Submissions answer 500 until the process restarts with valid credentials.
        logger.error("sheets.unavailable", error=e.details.get("error"))
    app.state.sheets_client = client


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("lead_form.starting", environment=settings.environment)

    if settings.sentry_dsn:
        _init_sentry()
    _init_sheets_client(app)

    logger.info("lead_form.ready", sheets_ready=app.state.sheets_client.is_ready)
    yield
    logger.info("lead_form.stopped")


app = FastAPI(
    title="Lead Form API",
    version="1.0.0",
    description="Appends buy/sell/rent questionnaire submissions to Google Sheets",
    docs_url="/docs" if settings.is_development else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.is_development else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins(),
    allow_methods=settings.methods(),
    allow_headers=settings.headers(),
    expose_headers=["X-Request-ID", "X-Response-Time"],
)
app.add_middleware(LoggingMiddleware)
# Added last so it runs first and the logging middleware sees the id.
app.add_middleware(RequestIdMiddleware)


def failure_response(status_code: int, error: str, message: str, **headers: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message},
        headers=headers or None,
    )


@app.exception_handler(BaseAPIException)
async def api_exception_handler(request: Request, exc: BaseAPIException):
    logger.warning(
        "submission.rejected" if exc.status_code < 500 else "submission.failed",
        status_code=exc.status_code,
        code=exc.code,
        details=exc.details,
        path=request.url.path,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or a body that is not an object."""
    problems = [f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('type')}" for e in exc.errors()]
    logger.warning("submission.malformed", path=request.url.path, problems=problems)
    return failure_response(status.HTTP_400_BAD_REQUEST, "Bad Request", "Request validation failed")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    error_id = uuid.uuid4().hex[:12]
    logger.error(
        "unhandled.exception",
        error_id=error_id,
        error_type=type(exc).__name__,
        error=str(exc),
        path=request.url.path,
    )
    # Exception text stays in the log.
    return failure_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
        **{"X-Error-ID": error_id},
    )


app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(forms.router, prefix=settings.api_prefix, tags=["forms"])

if not settings.is_testing:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "name": app.title,
        "version": app.version,
        "submit": f"{settings.api_prefix}/submit-form",
        "health": f"{settings.api_prefix}/health",
    }
