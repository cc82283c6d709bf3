# api/middleware/logging.py
from __future__ import annotations

import time
from typing import Dict, Mapping

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from api.core.config import settings
from api.core.logging import get_structlog_logger

logger = get_structlog_logger(__name__)

REDACTED_HEADER_PARTS = ("authorization", "cookie", "api-key", "token", "secret")


def quiet_paths(api_prefix: str) -> frozenset:
    """Health probes under ``api_prefix`` and the metrics scrape; no log line each."""
    health = f"{api_prefix}/health"
    return frozenset({health, f"{health}/live", f"{health}/ready", "/metrics"})


QUIET_PATHS = quiet_paths(settings.api_prefix)


def filter_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy of ``headers`` with credential-bearing values replaced."""
    return {
        key: "[REDACTED]" if any(part in key.lower() for part in REDACTED_HEADER_PARTS) else value
        for key, value in headers.items()
    }


class LoggingMiddleware(BaseHTTPMiddleware):
    """One event per request and one per response, timed."""

    async def dispatch(self, request: Request, call_next):
        quiet = request.url.path in QUIET_PATHS
        started = time.perf_counter()
        base = {"method": request.method, "path": request.url.path}

        if not quiet:
            logger.info(
                "request.received",
                client_ip=request.client.host if request.client else None,
                content_length=request.headers.get("content-length"),
                headers=filter_headers(request.headers),
                **base,
            )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("request.crashed", error_type=type(e).__name__, error=str(e), **base)
            raise

        elapsed = time.perf_counter() - started
        response.headers["X-Response-Time"] = f"{elapsed:.3f}"

        if not quiet:
            log = logger.warning if response.status_code >= 400 else logger.info
            log(
                "response.sent",
                status_code=response.status_code,
                response_time_ms=round(elapsed * 1000, 1),
                **base,
            )
        return response
