# api/routes/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.core.config import settings
from api.core.logging import get_structlog_logger
from api.services.sheets import SheetsClient

logger = get_structlog_logger(__name__)

router = APIRouter(tags=["health"])

SERVICE_NAME = "lead_form_api"


class SheetsStatus(BaseModel):
    status: str
    lead_types: Optional[str] = None
    error: Optional[str] = None


class HealthCheckResponse(BaseModel):
    status: str
    service: str
    environment: str
    timestamp: str
    uptime: float
    checks: Dict[str, SheetsStatus]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def check_sheets(client: Optional[SheetsClient]) -> SheetsStatus:
    """Whether the shared Sheets client finished initialization."""
    if client is None:
        return SheetsStatus(status="unavailable", error="sheets client not configured")
    if not client.is_ready:
        return SheetsStatus(status="unhealthy", error=client.init_error or "not initialized")
    return SheetsStatus(status="healthy", lead_types=",".join(sorted(client.sheet_ids)))


@router.get("/health", response_model=HealthCheckResponse, response_model_exclude_none=True)
async def health_check(request: Request):
    sheets = check_sheets(getattr(request.app.state, "sheets_client", None))

    import psutil
    process = psutil.Process()

    response = HealthCheckResponse(
        status="healthy" if sheets.status == "healthy" else "unhealthy",
        service=SERVICE_NAME,
        environment=settings.environment,
        timestamp=_utc_now(),
        uptime=time.time() - process.create_time(),
        checks={"google_sheets": sheets},
    )
    if response.status != "healthy":
        logger.warning("health.degraded", google_sheets=sheets.status, error=sheets.error)
    return response


@router.get("/health/live", status_code=status.HTTP_200_OK)
async def liveness_probe():
    return {"status": "alive", "timestamp": _utc_now()}


@router.get("/health/ready")
async def readiness_probe(request: Request):
    """Ready only once the Sheets client can append rows."""
    sheets = check_sheets(getattr(request.app.state, "sheets_client", None))
    ready = sheets.status == "healthy"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": _utc_now(),
            "checks": {"google_sheets": sheets.status},
        },
    )
