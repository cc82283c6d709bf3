# wizard/client.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)

UNKNOWN_ERROR = "Unknown error occurred"


@dataclass
class SubmissionResult:
    """Outcome of one POST to the submit-form endpoint."""
    success: bool
    message: str
    data: Dict = field(default_factory=dict)
    status_code: Optional[int] = None


class SubmissionClient:
    """Posts a finished questionnaire to the ingest endpoint.

    A single attempt per call; the caller decides whether to try again.
    ``timeout=None`` waits for the server indefinitely.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def submit(self, payload: Mapping[str, Any]) -> SubmissionResult:
        logger.info("submission.sending", url=self.url, user_type=payload.get("userType"))

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=dict(payload))
        except httpx.HTTPError as e:
            logger.error("submission.network_error", url=self.url, error=str(e))
            return SubmissionResult(success=False, message=str(e) or UNKNOWN_ERROR)

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            logger.error("submission.bad_body", status_code=response.status_code)
            return SubmissionResult(
                success=False,
                message=UNKNOWN_ERROR,
                status_code=response.status_code,
            )

        if response.is_success and body.get("success") is True:
            logger.info("submission.accepted", status_code=response.status_code)
            return SubmissionResult(
                success=True,
                message="Submitted",
                data=body.get("data") or {},
                status_code=response.status_code,
            )

        message = body.get("error") or UNKNOWN_ERROR
        logger.warning(
            "submission.rejected",
            status_code=response.status_code,
            error=message,
            detail=body.get("message"),
        )
        return SubmissionResult(
            success=False,
            message=message,
            data=body,
            status_code=response.status_code,
        )
