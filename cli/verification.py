# cli/verification.py
"""
Checks against a running lead form API.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx


@dataclass
class VerificationResult:
    success: bool
    message: str
    data: Dict = field(default_factory=dict)


async def check_api_health(
    api_url: str = "http://localhost:8000",
    api_prefix: str = "/api",
    timeout: float = 5.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> VerificationResult:
    """The API answers its liveness probe and its Sheets client is ready."""
    live_url = f"{api_url}{api_prefix}/health/live"
    ready_url = f"{api_url}{api_prefix}/health/ready"

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        try:
            live = await client.get(live_url)
            if live.status_code != 200:
                return VerificationResult(
                    success=False,
                    message=f"API health check failed with status {live.status_code}",
                    data={"status_code": live.status_code, "url": live_url},
                )
            ready = await client.get(ready_url)
        except httpx.RequestError as e:
            return VerificationResult(
                success=False,
                message=f"API not accessible at {api_url}: {e}",
                data={"error": str(e), "url": api_url},
            )

    if ready.status_code != 200:
        return VerificationResult(
            success=False,
            message="API is up but Google Sheets is not ready",
            data={"status_code": ready.status_code, "url": ready_url},
        )
    return VerificationResult(
        success=True,
        message="API is up and Google Sheets is ready",
        data={"status_code": ready.status_code, "url": ready_url},
    )
