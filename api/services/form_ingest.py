# api/services/form_ingest.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from api.core.exceptions import InvalidLeadTypeError
from api.core.logging import get_structlog_logger
from api.services.sheets import SheetsClient

logger = get_structlog_logger(__name__)

# Personal info columns, in row order after the timestamp.
CONTACT_FIELDS = ("name", "email", "phoneNumber")


@dataclass(frozen=True)
class FormIngestResult:
    lead_type: str
    row: List[str]
    data: Dict[str, Any] = field(default_factory=dict)


def preprocess_value(value: Any) -> str:
    """Flatten one submitted value into a spreadsheet cell.

    Lists are joined with "; " as-is. Plain strings lose every "$", have
    every "," turned into a space and are trimmed.
    """
    if isinstance(value, (list, tuple)):
        return "; ".join(_scalar_text(v) for v in value)
    if isinstance(value, str):
        return value.replace("$", "").replace(",", " ").strip()
    if value is None:
        return ""
    return _scalar_text(value)


def _scalar_text(value: Any) -> str:
    """JSON spelling of a scalar: null, true/false, 3 for 3.0."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def iso_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_row(payload: Mapping[str, Any], now: Optional[datetime] = None) -> List[str]:
    """[timestamp, name, email, phone, *remaining fields in payload order]."""
    extras = [
        preprocess_value(value)
        for key, value in payload.items()
        if key != "userType" and key not in CONTACT_FIELDS
    ]
    return [
        iso_timestamp(now),
        *(preprocess_value(payload.get(key)) for key in CONTACT_FIELDS),
        *extras,
    ]


async def ingest_submission(
    client: SheetsClient,
    payload: Mapping[str, Any],
    *,
    now: Optional[datetime] = None,
) -> FormIngestResult:
    user_type = payload.get("userType")
    if not isinstance(user_type, str) or user_type not in client.sheet_ids:
        logger.warning("form.invalid_user_type", user_type=user_type)
        raise InvalidLeadTypeError(details={"user_type": user_type})

    # Credentials are checked only once the lead type is known to be valid.
    client.require_ready()

    row = build_row(payload, now=now)
    logger.debug("form.row_built", user_type=user_type, row=row)

    data = await client.append_row(user_type, row)
    logger.info("form.ingested", user_type=user_type, columns=len(row))
    return FormIngestResult(lead_type=user_type, row=row, data=data or {})
