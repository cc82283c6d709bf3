# api/services/sheets.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

import gspread
from fastapi import Request
from google.oauth2.service_account import Credentials
from starlette.concurrency import run_in_threadpool

from api.core.config import Settings
from api.core.exceptions import (
    InvalidLeadTypeError,
    SheetsAppendError,
    SheetsInitializationError,
)
from api.core.logging import get_structlog_logger

logger = get_structlog_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class SheetsClient:
    """Appends lead rows to one spreadsheet per lead type.

    Built once per process and shared by every request. ``initialize`` must
    succeed before ``append_row`` is usable; a failed initialization is
    reported on each append attempt rather than retried.
    """

    def __init__(
        self,
        credentials_json: str,
        sheet_ids: Mapping[str, str],
        *,
        append_range: str = "A2",
        value_input_option: str = "USER_ENTERED",
        insert_data_option: str = "INSERT_ROWS",
    ):
        self.credentials_json = credentials_json
        self.sheet_ids: Dict[str, str] = dict(sheet_ids)
        self.append_range = append_range
        self.value_input_option = value_input_option
        self.insert_data_option = insert_data_option
        self._gc: Optional[gspread.Client] = None
        self._init_error: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SheetsClient":
        return cls(
            settings.google_application_credentials,
            settings.sheet_ids(),
            append_range=settings.sheet_append_range,
            value_input_option=settings.sheet_value_input_option,
            insert_data_option=settings.sheet_insert_data_option,
        )

    @property
    def is_ready(self) -> bool:
        return self._gc is not None

    @property
    def init_error(self) -> Optional[str]:
        return self._init_error

    def initialize(self) -> None:
        """Parse the service-account JSON and authorize a gspread client."""
        try:
            info = json.loads(self.credentials_json or "{}")
            credentials = Credentials.from_service_account_info(info, scopes=SCOPES)
            self._gc = gspread.authorize(credentials)
        except Exception as e:
            self._gc = None
            self._init_error = str(e)
            logger.error("sheets.init_failed", error=str(e), error_type=type(e).__name__)
            raise SheetsInitializationError(details={"error": str(e)}) from e

        self._init_error = None
        logger.info("sheets.initialized", lead_types=sorted(self.sheet_ids))

    def require_ready(self) -> gspread.Client:
        if self._gc is None:
            raise SheetsInitializationError(
                details={"error": self._init_error or "GoogleAuth not initialized"}
            )
        return self._gc

    def sheet_id_for(self, lead_type: Optional[str]) -> str:
        if not lead_type or lead_type not in self.sheet_ids:
            raise InvalidLeadTypeError(details={"user_type": lead_type})
        return self.sheet_ids[lead_type]

    def _append(self, sheet_id: str, values: List[List[str]]) -> Dict[str, Any]:
        gc = self.require_ready()
        # One API call per row: values:append without opening the spreadsheet.
        return gc.http_client.values_append(
            sheet_id,
            self.append_range,
            params={
                "valueInputOption": self.value_input_option,
                "insertDataOption": self.insert_data_option,
            },
            body={"values": values},
        )

    async def append_row(self, lead_type: str, row: List[str]) -> Dict[str, Any]:
        """Insert ``row`` as a new row in the lead type's spreadsheet."""
        sheet_id = self.sheet_id_for(lead_type)
        self.require_ready()

        logger.info("sheets.appending", lead_type=lead_type, columns=len(row))
        try:
            response = await run_in_threadpool(self._append, sheet_id, [row])
        except Exception as e:
            logger.error(
                "sheets.append_failed",
                lead_type=lead_type,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise SheetsAppendError(details={"error": str(e)}) from e

        logger.info("sheets.appended", lead_type=lead_type)
        return response


def get_sheets_client(request: Request) -> SheetsClient:
    """FastAPI dependency returning the client built during startup."""
    client = getattr(request.app.state, "sheets_client", None)
    if client is None:
        raise SheetsInitializationError(details={"error": "sheets client not configured"})
    return client
