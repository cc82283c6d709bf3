# api/services/__init__.py
"""
Business logic services organized by domain functionality.
"""

from api.services.form_ingest import (
    FormIngestResult,
    build_row,
    ingest_submission,
    preprocess_value,
)
from api.services.sheets import SheetsClient, get_sheets_client

__all__ = [
    # Row formatting and ingest
    "FormIngestResult",
    "build_row",
    "ingest_submission",
    "preprocess_value",
    # Google Sheets
    "SheetsClient",
    "get_sheets_client",
]
