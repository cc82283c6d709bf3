# api/core/exceptions.py
from __future__ import annotations

from typing import Any, Dict, Optional


class BaseAPIException(Exception):
    """Base exception for all API errors."""

    error = "Internal Server Error"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        """Structured failure body understood by the submission client."""
        return {
            "success": False,
            "error": self.error,
            "message": self.message,
        }


class BadRequestError(BaseAPIException):
    """Malformed request."""

    error = "Bad Request"

    def __init__(self, message: str = "Malformed request", **kwargs):
        super().__init__(message, status_code=400, **kwargs)


class InvalidLeadTypeError(BadRequestError):
    """userType missing or not one of the configured lead types."""

    def __init__(self, message: str = "Invalid or missing user type", **kwargs):
        super().__init__(message, code="invalid_user_type", **kwargs)


class ExternalServiceError(BaseAPIException):
    """External service error."""

    def __init__(self, message: str = "External service error", **kwargs):
        super().__init__(message, status_code=500, **kwargs)


class SheetsInitializationError(ExternalServiceError):
    """Service account credentials or the Sheets API client could not be set up."""

    def __init__(self, message: str = "Failed to initialize Google Sheets API", **kwargs):
        super().__init__(message, code="sheets_init_failed", **kwargs)


class SheetsAppendError(ExternalServiceError):
    """The append call to the spreadsheet failed."""

    def __init__(self, message: str = "Failed to append row to Google Sheet", **kwargs):
        super().__init__(message, code="sheets_append_failed", **kwargs)
