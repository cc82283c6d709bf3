# api/schemas/__init__.py
"""
Pydantic schemas for request/response validation and serialization.
"""

from api.schemas.form import FormSubmission, FormSubmissionError, FormSubmissionResponse

__all__ = [
    "FormSubmission",
    "FormSubmissionError",
    "FormSubmissionResponse",
]
