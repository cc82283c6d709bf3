# api/schemas/form.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

FormValue = Union[str, List[Any], int, float, bool, None]


class FormSubmission(BaseModel):
    """Flat wizard payload: contact fields, lead type and one key per answer."""

    model_config = ConfigDict(extra="allow")

    userType: Optional[str] = None
    name: FormValue = None
    email: FormValue = None
    phoneNumber: FormValue = None

    def payload(self) -> Dict[str, Any]:
        """Fields in submission order, answers last."""
        data: Dict[str, Any] = {
            "userType": self.userType,
            "name": self.name,
            "email": self.email,
            "phoneNumber": self.phoneNumber,
        }
        data.update(self.model_extra or {})
        return data


class FormSubmissionResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any] = Field(default_factory=dict)


class FormSubmissionError(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
