# wizard/validation.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional

PHONE_ERROR = "Please enter a valid US or Canadian phone number"

# NANP numbering: NXX area code (no N11 service codes, no reserved N9X),
# NXX exchange, four-digit line.
_NANP_PATTERN = re.compile(r"^(?!\d11)[2-9][0-8]\d[2-9]\d{2}\d{4}$")
_ALLOWED_PHONE_CHARS = re.compile(r"^[\d\s().+\-]+$")


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """Return a US/Canadian number as E.164 (+1XXXXXXXXXX) or None."""
    if not phone:
        return None

    cleaned = phone.strip()
    if not cleaned or not _ALLOWED_PHONE_CHARS.match(cleaned):
        return None
    if "+" in cleaned[1:]:
        return None

    digits = re.sub(r"\D+", "", cleaned)
    if cleaned.startswith("+"):
        if not digits.startswith("1"):
            return None
        digits = digits[1:]
    elif len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]

    if not _NANP_PATTERN.match(digits):
        return None
    return f"+1{digits}"


def is_valid_phone(phone: Optional[str]) -> bool:
    return normalize_phone(phone) is not None


@dataclass
class PersonalInfo:
    name: str = ""
    email: str = ""
    phone_number: str = ""

    def errors(self) -> Dict[str, str]:
        """Field name -> message for every field that blocks progression."""
        problems: Dict[str, str] = {}
        if not self.name:
            problems["name"] = "Full name is required"
        if not self.email:
            problems["email"] = "Email address is required"
        if not self.phone_number:
            problems["phone_number"] = "Phone number is required"
        elif not is_valid_phone(self.phone_number):
            problems["phone_number"] = PHONE_ERROR
        return problems

    @property
    def phone_error(self) -> str:
        """Inline message shown under the phone field while typing."""
        if self.phone_number and not is_valid_phone(self.phone_number):
            return PHONE_ERROR
        return ""

    @property
    def is_valid(self) -> bool:
        return not self.errors()
