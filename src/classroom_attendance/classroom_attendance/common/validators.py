from __future__ import annotations

import re
from typing import Any, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import InvalidInput

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise InvalidInput(f"{field_name} must be at least {min_len} characters")
    return value


def require_positive_id(value: Any, field_name: str) -> int:
    # ints and digit-only strings; bool is an int subclass and floats would truncate
    if isinstance(value, int) and not isinstance(value, bool):
        out = value
    elif isinstance(value, str) and value.strip().isdigit():
        out = int(value.strip())
    else:
        raise InvalidInput(f"{field_name} is invalid")
    if out <= 0:
        raise InvalidInput(f"{field_name} is invalid")
    return out


def require_status(value: Any) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise InvalidInput(f"status must be one of: {allowed}")


def optional_text(value: Any, field_name: str = "value") -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInput(f"{field_name} must be a string")
    text = value.strip()
    return text or None


def optional_email(value: Any) -> Optional[str]:
    email = optional_text(value, "email")
    if email and not _EMAIL_RE.match(email):
        raise InvalidInput("email address is invalid")
    return email
