from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from ..core.exceptions import InvalidInput

_ISO_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def require_date(value: Any, field_name: str = "date") -> date:
    """Accept a date or an ISO calendar-day string; time components are rejected."""

    if isinstance(value, datetime):
        raise InvalidInput(f"{field_name} must be a calendar day (YYYY-MM-DD)")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{field_name} is required")
    value = value.strip()
    if not _ISO_DAY_RE.match(value):
        raise InvalidInput(f"{field_name} must be a calendar day (YYYY-MM-DD)")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise InvalidInput(f"{field_name} must be a calendar day (YYYY-MM-DD)")


def format_date(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)
