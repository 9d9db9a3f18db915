from __future__ import annotations

from enum import Enum


class UserType(str, Enum):
    """Account kind carried in the bearer token."""

    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance outcome stored for one student on one day."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class WriteOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
