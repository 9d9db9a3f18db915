from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, WriteOutcome


@dataclass(frozen=True)
class AttendanceEntry:
    """One student's line in a class roster submission (already validated)."""

    student_id: int
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: class-scoped attendance row."""

    id: int
    student_id: int
    teacher_id: int
    class_id: int
    date: date
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SubjectAttendanceRecord:
    """Domain entity: subject-scoped attendance row, unique per (subject, student, date)."""

    id: int
    student_id: int
    teacher_id: int
    subject_id: int
    date: date
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentAttendanceRow:
    """Read-model for a student's own class attendance history."""

    id: int
    date: date
    status: AttendanceStatus
    notes: Optional[str]
    class_name: str


@dataclass(frozen=True)
class ClassRecordingResult:
    count: int

    @property
    def message(self) -> str:
        return f"{self.count} attendance records recorded"


@dataclass(frozen=True)
class SubjectRecordingResult:
    record_id: int
    outcome: WriteOutcome

    @property
    def message(self) -> str:
        if self.outcome == WriteOutcome.CREATED:
            return "Attendance recorded"
        return "Attendance updated"
