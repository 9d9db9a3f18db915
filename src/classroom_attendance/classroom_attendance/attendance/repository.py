from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEntry, StudentAttendanceRow, SubjectAttendanceRecord


class AttendanceRepository(Protocol):
    def insert_class_batch(
        self,
        *,
        class_id: int,
        teacher_id: int,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
    ) -> int:
        """Insert one row per entry in a single transaction.

        Either every row commits or none does. Returns the number of rows inserted.
        """

        raise NotImplementedError

    def find_subject_record(
        self,
        *,
        subject_id: int,
        student_id: int,
        attendance_date: date,
    ) -> Optional[SubjectAttendanceRecord]:
        raise NotImplementedError

    def insert_subject_record(
        self,
        *,
        subject_id: int,
        student_id: int,
        teacher_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        """Raises DuplicateRecord when a row for (subject, student, date) already exists."""

        raise NotImplementedError

    def update_subject_record(
        self,
        *,
        record_id: int,
        teacher_id: int,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def list_subject_records(
        self,
        *,
        subject_id: int,
        attendance_date: Optional[date] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[SubjectAttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, *, student_id: int, class_id: Optional[int] = None) -> Sequence[StudentAttendanceRow]:
        raise NotImplementedError
