from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any, Optional, Sequence

from ..common.app_logger import get_logger
from ..common.datetime_utils import format_date, require_date
from ..common.ownership import OwnershipGuard
from ..common.validators import optional_text, require_positive_id, require_status
from ..core.enums import WriteOutcome
from ..core.exceptions import DuplicateRecord, InvalidInput, RecordingFailed, StoreError
from ..subjects.service import SubjectService
from .model import (
    AttendanceEntry,
    ClassRecordingResult,
    StudentAttendanceRow,
    SubjectAttendanceRecord,
    SubjectRecordingResult,
)
from .repository import AttendanceRepository

logger = get_logger("attendance")


def parse_entries(records: Any) -> list[AttendanceEntry]:
    """Validate a roster submission; nothing is written if any line is malformed."""

    if not isinstance(records, list) or not records:
        raise InvalidInput("attendanceRecords must be a non-empty list")

    entries: list[AttendanceEntry] = []
    for index, raw in enumerate(records):
        if isinstance(raw, AttendanceEntry):
            entries.append(raw)
            continue
        if not isinstance(raw, Mapping):
            raise InvalidInput(f"attendanceRecords[{index}] must be an object")
        try:
            entries.append(
                AttendanceEntry(
                    student_id=require_positive_id(raw.get("studentId"), "studentId"),
                    status=require_status(raw.get("status")),
                    notes=optional_text(raw.get("notes"), "notes"),
                )
            )
        except InvalidInput as e:
            raise InvalidInput(f"attendanceRecords[{index}]: {e}") from e
    return entries


class AttendanceWriter:
    """Records attendance for classes (bulk, append-only) and subjects (one row per student per day).

    Order inside every call: validate input, check ownership, then write.
    Store failures leave as RecordingFailed with the driver error chained.
    """

    def __init__(self, attendance: AttendanceRepository, guard: OwnershipGuard):
        self._attendance = attendance
        self._guard = guard

    def record_class_attendance(
        self,
        *,
        teacher_id: int,
        class_id: int,
        attendance_date: Any,
        records: Any,
    ) -> ClassRecordingResult:
        day = require_date(attendance_date)
        entries = parse_entries(records)

        try:
            self._guard.require_class(teacher_id=teacher_id, class_id=class_id)
            count = self._attendance.insert_class_batch(
                class_id=int(class_id),
                teacher_id=int(teacher_id),
                attendance_date=day,
                entries=entries,
            )
        except StoreError as e:
            logger.error("class %s attendance for %s rolled back: %s", class_id, format_date(day), e)
            raise RecordingFailed(f"Error recording attendance: {e}") from e

        logger.info("teacher %s recorded %d rows for class %s on %s", teacher_id, count, class_id, format_date(day))
        return ClassRecordingResult(count=count)

    def record_subject_attendance(
        self,
        *,
        teacher_id: int,
        subject_id: int,
        student_id: Any,
        attendance_date: Any,
        status: Any,
        notes: Any = None,
    ) -> SubjectRecordingResult:
        student_id = require_positive_id(student_id, "studentId")
        day = require_date(attendance_date)
        status = require_status(status)
        notes = optional_text(notes, "notes")

        try:
            self._guard.require_subject(teacher_id=teacher_id, subject_id=subject_id)
            result = self._upsert(
                teacher_id=int(teacher_id),
                subject_id=int(subject_id),
                student_id=student_id,
                day=day,
                status=status,
                notes=notes,
            )
        except StoreError as e:
            logger.error("subject %s attendance for student %s failed: %s", subject_id, student_id, e)
            raise RecordingFailed(f"Error recording attendance: {e}") from e

        logger.info(
            "subject %s student %s on %s: %s (id=%s)",
            subject_id,
            student_id,
            format_date(day),
            result.outcome.value,
            result.record_id,
        )
        return result

    def _upsert(self, *, teacher_id, subject_id, student_id, day, status, notes) -> SubjectRecordingResult:
        existing = self._attendance.find_subject_record(
            subject_id=subject_id, student_id=student_id, attendance_date=day
        )
        if existing is None:
            try:
                record_id = self._attendance.insert_subject_record(
                    subject_id=subject_id,
                    student_id=student_id,
                    teacher_id=teacher_id,
                    attendance_date=day,
                    status=status,
                    notes=notes,
                )
                return SubjectRecordingResult(record_id=record_id, outcome=WriteOutcome.CREATED)
            except DuplicateRecord:
                # A concurrent call inserted the row between our lookup and insert.
                existing = self._attendance.find_subject_record(
                    subject_id=subject_id, student_id=student_id, attendance_date=day
                )
                if existing is None:
                    raise

        self._attendance.update_subject_record(
            record_id=existing.id,
            teacher_id=teacher_id,
            status=status,
            notes=notes,
        )
        return SubjectRecordingResult(record_id=existing.id, outcome=WriteOutcome.UPDATED)


class AttendanceQueryService:
    """Read side: teachers browsing a subject's records, students viewing their own."""

    def __init__(self, attendance: AttendanceRepository, guard: OwnershipGuard, subjects: SubjectService):
        self._attendance = attendance
        self._guard = guard
        self._subjects = subjects

    def subject_records(
        self,
        *,
        teacher_id: int,
        subject_id: int,
        attendance_date: Optional[Any] = None,
    ) -> Sequence[SubjectAttendanceRecord]:
        day: Optional[date] = require_date(attendance_date) if attendance_date else None
        self._guard.require_subject(teacher_id=teacher_id, subject_id=subject_id)
        return self._attendance.list_subject_records(subject_id=int(subject_id), attendance_date=day)

    def student_class_attendance(
        self,
        *,
        student_id: int,
        class_id: Optional[int] = None,
    ) -> Sequence[StudentAttendanceRow]:
        return self._attendance.list_for_student(
            student_id=int(student_id),
            class_id=int(class_id) if class_id is not None else None,
        )

    def student_subject_attendance(self, *, student_id: int, subject_id: int) -> Sequence[SubjectAttendanceRecord]:
        self._subjects.require_enrolled(student_id=student_id, subject_id=subject_id)
        return self._attendance.list_subject_records(subject_id=int(subject_id), student_id=int(student_id))
