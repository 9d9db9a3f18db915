from __future__ import annotations

import secrets
from typing import Any, Optional, Sequence

from ..common.app_logger import get_logger
from ..common.ownership import OwnershipGuard
from ..common.validators import optional_text, require_positive_id
from ..core.constants import KEY_CODE_ALPHABET, KEY_CODE_LENGTH, KEY_CODE_MAX_ATTEMPTS
from ..core.exceptions import Conflict, DuplicateRecord, InvalidInput, NotFound, StoreError
from ..users.model import StudentSummary
from .model import StudentSubjectView, Subject, SubjectSummary
from .repository import SubjectRepository

logger = get_logger("subjects")


def generate_key_code(length: int = KEY_CODE_LENGTH) -> str:
    """Random enrollment key drawn from A-Z and 0-9."""
    return "".join(secrets.choice(KEY_CODE_ALPHABET) for _ in range(length))


class SubjectService:
    def __init__(self, subjects: SubjectRepository, guard: OwnershipGuard, *, key_generator=generate_key_code):
        self._subjects = subjects
        self._guard = guard
        self._key_generator = key_generator

    # ----- teacher side -----

    def list_for_teacher(self, teacher_id: int) -> Sequence[SubjectSummary]:
        return self._subjects.list_for_teacher(int(teacher_id))

    def create_subject(self, *, teacher_id: int, subject_code: Any, description: Any, schedule: Any) -> int:
        subject_code = optional_text(subject_code, "subjectCode")
        description = optional_text(description, "description")
        schedule = optional_text(schedule, "schedule")
        if not subject_code or not description or not schedule:
            raise InvalidInput("Subject code, description, and schedule are required")

        subject_id = self._subjects.create(
            subject_code=subject_code,
            description=description,
            schedule=schedule,
            teacher_id=int(teacher_id),
        )
        logger.info("teacher %s created subject %s", teacher_id, subject_id)
        return subject_id

    def update_subject(
        self,
        *,
        teacher_id: int,
        subject_id: int,
        subject_code: Any = None,
        description: Any = None,
        schedule: Any = None,
    ) -> Subject:
        subject_code = optional_text(subject_code, "subjectCode")
        description = optional_text(description, "description")
        schedule = optional_text(schedule, "schedule")
        if not subject_code and not description and not schedule:
            raise InvalidInput("At least one field to update is required")

        current = self._guard.require_subject(teacher_id=teacher_id, subject_id=subject_id)
        updated = Subject(
            id=current.id,
            subject_code=subject_code or current.subject_code,
            description=description or current.description,
            schedule=schedule or current.schedule,
            key_code=current.key_code,
            teacher_id=current.teacher_id,
        )
        self._subjects.update(
            subject_id=updated.id,
            subject_code=updated.subject_code,
            description=updated.description,
            schedule=updated.schedule,
        )
        return updated

    def delete_subject(self, *, teacher_id: int, subject_id: int) -> None:
        self._guard.require_subject(teacher_id=teacher_id, subject_id=subject_id)
        self._subjects.delete(subject_id=int(subject_id))
        logger.info("teacher %s deleted subject %s", teacher_id, subject_id)

    def generate_key(self, *, teacher_id: int, subject_id: int) -> str:
        """Assign a fresh key code, retrying when it collides with another subject's key."""

        self._guard.require_subject(teacher_id=teacher_id, subject_id=subject_id)

        for _ in range(KEY_CODE_MAX_ATTEMPTS):
            key_code = self._key_generator()
            try:
                self._subjects.set_key_code(subject_id=int(subject_id), key_code=key_code)
                return key_code
            except DuplicateRecord:
                logger.info("key code collision for subject %s, retrying", subject_id)

        raise StoreError("Could not allocate a unique key code")

    def roster(self, *, teacher_id: int, subject_id: int) -> Sequence[StudentSummary]:
        self._guard.require_subject(teacher_id=teacher_id, subject_id=subject_id)
        return self._subjects.list_students(int(subject_id))

    # ----- student side -----

    def search_by_key(self, key_code: Any) -> StudentSubjectView:
        key = optional_text(key_code, "key_code")
        if not key:
            raise InvalidInput("key_code is required")

        found = self._subjects.find_by_key_code(key.upper())
        if not found:
            raise NotFound("No subject matches that key code")
        return found

    def enroll(self, *, student_id: int, subject_id: Any) -> int:
        subject_id = require_positive_id(subject_id, "subjectId")
        if not self._subjects.get_by_id(subject_id):
            raise NotFound("Subject not found")

        if self._subjects.is_enrolled(subject_id=subject_id, student_id=int(student_id)):
            raise Conflict("Already enrolled in this subject")

        try:
            enrollment_id = self._subjects.enroll(subject_id=subject_id, student_id=int(student_id))
        except DuplicateRecord as e:
            raise Conflict("Already enrolled in this subject") from e

        logger.info("student %s enrolled in subject %s", student_id, subject_id)
        return enrollment_id

    def list_for_student(self, student_id: int) -> Sequence[StudentSubjectView]:
        return self._subjects.list_for_student(int(student_id))

    def require_enrolled(self, *, student_id: int, subject_id: int) -> Optional[Subject]:
        if not self._subjects.is_enrolled(subject_id=int(subject_id), student_id=int(student_id)):
            raise NotFound("You are not enrolled in this subject")
        return self._subjects.get_by_id(int(subject_id))
