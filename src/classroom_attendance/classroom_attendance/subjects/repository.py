from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..users.model import StudentSummary
from .model import StudentSubjectView, Subject, SubjectSummary


class SubjectRepository(Protocol):
    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def find_by_key_code(self, key_code: str) -> Optional[StudentSubjectView]:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[SubjectSummary]:
        raise NotImplementedError

    def create(self, *, subject_code: str, description: str, schedule: str, teacher_id: int) -> int:
        raise NotImplementedError

    def update(self, *, subject_id: int, subject_code: str, description: str, schedule: str) -> bool:
        raise NotImplementedError

    def delete(self, *, subject_id: int) -> bool:
        """Remove a subject together with its enrollments."""

        raise NotImplementedError

    def set_key_code(self, *, subject_id: int, key_code: str) -> bool:
        """Raises DuplicateRecord when another subject already holds the key."""

        raise NotImplementedError

    def list_students(self, subject_id: int) -> Sequence[StudentSummary]:
        raise NotImplementedError

    def enroll(self, *, subject_id: int, student_id: int) -> int:
        """Raises DuplicateRecord when the student is already enrolled."""

        raise NotImplementedError

    def is_enrolled(self, *, subject_id: int, student_id: int) -> bool:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[StudentSubjectView]:
        raise NotImplementedError
