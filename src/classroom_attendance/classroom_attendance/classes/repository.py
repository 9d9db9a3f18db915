from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..users.model import StudentSummary
from .model import ClassSummary, SchoolClass, StudentClassView


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[ClassSummary]:
        raise NotImplementedError

    def create(self, *, name: str, schedule: str, teacher_id: int) -> int:
        raise NotImplementedError

    def list_students(self, class_id: int) -> Sequence[StudentSummary]:
        """Roster ordered by last name, then first name."""

        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[StudentClassView]:
        raise NotImplementedError
