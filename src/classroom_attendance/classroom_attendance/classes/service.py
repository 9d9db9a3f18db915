from __future__ import annotations

from typing import Any, Sequence

from ..common.app_logger import get_logger
from ..common.ownership import OwnershipGuard
from ..core.exceptions import InvalidInput
from ..users.model import StudentSummary
from .model import ClassSummary, StudentClassView
from .repository import ClassRepository

logger = get_logger("classes")


class ClassService:
    def __init__(self, classes: ClassRepository, guard: OwnershipGuard):
        self._classes = classes
        self._guard = guard

    def list_for_teacher(self, teacher_id: int) -> Sequence[ClassSummary]:
        return self._classes.list_for_teacher(int(teacher_id))

    def create_class(self, *, teacher_id: int, name: Any, schedule: Any) -> int:
        name = name.strip() if isinstance(name, str) else ""
        schedule = schedule.strip() if isinstance(schedule, str) else ""
        if not name or not schedule:
            raise InvalidInput("Class name and schedule are required")

        class_id = self._classes.create(name=name, schedule=schedule, teacher_id=int(teacher_id))
        logger.info("teacher %s created class %s", teacher_id, class_id)
        return class_id

    def roster(self, *, teacher_id: int, class_id: int) -> Sequence[StudentSummary]:
        self._guard.require_class(teacher_id=teacher_id, class_id=class_id)
        return self._classes.list_students(int(class_id))

    def list_for_student(self, student_id: int) -> Sequence[StudentClassView]:
        return self._classes.list_for_student(int(student_id))
