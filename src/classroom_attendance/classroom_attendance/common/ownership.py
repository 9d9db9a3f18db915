from __future__ import annotations

from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..core.exceptions import NotFoundOrForbidden
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository


class OwnershipGuard:
    """Confirms a teacher owns a class or subject before anything touches it.

    A missing row and another teacher's row fail the same way, so a caller
    cannot tell which ids exist.
    """

    def __init__(self, classes: ClassRepository, subjects: SubjectRepository):
        self._classes = classes
        self._subjects = subjects

    def require_class(self, *, teacher_id: int, class_id: int) -> SchoolClass:
        cls = self._classes.get_by_id(int(class_id))
        if cls is None or cls.teacher_id != int(teacher_id):
            raise NotFoundOrForbidden("Class not found or does not belong to you")
        return cls

    def require_subject(self, *, teacher_id: int, subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(int(subject_id))
        if subject is None or subject.teacher_id != int(teacher_id):
            raise NotFoundOrForbidden("Subject not found or does not belong to you")
        return subject
