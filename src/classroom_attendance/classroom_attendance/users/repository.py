from __future__ import annotations

from typing import Optional, Protocol, Union

from .model import Student, Teacher

Account = Union[Teacher, Student]


class AccountRepository(Protocol):
    """Operations shared by teacher and student accounts.

    Services depend on these interfaces, never on a concrete database.
    """

    def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Account]:
        raise NotImplementedError

    def update_contact(self, account_id: int, *, email: Optional[str], phone: Optional[str]) -> bool:
        raise NotImplementedError

    def set_profile_image(self, account_id: int, *, path: Optional[str]) -> bool:
        raise NotImplementedError


class TeacherRepository(AccountRepository, Protocol):
    def create_teacher(
        self,
        *,
        first_name: str,
        middle_name: Optional[str],
        last_name: str,
        faculty_id: Optional[str],
        username: str,
        password_hash: str,
    ) -> int:
        raise NotImplementedError


class StudentRepository(AccountRepository, Protocol):
    def create_student(
        self,
        *,
        first_name: str,
        middle_name: Optional[str],
        last_name: str,
        student_no: Optional[str],
        course: Optional[str],
        username: str,
        password_hash: str,
    ) -> int:
        raise NotImplementedError
