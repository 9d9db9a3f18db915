from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import UserType


@dataclass(frozen=True)
class Teacher:
    """Domain entity: teacher account.

    Plain data object; no database access lives here.
    """

    id: int
    first_name: str
    middle_name: Optional[str]
    last_name: str
    faculty_id: Optional[str]
    username: str
    password_hash: str
    email: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None

    user_type = UserType.TEACHER


@dataclass(frozen=True)
class Student:
    """Domain entity: student account.

    `student_no` is the school-issued number (column `students.student_id`),
    not the row id.
    """

    id: int
    first_name: str
    middle_name: Optional[str]
    last_name: str
    student_no: Optional[str]
    course: Optional[str]
    username: str
    password_hash: str
    email: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None

    user_type = UserType.STUDENT


@dataclass(frozen=True)
class StudentSummary:
    """Read-model for roster listings."""

    id: int
    first_name: str
    middle_name: Optional[str]
    last_name: str
    student_no: Optional[str]
    course: Optional[str]
