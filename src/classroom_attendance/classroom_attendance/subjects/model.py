from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Subject:
    """A teacher-owned course unit that students join with a key code."""

    id: int
    subject_code: str
    description: str
    schedule: str
    key_code: Optional[str]
    teacher_id: int


@dataclass(frozen=True)
class SubjectSummary:
    id: int
    subject_code: str
    description: str
    schedule: str
    key_code: Optional[str]
    student_count: int


@dataclass(frozen=True)
class StudentSubjectView:
    """A subject as seen from a student (search result or enrollment list)."""

    id: int
    subject_code: str
    description: str
    schedule: str
    teacher_name: str
