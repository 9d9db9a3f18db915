from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SchoolClass:
    """A recurring teacher-led session with an enrolled roster."""

    id: int
    name: str
    schedule: str
    teacher_id: int


@dataclass(frozen=True)
class ClassSummary:
    id: int
    name: str
    schedule: str
    student_count: int


@dataclass(frozen=True)
class StudentClassView:
    """A class as seen from an enrolled student."""

    id: int
    name: str
    schedule: str
    teacher_name: str
