from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..users.model import StudentSummary
from .model import ClassSummary, SchoolClass, StudentClassView
from .repository import ClassRepository


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, schedule, teacher_id FROM classes WHERE id=%s", (int(class_id),))
            r = fetchone(cur)
            if not r:
                return None
            return SchoolClass(
                id=int(r["id"]),
                name=r["name"],
                schedule=r["schedule"],
                teacher_id=int(r["teacher_id"]),
            )

    def list_for_teacher(self, teacher_id: int) -> Sequence[ClassSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.id, c.name, c.schedule,
                       (SELECT COUNT(*) FROM class_students cs WHERE cs.class_id = c.id) AS student_count
                FROM classes c
                WHERE c.teacher_id=%s
                ORDER BY c.name
                """,
                (int(teacher_id),),
            )
            return [
                ClassSummary(
                    id=int(r["id"]),
                    name=r["name"],
                    schedule=r["schedule"],
                    student_count=int(r["student_count"] or 0),
                )
                for r in fetchall(cur)
            ]

    def create(self, *, name: str, schedule: str, teacher_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO classes (name, schedule, teacher_id) VALUES (%s, %s, %s)",
                (name, schedule, int(teacher_id)),
            )
            return int(cur.lastrowid)

    def list_students(self, class_id: int) -> Sequence[StudentSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.first_name, s.middle_name, s.last_name, s.student_id, s.course
                FROM students s
                JOIN class_students cs ON s.id = cs.student_id
                WHERE cs.class_id=%s
                ORDER BY s.last_name, s.first_name
                """,
                (int(class_id),),
            )
            return [
                StudentSummary(
                    id=int(r["id"]),
                    first_name=r["first_name"],
                    middle_name=r.get("middle_name"),
                    last_name=r["last_name"],
                    student_no=r.get("student_id"),
                    course=r.get("course"),
                )
                for r in fetchall(cur)
            ]

    def list_for_student(self, student_id: int) -> Sequence[StudentClassView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.id, c.name, c.schedule,
                       t.first_name AS teacher_first_name, t.last_name AS teacher_last_name
                FROM classes c
                JOIN class_students cs ON c.id = cs.class_id
                JOIN teachers t ON c.teacher_id = t.id
                WHERE cs.student_id=%s
                ORDER BY c.name
                """,
                (int(student_id),),
            )
            return [
                StudentClassView(
                    id=int(r["id"]),
                    name=r["name"],
                    schedule=r["schedule"],
                    teacher_name=f"{r['teacher_first_name']} {r['teacher_last_name']}",
                )
                for r in fetchall(cur)
            ]
