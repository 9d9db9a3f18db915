from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..users.model import StudentSummary
from .model import StudentSubjectView, Subject, SubjectSummary
from .repository import SubjectRepository


def _to_view(r: dict) -> StudentSubjectView:
    return StudentSubjectView(
        id=int(r["id"]),
        subject_code=r["subject_code"],
        description=r["description"],
        schedule=r["schedule"],
        teacher_name=f"{r['teacher_first_name']} {r['teacher_last_name']}",
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, subject_code, description, schedule, key_code, teacher_id
                FROM subjects
                WHERE id=%s
                """,
                (int(subject_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Subject(
                id=int(r["id"]),
                subject_code=r["subject_code"],
                description=r["description"],
                schedule=r["schedule"],
                key_code=r.get("key_code"),
                teacher_id=int(r["teacher_id"]),
            )

    def find_by_key_code(self, key_code: str) -> Optional[StudentSubjectView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.subject_code, s.description, s.schedule,
                       t.first_name AS teacher_first_name, t.last_name AS teacher_last_name
                FROM subjects s
                JOIN teachers t ON t.id = s.teacher_id
                WHERE s.key_code=%s
                """,
                (key_code,),
            )
            r = fetchone(cur)
            return _to_view(r) if r else None

    def list_for_teacher(self, teacher_id: int) -> Sequence[SubjectSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.subject_code, s.description, s.schedule, s.key_code,
                       (SELECT COUNT(*) FROM subject_students ss WHERE ss.subject_id = s.id) AS student_count
                FROM subjects s
                WHERE s.teacher_id=%s
                ORDER BY s.subject_code
                """,
                (int(teacher_id),),
            )
            return [
                SubjectSummary(
                    id=int(r["id"]),
                    subject_code=r["subject_code"],
                    description=r["description"],
                    schedule=r["schedule"],
                    key_code=r.get("key_code"),
                    student_count=int(r["student_count"] or 0),
                )
                for r in fetchall(cur)
            ]

    def create(self, *, subject_code: str, description: str, schedule: str, teacher_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subjects (subject_code, description, schedule, teacher_id)
                VALUES (%s, %s, %s, %s)
                """,
                (subject_code, description, schedule, int(teacher_id)),
            )
            return int(cur.lastrowid)

    def update(self, *, subject_id: int, subject_code: str, description: str, schedule: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subjects
                SET subject_code=%s, description=%s, schedule=%s
                WHERE id=%s
                """,
                (subject_code, description, schedule, int(subject_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subject_students WHERE subject_id=%s", (int(subject_id),))
            cur.execute("DELETE FROM subjects WHERE id=%s", (int(subject_id),))
            return cur.rowcount > 0

    def set_key_code(self, *, subject_id: int, key_code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE subjects SET key_code=%s WHERE id=%s", (key_code, int(subject_id)))
            return cur.rowcount > 0

    def list_students(self, subject_id: int) -> Sequence[StudentSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.first_name, s.middle_name, s.last_name, s.student_id, s.course
                FROM students s
                JOIN subject_students ss ON s.id = ss.student_id
                WHERE ss.subject_id=%s
                ORDER BY s.last_name, s.first_name
                """,
                (int(subject_id),),
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

    def enroll(self, *, subject_id: int, student_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO subject_students (subject_id, student_id) VALUES (%s, %s)",
                (int(subject_id), int(student_id)),
            )
            return int(cur.lastrowid)

    def is_enrolled(self, *, subject_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM subject_students WHERE subject_id=%s AND student_id=%s",
                (int(subject_id), int(student_id)),
            )
            return fetchone(cur) is not None

    def list_for_student(self, student_id: int) -> Sequence[StudentSubjectView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.subject_code, s.description, s.schedule,
                       t.first_name AS teacher_first_name, t.last_name AS teacher_last_name
                FROM subjects s
                JOIN subject_students ss ON ss.subject_id = s.id
                JOIN teachers t ON t.id = s.teacher_id
                WHERE ss.student_id=%s
                ORDER BY s.subject_code
                """,
                (int(student_id),),
            )
            return [_to_view(r) for r in fetchall(cur)]
