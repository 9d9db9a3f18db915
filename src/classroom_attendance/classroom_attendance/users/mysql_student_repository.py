from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = (
    "id, first_name, middle_name, last_name, student_id, course, username, password, email, phone, profile_image"
)


def _to_student(row: dict) -> Student:
    return Student(
        id=int(row["id"]),
        first_name=row["first_name"],
        middle_name=row.get("middle_name"),
        last_name=row["last_name"],
        student_no=row.get("student_id"),
        course=row.get("course"),
        username=row["username"],
        password_hash=row["password"],
        email=row.get("email"),
        phone=row.get("phone"),
        profile_image=row.get("profile_image"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(account_id),))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_username(self, username: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_student(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students (first_name, middle_name, last_name, student_id, course, username, password)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (first_name, middle_name, last_name, student_no, course, username, password_hash),
            )
            return int(cur.lastrowid)

    def update_contact(self, account_id: int, *, email: Optional[str], phone: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET email=%s, phone=%s WHERE id=%s",
                (email, phone, int(account_id)),
            )
            return cur.rowcount > 0

    def set_profile_image(self, account_id: int, *, path: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE students SET profile_image=%s WHERE id=%s", (path, int(account_id)))
            return cur.rowcount > 0
