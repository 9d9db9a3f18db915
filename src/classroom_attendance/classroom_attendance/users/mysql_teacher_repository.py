from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = "id, first_name, middle_name, last_name, faculty_id, username, password, email, phone, profile_image"


def _to_teacher(row: dict) -> Teacher:
    return Teacher(
        id=int(row["id"]),
        first_name=row["first_name"],
        middle_name=row.get("middle_name"),
        last_name=row["last_name"],
        faculty_id=row.get("faculty_id"),
        username=row["username"],
        password_hash=row["password"],
        email=row.get("email"),
        phone=row.get("phone"),
        profile_image=row.get("profile_image"),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE id=%s", (int(account_id),))
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def get_by_username(self, username: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_teacher(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teachers (first_name, middle_name, last_name, faculty_id, username, password)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (first_name, middle_name, last_name, faculty_id, username, password_hash),
            )
            return int(cur.lastrowid)

    def update_contact(self, account_id: int, *, email: Optional[str], phone: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE teachers SET email=%s, phone=%s WHERE id=%s",
                (email, phone, int(account_id)),
            )
            return cur.rowcount > 0

    def set_profile_image(self, account_id: int, *, path: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE teachers SET profile_image=%s WHERE id=%s", (path, int(account_id)))
            return cur.rowcount > 0
