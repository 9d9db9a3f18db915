from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEntry, StudentAttendanceRow, SubjectAttendanceRecord
from .repository import AttendanceRepository

_SUBJECT_COLUMNS = "id, student_id, teacher_id, subject_id, date, status, notes, created_at"


def _to_subject_record(r: dict) -> SubjectAttendanceRecord:
    return SubjectAttendanceRecord(
        id=int(r["id"]),
        student_id=int(r["student_id"]),
        teacher_id=int(r["teacher_id"]),
        subject_id=int(r["subject_id"]),
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_class_batch(
        self,
        *,
        class_id: int,
        teacher_id: int,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
    ) -> int:
        rows = [
            (e.student_id, int(teacher_id), int(class_id), attendance_date, e.status.value, e.notes)
            for e in entries
        ]
        # db_cursor commits once after every insert succeeded and rolls the whole batch back otherwise.
        with db_cursor(self._conn_factory) as (_, cur):
            for row in rows:
                cur.execute(
                    """
                    INSERT INTO attendance (student_id, teacher_id, class_id, date, status, notes)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    row,
                )
            return len(rows)

    def find_subject_record(
        self,
        *,
        subject_id: int,
        student_id: int,
        attendance_date: date,
    ) -> Optional[SubjectAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SUBJECT_COLUMNS}
                FROM subject_attendance
                WHERE subject_id=%s AND student_id=%s AND date=%s
                """,
                (int(subject_id), int(student_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_subject_record(r) if r else None

    def insert_subject_record(
        self,
        *,
        subject_id: int,
        student_id: int,
        teacher_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subject_attendance (student_id, teacher_id, subject_id, date, status, notes)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (int(student_id), int(teacher_id), int(subject_id), attendance_date, status.value, notes),
            )
            return int(cur.lastrowid)

    def update_subject_record(
        self,
        *,
        record_id: int,
        teacher_id: int,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subject_attendance
                SET status=%s, notes=%s, teacher_id=%s
                WHERE id=%s
                """,
                (status.value, notes, int(teacher_id), int(record_id)),
            )
            return cur.rowcount > 0

    def list_subject_records(
        self,
        *,
        subject_id: int,
        attendance_date: Optional[date] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[SubjectAttendanceRecord]:
        clauses = ["subject_id=%s"]
        params: list[object] = [int(subject_id)]

        if attendance_date is not None:
            clauses.append("date=%s")
            params.append(attendance_date)
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SUBJECT_COLUMNS}
                FROM subject_attendance
                WHERE {where}
                ORDER BY date DESC, student_id ASC
                """,
                tuple(params),
            )
            return [_to_subject_record(r) for r in fetchall(cur)]

    def list_for_student(self, *, student_id: int, class_id: Optional[int] = None) -> Sequence[StudentAttendanceRow]:
        clauses = ["a.student_id=%s"]
        params: list[object] = [int(student_id)]

        if class_id is not None:
            clauses.append("c.id=%s")
            params.append(int(class_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.id, a.date, a.status, a.notes, c.name AS class_name
                FROM attendance a
                JOIN classes c ON a.class_id = c.id
                WHERE {where}
                ORDER BY a.date DESC, a.id DESC
                """,
                tuple(params),
            )
            return [
                StudentAttendanceRow(
                    id=int(r["id"]),
                    date=r["date"],
                    status=AttendanceStatus(r["status"]),
                    notes=r.get("notes"),
                    class_name=r["class_name"],
                )
                for r in fetchall(cur)
            ]
