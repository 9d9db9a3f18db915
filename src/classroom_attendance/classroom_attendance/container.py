from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceQueryService, AttendanceWriter
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.service import ClassService
from .common.ownership import OwnershipGuard
from .database.connection import DBConfig, DatabaseConnection
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.service import SubjectService
from .users.mysql_student_repository import MySQLStudentRepository
from .users.mysql_teacher_repository import MySQLTeacherRepository
from .users.picture_storage import ProfilePictureStorage
from .users.service import AuthService, ProfileService


@dataclass(frozen=True)
class Container:
    conn: Any

    teachers_repo: Any
    students_repo: Any
    classes_repo: Any
    subjects_repo: Any
    attendance_repo: Any

    auth_service: AuthService
    profile_service: ProfileService
    class_service: ClassService
    subject_service: SubjectService
    attendance_writer: AttendanceWriter
    attendance_queries: AttendanceQueryService


def build_services(
    *,
    conn: Any,
    teachers_repo: Any,
    students_repo: Any,
    classes_repo: Any,
    subjects_repo: Any,
    attendance_repo: Any,
    picture_storage: ProfilePictureStorage,
) -> Container:
    """Wire services over any set of repositories (MySQL in production, in-memory in tests)."""

    guard = OwnershipGuard(classes_repo, subjects_repo)
    subject_service = SubjectService(subjects_repo, guard)

    return Container(
        conn=conn,
        teachers_repo=teachers_repo,
        students_repo=students_repo,
        classes_repo=classes_repo,
        subjects_repo=subjects_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(teachers_repo, students_repo),
        profile_service=ProfileService(teachers_repo, students_repo, picture_storage),
        class_service=ClassService(classes_repo, guard),
        subject_service=subject_service,
        attendance_writer=AttendanceWriter(attendance_repo, guard),
        attendance_queries=AttendanceQueryService(attendance_repo, guard, subject_service),
    )


def build_container(*, db_config: dict, upload_folder: str) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connection_timeout=int(db_config.get("connection_timeout", 10)),
        lock_wait_timeout=db_config.get("lock_wait_timeout"),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        conn=conn,
        teachers_repo=MySQLTeacherRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        picture_storage=ProfilePictureStorage(upload_folder),
    )
