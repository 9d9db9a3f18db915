from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from types import SimpleNamespace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.classroom_attendance.classroom_attendance.attendance.model import (
    AttendanceRecord,
    StudentAttendanceRow,
    SubjectAttendanceRecord,
)
from src.classroom_attendance.classroom_attendance.attendance.service import AttendanceWriter
from src.classroom_attendance.classroom_attendance.classes.model import ClassSummary, SchoolClass, StudentClassView
from src.classroom_attendance.classroom_attendance.common.ownership import OwnershipGuard
from src.classroom_attendance.classroom_attendance.container import build_services
from src.classroom_attendance.classroom_attendance.core.exceptions import DuplicateRecord, StoreError
from src.classroom_attendance.classroom_attendance.main import create_app
from src.classroom_attendance.classroom_attendance.subjects.model import StudentSubjectView, Subject, SubjectSummary
from src.classroom_attendance.classroom_attendance.users.model import Student, StudentSummary, Teacher
from src.classroom_attendance.classroom_attendance.users.picture_storage import ProfilePictureStorage


class InMemoryAccounts:
    def __init__(self, accounts=()):
        self.by_id = {a.id: a for a in accounts}
        self._next_id = max(self.by_id, default=0)

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def get_by_id(self, account_id):
        return self.by_id.get(int(account_id))

    def get_by_username(self, username):
        for a in self.by_id.values():
            if a.username == username:
                return a
        return None

    def _username_taken(self, username) -> bool:
        return any(a.username == username for a in self.by_id.values())

    def update_contact(self, account_id, *, email, phone):
        a = self.by_id.get(int(account_id))
        if not a:
            return False
        self.by_id[a.id] = replace(a, email=email, phone=phone)
        return True

    def set_profile_image(self, account_id, *, path):
        a = self.by_id.get(int(account_id))
        if not a:
            return False
        self.by_id[a.id] = replace(a, profile_image=path)
        return True


class InMemoryTeachers(InMemoryAccounts):
    def create_teacher(self, *, first_name, middle_name, last_name, faculty_id, username, password_hash):
        if self._username_taken(username):
            raise DuplicateRecord(f"Duplicate entry '{username}' for key 'username'")
        new_id = self._new_id()
        self.by_id[new_id] = Teacher(
            id=new_id,
            first_name=first_name,
            middle_name=middle_name,
            last_name=last_name,
            faculty_id=faculty_id,
            username=username,
            password_hash=password_hash,
        )
        return new_id


class InMemoryStudents(InMemoryAccounts):
    def create_student(self, *, first_name, middle_name, last_name, student_no, course, username, password_hash):
        if self._username_taken(username):
            raise DuplicateRecord(f"Duplicate entry '{username}' for key 'username'")
        new_id = self._new_id()
        self.by_id[new_id] = Student(
            id=new_id,
            first_name=first_name,
            middle_name=middle_name,
            last_name=last_name,
            student_no=student_no,
            course=course,
            username=username,
            password_hash=password_hash,
        )
        return new_id

    def summary(self, student_id) -> StudentSummary:
        s = self.by_id[int(student_id)]
        return StudentSummary(
            id=s.id,
            first_name=s.first_name,
            middle_name=s.middle_name,
            last_name=s.last_name,
            student_no=s.student_no,
            course=s.course,
        )


def _teacher_name(teachers: InMemoryTeachers, teacher_id: int) -> str:
    t = teachers.get_by_id(teacher_id)
    return f"{t.first_name} {t.last_name}" if t else ""


class InMemoryClasses:
    def __init__(self, teachers: InMemoryTeachers, students: InMemoryStudents):
        self._teachers = teachers
        self._students = students
        self.classes: dict[int, SchoolClass] = {}
        self.members: dict[int, list[int]] = {}
        self.lookups = 0

    def add(self, cls: SchoolClass, student_ids=()) -> None:
        self.classes[cls.id] = cls
        self.members[cls.id] = list(student_ids)

    def get_by_id(self, class_id):
        self.lookups += 1
        return self.classes.get(int(class_id))

    def list_for_teacher(self, teacher_id):
        return [
            ClassSummary(id=c.id, name=c.name, schedule=c.schedule, student_count=len(self.members[c.id]))
            for c in sorted(self.classes.values(), key=lambda c: c.name)
            if c.teacher_id == int(teacher_id)
        ]

    def create(self, *, name, schedule, teacher_id):
        new_id = max(self.classes, default=0) + 1
        self.add(SchoolClass(id=new_id, name=name, schedule=schedule, teacher_id=int(teacher_id)))
        return new_id

    def list_students(self, class_id):
        roster = [self._students.summary(sid) for sid in self.members.get(int(class_id), [])]
        return sorted(roster, key=lambda s: (s.last_name, s.first_name))

    def list_for_student(self, student_id):
        return [
            StudentClassView(
                id=c.id,
                name=c.name,
                schedule=c.schedule,
                teacher_name=_teacher_name(self._teachers, c.teacher_id),
            )
            for c in self.classes.values()
            if int(student_id) in self.members[c.id]
        ]


class InMemorySubjects:
    def __init__(self, teachers: InMemoryTeachers, students: InMemoryStudents):
        self._teachers = teachers
        self._students = students
        self.subjects: dict[int, Subject] = {}
        self.members: dict[int, list[int]] = {}
        self._enrollment_id = 0

    def add(self, subject: Subject, student_ids=()) -> None:
        self.subjects[subject.id] = subject
        self.members[subject.id] = list(student_ids)

    def _view(self, s: Subject) -> StudentSubjectView:
        return StudentSubjectView(
            id=s.id,
            subject_code=s.subject_code,
            description=s.description,
            schedule=s.schedule,
            teacher_name=_teacher_name(self._teachers, s.teacher_id),
        )

    def get_by_id(self, subject_id):
        return self.subjects.get(int(subject_id))

    def find_by_key_code(self, key_code):
        for s in self.subjects.values():
            if s.key_code == key_code:
                return self._view(s)
        return None

    def list_for_teacher(self, teacher_id):
        return [
            SubjectSummary(
                id=s.id,
                subject_code=s.subject_code,
                description=s.description,
                schedule=s.schedule,
                key_code=s.key_code,
                student_count=len(self.members[s.id]),
            )
            for s in sorted(self.subjects.values(), key=lambda s: s.subject_code)
            if s.teacher_id == int(teacher_id)
        ]

    def create(self, *, subject_code, description, schedule, teacher_id):
        new_id = max(self.subjects, default=0) + 1
        self.add(
            Subject(
                id=new_id,
                subject_code=subject_code,
                description=description,
                schedule=schedule,
                key_code=None,
                teacher_id=int(teacher_id),
            )
        )
        return new_id

    def update(self, *, subject_id, subject_code, description, schedule):
        s = self.subjects.get(int(subject_id))
        if not s:
            return False
        self.subjects[s.id] = replace(s, subject_code=subject_code, description=description, schedule=schedule)
        return True

    def delete(self, *, subject_id):
        self.members.pop(int(subject_id), None)
        return self.subjects.pop(int(subject_id), None) is not None

    def set_key_code(self, *, subject_id, key_code):
        for s in self.subjects.values():
            if s.key_code == key_code and s.id != int(subject_id):
                raise DuplicateRecord(f"Duplicate entry '{key_code}' for key 'key_code'")
        s = self.subjects[int(subject_id)]
        self.subjects[s.id] = replace(s, key_code=key_code)
        return True

    def list_students(self, subject_id):
        roster = [self._students.summary(sid) for sid in self.members.get(int(subject_id), [])]
        return sorted(roster, key=lambda s: (s.last_name, s.first_name))

    def enroll(self, *, subject_id, student_id):
        if int(student_id) in self.members[int(subject_id)]:
            raise DuplicateRecord("Duplicate entry for key 'subject_student'")
        self.members[int(subject_id)].append(int(student_id))
        self._enrollment_id += 1
        return self._enrollment_id

    def is_enrolled(self, *, subject_id, student_id):
        return int(student_id) in self.members.get(int(subject_id), [])

    def list_for_student(self, student_id):
        return [self._view(s) for s in self.subjects.values() if int(student_id) in self.members[s.id]]


class InMemoryAttendance:
    """Attendance store with the same unique key and all-or-nothing batches as the MySQL tables.

    `fail_at_row` makes the next class batch fail on that row (0-based).
    `stale_lookups` makes that many subject lookups miss, like a reader that
    has not yet seen a concurrent insert.
    """

    def __init__(self, classes: Optional[InMemoryClasses] = None):
        self._classes = classes
        self.class_rows: list[AttendanceRecord] = []
        self.subject_rows: dict[int, SubjectAttendanceRecord] = {}
        self._next_id = 0
        self.fail_at_row: Optional[int] = None
        self.stale_lookups = 0
        self.writes = 0

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def insert_class_batch(self, *, class_id, teacher_id, attendance_date, entries):
        self.writes += 1
        staged = []
        for index, e in enumerate(entries):
            if self.fail_at_row is not None and index == self.fail_at_row:
                self.fail_at_row = None
                raise StoreError("Lost connection to MySQL server during query")
            staged.append(
                AttendanceRecord(
                    id=self._new_id(),
                    student_id=e.student_id,
                    teacher_id=int(teacher_id),
                    class_id=int(class_id),
                    date=attendance_date,
                    status=e.status,
                    notes=e.notes,
                    created_at=datetime(2024, 3, 1, 9, 0, 0),
                )
            )
        self.class_rows.extend(staged)
        return len(staged)

    def find_subject_record(self, *, subject_id, student_id, attendance_date):
        if self.stale_lookups > 0:
            self.stale_lookups -= 1
            return None
        for r in self.subject_rows.values():
            if (r.subject_id, r.student_id, r.date) == (int(subject_id), int(student_id), attendance_date):
                return r
        return None

    def insert_subject_record(self, *, subject_id, student_id, teacher_id, attendance_date, status, notes=None):
        self.writes += 1
        for r in self.subject_rows.values():
            if (r.subject_id, r.student_id, r.date) == (int(subject_id), int(student_id), attendance_date):
                raise DuplicateRecord("Duplicate entry for key 'uniq_subject_student_date'")
        new_id = self._new_id()
        self.subject_rows[new_id] = SubjectAttendanceRecord(
            id=new_id,
            student_id=int(student_id),
            teacher_id=int(teacher_id),
            subject_id=int(subject_id),
            date=attendance_date,
            status=status,
            notes=notes,
        )
        return new_id

    def update_subject_record(self, *, record_id, teacher_id, status, notes=None):
        self.writes += 1
        r = self.subject_rows.get(int(record_id))
        if not r:
            return False
        self.subject_rows[r.id] = replace(r, teacher_id=int(teacher_id), status=status, notes=notes)
        return True

    def list_subject_records(self, *, subject_id, attendance_date=None, student_id=None):
        rows = [
            r
            for r in self.subject_rows.values()
            if r.subject_id == int(subject_id)
            and (attendance_date is None or r.date == attendance_date)
            and (student_id is None or r.student_id == int(student_id))
        ]
        return sorted(rows, key=lambda r: (-r.date.toordinal(), r.student_id))

    def list_for_student(self, *, student_id, class_id=None):
        rows = [
            r
            for r in self.class_rows
            if r.student_id == int(student_id) and (class_id is None or r.class_id == int(class_id))
        ]
        rows.sort(key=lambda r: (r.date, r.id), reverse=True)
        return [
            StudentAttendanceRow(
                id=r.id,
                date=r.date,
                status=r.status,
                notes=r.notes,
                class_name=self._classes.classes[r.class_id].name if self._classes else "",
            )
            for r in rows
        ]


TEACHER_ID = 1
OTHER_TEACHER_ID = 2
STUDENT_ID = 1
OTHER_STUDENT_ID = 2
CLASS_ID = 10
OTHER_CLASS_ID = 20
SUBJECT_ID = 100
OTHER_SUBJECT_ID = 200
DAY = date(2024, 3, 1)


@pytest.fixture(scope="session")
def password_hashes():
    return {
        "teacher123": generate_password_hash("teacher123"),
        "student123": generate_password_hash("student123"),
    }


@pytest.fixture
def repos(password_hashes):
    teachers = InMemoryTeachers(
        [
            Teacher(
                id=TEACHER_ID,
                first_name="Maria",
                middle_name=None,
                last_name="Santos",
                faculty_id="FAC-001",
                username="teacher",
                password_hash=password_hashes["teacher123"],
            ),
            Teacher(
                id=OTHER_TEACHER_ID,
                first_name="Jose",
                middle_name=None,
                last_name="Rizal",
                faculty_id="FAC-002",
                username="other",
                password_hash=password_hashes["teacher123"],
            ),
        ]
    )
    students = InMemoryStudents(
        [
            Student(
                id=STUDENT_ID,
                first_name="Juan",
                middle_name=None,
                last_name="Dela Cruz",
                student_no="2024-0001",
                course="BSIT",
                username="student1",
                password_hash=password_hashes["student123"],
            ),
            Student(
                id=OTHER_STUDENT_ID,
                first_name="Ana",
                middle_name="M",
                last_name="Reyes",
                student_no="2024-0002",
                course="BSIT",
                username="student2",
                password_hash=password_hashes["student123"],
            ),
        ]
    )

    classes = InMemoryClasses(teachers, students)
    classes.add(
        SchoolClass(id=CLASS_ID, name="Math 101", schedule="MWF 9:00", teacher_id=TEACHER_ID),
        [STUDENT_ID, OTHER_STUDENT_ID],
    )
    classes.add(SchoolClass(id=OTHER_CLASS_ID, name="History 1", schedule="TTh 1:00", teacher_id=OTHER_TEACHER_ID))

    subjects = InMemorySubjects(teachers, students)
    subjects.add(
        Subject(
            id=SUBJECT_ID,
            subject_code="IT101",
            description="Intro to Computing",
            schedule="MWF 10:00",
            key_code="ABC123",
            teacher_id=TEACHER_ID,
        ),
        [STUDENT_ID],
    )
    subjects.add(
        Subject(
            id=OTHER_SUBJECT_ID,
            subject_code="HIS200",
            description="World History",
            schedule="TTh 2:00",
            key_code="ZZZ999",
            teacher_id=OTHER_TEACHER_ID,
        )
    )

    attendance = InMemoryAttendance(classes)
    return SimpleNamespace(
        teachers=teachers,
        students=students,
        classes=classes,
        subjects=subjects,
        attendance=attendance,
    )


@pytest.fixture
def guard(repos):
    return OwnershipGuard(repos.classes, repos.subjects)


@pytest.fixture
def writer(repos, guard):
    return AttendanceWriter(repos.attendance, guard)


@pytest.fixture
def container(repos, tmp_path):
    return build_services(
        conn=None,
        teachers_repo=repos.teachers,
        students_repo=repos.students,
        classes_repo=repos.classes,
        subjects_repo=repos.subjects,
        attendance_repo=repos.attendance,
        picture_storage=ProfilePictureStorage(str(tmp_path / "uploads")),
    )


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(username: str, password: str, user_type: str) -> dict:
        resp = client.post(
            "/api/login",
            json={"username": username, "password": password, "userType": user_type},
        )
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}

    return _login


@pytest.fixture
def teacher_headers(login):
    return login("teacher", "teacher123", "teacher")


@pytest.fixture
def student_headers(login):
    return login("student1", "student123", "student")
