from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.app_logger import get_logger
from ..common.validators import optional_email, optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import UserType
from ..core.exceptions import AuthenticationError, Conflict, DuplicateRecord, InvalidInput, NotFound
from .model import Student, Teacher
from .picture_storage import ProfilePictureStorage
from .repository import Account, AccountRepository, StudentRepository, TeacherRepository

logger = get_logger("users")


def parse_user_type(value: Any) -> UserType:
    try:
        return UserType(value)
    except ValueError:
        raise InvalidInput("userType must be 'teacher' or 'student'")


@dataclass(frozen=True)
class AuthenticatedUser:
    """What goes into the bearer token and the login response."""

    id: int
    first_name: str
    last_name: str
    user_type: UserType


class AuthService:
    """Use cases: register and log in teachers and students."""

    def __init__(self, teachers: TeacherRepository, students: StudentRepository):
        self._teachers = teachers
        self._students = students

    def _accounts(self, user_type: UserType) -> AccountRepository:
        return self._teachers if user_type == UserType.TEACHER else self._students

    def register(
        self,
        *,
        user_type: UserType,
        first_name: str,
        last_name: str,
        username: str,
        password: str,
        middle_name: Optional[str] = None,
        faculty_id: Optional[str] = None,
        student_no: Optional[str] = None,
        course: Optional[str] = None,
    ) -> int:
        first_name = require_non_empty(first_name, "firstName")
        last_name = require_non_empty(last_name, "lastName")
        username = require_non_empty(username, "username")
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)

        if self._accounts(user_type).get_by_username(username):
            raise Conflict("Username already exists")

        password_hash = generate_password_hash(password)
        try:
            if user_type == UserType.TEACHER:
                new_id = self._teachers.create_teacher(
                    first_name=first_name,
                    middle_name=optional_text(middle_name, "middleName"),
                    last_name=last_name,
                    faculty_id=optional_text(faculty_id, "facultyId"),
                    username=username,
                    password_hash=password_hash,
                )
            else:
                new_id = self._students.create_student(
                    first_name=first_name,
                    middle_name=optional_text(middle_name, "middleName"),
                    last_name=last_name,
                    student_no=optional_text(student_no, "studentId"),
                    course=optional_text(course, "course"),
                    username=username,
                    password_hash=password_hash,
                )
        except DuplicateRecord as e:
            # Lost a race with another registration for the same username.
            raise Conflict("Username already exists") from e

        logger.info("registered %s account id=%s", user_type.value, new_id)
        return new_id

    def authenticate(self, username: str, password: str, user_type: UserType) -> AuthenticatedUser:
        username = require_non_empty(username, "username")
        require_non_empty(password, "password")

        account = self._accounts(user_type).get_by_username(username)
        if not account:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(account.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        return AuthenticatedUser(
            id=account.id,
            first_name=account.first_name,
            last_name=account.last_name,
            user_type=user_type,
        )


class ProfileService:
    """Use cases: view and edit one's own profile and picture."""

    def __init__(self, teachers: TeacherRepository, students: StudentRepository, storage: ProfilePictureStorage):
        self._teachers = teachers
        self._students = students
        self._storage = storage

    def _accounts(self, user_type: UserType) -> AccountRepository:
        return self._teachers if user_type == UserType.TEACHER else self._students

    def _get(self, user_type: UserType, account_id: int) -> Account:
        account = self._accounts(user_type).get_by_id(int(account_id))
        if not account:
            raise NotFound(f"{user_type.value.capitalize()} not found")
        return account

    def get_profile(self, user_type: UserType, account_id: int) -> dict:
        return self._to_profile(self._get(user_type, account_id))

    def update_contact(self, user_type: UserType, account_id: int, *, email: Any = None, phone: Any = None) -> dict:
        email = optional_email(email)
        phone = optional_text(phone, "phone")
        self._get(user_type, account_id)

        self._accounts(user_type).update_contact(int(account_id), email=email, phone=phone)
        return self.get_profile(user_type, account_id)

    def upload_picture(self, user_type: UserType, account_id: int, file: Optional[FileStorage]) -> str:
        account = self._get(user_type, account_id)
        new_path = self._storage.save(file, folder=f"{user_type.value}s")

        try:
            self._accounts(user_type).set_profile_image(account.id, path=new_path)
        except Exception:
            self._storage.delete(new_path)
            raise

        if account.profile_image:
            self._storage.delete(account.profile_image)
        return new_path

    def delete_picture(self, user_type: UserType, account_id: int) -> None:
        account = self._get(user_type, account_id)
        if not account.profile_image:
            raise NotFound("No profile picture to delete")

        self._accounts(user_type).set_profile_image(account.id, path=None)
        self._storage.delete(account.profile_image)

    def qr_payload(self, student_id: int) -> dict:
        """Data a student's check-in QR code encodes; requires a profile picture."""

        student = self._get(UserType.STUDENT, student_id)
        if not student.profile_image:
            raise NotFound("Upload a profile picture before generating a QR code")

        return {
            "id": student.id,
            "studentId": student.student_no,
            "firstName": student.first_name,
            "middleName": student.middle_name,
            "lastName": student.last_name,
            "course": student.course,
        }

    @staticmethod
    def _to_profile(account: Account) -> dict:
        out = {
            "id": account.id,
            "firstName": account.first_name,
            "middleName": account.middle_name,
            "lastName": account.last_name,
            "username": account.username,
            "email": account.email,
            "phone": account.phone,
            "profileImage": account.profile_image,
        }
        if isinstance(account, Teacher):
            out["facultyId"] = account.faculty_id
        elif isinstance(account, Student):
            out["studentId"] = account.student_no
            out["course"] = account.course
        return out
