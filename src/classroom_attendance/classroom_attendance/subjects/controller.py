from __future__ import annotations

from flask import Flask, jsonify, request

from ..attendance.model import SubjectAttendanceRecord
from ..classes.controller import student_json
from ..common.datetime_utils import format_date
from ..common.web import current_user_id, json_body, student_required, teacher_required
from ..container import Container
from ..core.enums import WriteOutcome
from .model import StudentSubjectView


def _view_json(s: StudentSubjectView) -> dict:
    return {
        "id": s.id,
        "subjectCode": s.subject_code,
        "description": s.description,
        "schedule": s.schedule,
        "teacher": s.teacher_name,
    }


def _record_json(r: SubjectAttendanceRecord) -> dict:
    return {
        "id": r.id,
        "studentId": r.student_id,
        "subjectId": r.subject_id,
        "date": format_date(r.date),
        "status": r.status.value,
        "notes": r.notes,
    }


def register(app: Flask, container: Container) -> None:
    # ===== TEACHER =====

    @app.route("/api/teacher/subjects", methods=["GET"], endpoint="teacher_subjects")
    @teacher_required
    def teacher_subjects():
        subjects = container.subject_service.list_for_teacher(current_user_id())
        return jsonify(
            [
                {
                    "id": s.id,
                    "subjectCode": s.subject_code,
                    "description": s.description,
                    "schedule": s.schedule,
                    "keyCode": s.key_code,
                    "studentCount": s.student_count,
                }
                for s in subjects
            ]
        )

    @app.route("/api/teacher/subjects", methods=["POST"], endpoint="teacher_subjects_create")
    @teacher_required
    def teacher_subjects_create():
        data = json_body()
        subject_id = container.subject_service.create_subject(
            teacher_id=current_user_id(),
            subject_code=data.get("subjectCode"),
            description=data.get("description"),
            schedule=data.get("schedule"),
        )
        return jsonify({"message": "Subject created successfully", "subjectId": subject_id}), 201

    @app.route("/api/teacher/subjects/<int:subject_id>", methods=["PUT"], endpoint="teacher_subjects_update")
    @teacher_required
    def teacher_subjects_update(subject_id: int):
        data = json_body()
        subject = container.subject_service.update_subject(
            teacher_id=current_user_id(),
            subject_id=subject_id,
            subject_code=data.get("subjectCode"),
            description=data.get("description"),
            schedule=data.get("schedule"),
        )
        return jsonify(
            {
                "message": "Subject updated successfully",
                "subject": {
                    "id": subject.id,
                    "subjectCode": subject.subject_code,
                    "description": subject.description,
                    "schedule": subject.schedule,
                },
            }
        )

    @app.route("/api/teacher/subjects/<int:subject_id>", methods=["DELETE"], endpoint="teacher_subjects_delete")
    @teacher_required
    def teacher_subjects_delete(subject_id: int):
        container.subject_service.delete_subject(teacher_id=current_user_id(), subject_id=subject_id)
        return jsonify({"message": "Subject deleted successfully"})

    @app.route(
        "/api/teacher/subjects/<int:subject_id>/generate-key",
        methods=["POST"],
        endpoint="teacher_subjects_generate_key",
    )
    @teacher_required
    def teacher_subjects_generate_key(subject_id: int):
        key_code = container.subject_service.generate_key(teacher_id=current_user_id(), subject_id=subject_id)
        return jsonify({"message": "Subject key code generated successfully", "keyCode": key_code})

    @app.route("/api/teacher/subjects/<int:subject_id>/students", methods=["GET"], endpoint="teacher_subject_students")
    @teacher_required
    def teacher_subject_students(subject_id: int):
        students = container.subject_service.roster(teacher_id=current_user_id(), subject_id=subject_id)
        return jsonify([student_json(s) for s in students])

    @app.route(
        "/api/teacher/subjects/<int:subject_id>/attendance",
        methods=["POST"],
        endpoint="teacher_subject_attendance_record",
    )
    @teacher_required
    def teacher_subject_attendance_record(subject_id: int):
        data = json_body()
        result = container.attendance_writer.record_subject_attendance(
            teacher_id=current_user_id(),
            subject_id=subject_id,
            student_id=data.get("studentId"),
            attendance_date=data.get("date"),
            status=data.get("status"),
            notes=data.get("notes"),
        )
        status = 201 if result.outcome == WriteOutcome.CREATED else 200
        return jsonify({"message": result.message, "id": result.record_id, "outcome": result.outcome.value}), status

    @app.route(
        "/api/teacher/subjects/<int:subject_id>/attendance",
        methods=["GET"],
        endpoint="teacher_subject_attendance_list",
    )
    @teacher_required
    def teacher_subject_attendance_list(subject_id: int):
        records = container.attendance_queries.subject_records(
            teacher_id=current_user_id(),
            subject_id=subject_id,
            attendance_date=request.args.get("date") or None,
        )
        return jsonify([_record_json(r) for r in records])

    # ===== STUDENT =====

    @app.route("/api/student/subjects", methods=["GET"], endpoint="student_subjects")
    @student_required
    def student_subjects():
        return jsonify([_view_json(s) for s in container.subject_service.list_for_student(current_user_id())])

    @app.route("/api/student/subjects/search", methods=["POST"], endpoint="student_subjects_search")
    @student_required
    def student_subjects_search():
        data = json_body()
        return jsonify(_view_json(container.subject_service.search_by_key(data.get("key_code"))))

    @app.route("/api/student/subjects/enroll", methods=["POST"], endpoint="student_subjects_enroll")
    @student_required
    def student_subjects_enroll():
        data = json_body()
        container.subject_service.enroll(student_id=current_user_id(), subject_id=data.get("subjectId"))
        return jsonify({"message": "Enrolled successfully"}), 201

    @app.route(
        "/api/student/subjects/<int:subject_id>/attendance",
        methods=["GET"],
        endpoint="student_subject_attendance",
    )
    @student_required
    def student_subject_attendance(subject_id: int):
        records = container.attendance_queries.student_subject_attendance(
            student_id=current_user_id(),
            subject_id=subject_id,
        )
        return jsonify([_record_json(r) for r in records])
