from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import format_date
from ..common.web import current_user_id, json_body, student_required, teacher_required
from ..container import Container
from ..users.model import StudentSummary


def student_json(s: StudentSummary) -> dict:
    return {
        "id": s.id,
        "firstName": s.first_name,
        "middleName": s.middle_name,
        "lastName": s.last_name,
        "studentId": s.student_no,
        "course": s.course,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/teacher/classes", methods=["GET"], endpoint="teacher_classes")
    @teacher_required
    def teacher_classes():
        classes = container.class_service.list_for_teacher(current_user_id())
        return jsonify(
            [
                {"id": c.id, "name": c.name, "schedule": c.schedule, "studentCount": c.student_count}
                for c in classes
            ]
        )

    @app.route("/api/teacher/classes", methods=["POST"], endpoint="teacher_classes_create")
    @teacher_required
    def teacher_classes_create():
        data = json_body()
        class_id = container.class_service.create_class(
            teacher_id=current_user_id(),
            name=data.get("name"),
            schedule=data.get("schedule"),
        )
        return jsonify({"message": "Class created successfully", "classId": class_id}), 201

    @app.route("/api/teacher/classes/<int:class_id>/students", methods=["GET"], endpoint="teacher_class_students")
    @teacher_required
    def teacher_class_students(class_id: int):
        students = container.class_service.roster(teacher_id=current_user_id(), class_id=class_id)
        return jsonify([student_json(s) for s in students])

    @app.route("/api/teacher/classes/<int:class_id>/attendance", methods=["POST"], endpoint="teacher_class_attendance")
    @teacher_required
    def teacher_class_attendance(class_id: int):
        data = json_body()
        result = container.attendance_writer.record_class_attendance(
            teacher_id=current_user_id(),
            class_id=class_id,
            attendance_date=data.get("date"),
            records=data.get("attendanceRecords"),
        )
        return jsonify({"message": result.message, "count": result.count}), 200

    @app.route("/api/student/classes", methods=["GET"], endpoint="student_classes")
    @student_required
    def student_classes():
        classes = container.class_service.list_for_student(current_user_id())
        return jsonify(
            [{"id": c.id, "name": c.name, "schedule": c.schedule, "teacher": c.teacher_name} for c in classes]
        )

    @app.route("/api/student/attendance", methods=["GET"], endpoint="student_attendance")
    @app.route("/api/student/attendance/<int:class_id>", methods=["GET"], endpoint="student_class_attendance")
    @student_required
    def student_attendance(class_id: int | None = None):
        rows = container.attendance_queries.student_class_attendance(student_id=current_user_id(), class_id=class_id)
        return jsonify(
            [
                {
                    "id": r.id,
                    "date": format_date(r.date),
                    "status": r.status.value,
                    "notes": r.notes,
                    "className": r.class_name,
                }
                for r in rows
            ]
        )
