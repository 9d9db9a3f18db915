from __future__ import annotations

from flask import Flask, jsonify, request
from flask_jwt_extended import create_access_token

from ..common.web import current_user_id, json_body, student_required, teacher_required
from ..container import Container
from ..core.enums import UserType
from .service import parse_user_type


def register(app: Flask, container: Container) -> None:
    @app.route("/api/register", methods=["POST"], endpoint="api_register")
    def api_register():
        data = json_body()
        user_type = parse_user_type(data.get("userType"))

        new_id = container.auth_service.register(
            user_type=user_type,
            first_name=data.get("firstName"),
            middle_name=data.get("middleName"),
            last_name=data.get("lastName"),
            username=data.get("username"),
            password=data.get("password"),
            faculty_id=data.get("facultyId"),
            student_no=data.get("studentId"),
            course=data.get("course"),
        )
        return jsonify({"message": "User registered successfully", "id": new_id}), 201

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = json_body()
        user_type = parse_user_type(data.get("userType"))

        user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""), user_type)
        token = create_access_token(identity=str(user.id), additional_claims={"userType": user.user_type.value})

        return jsonify(
            {
                "message": "Login successful",
                "token": token,
                "user": {
                    "id": user.id,
                    "firstName": user.first_name,
                    "lastName": user.last_name,
                    "userType": user.user_type.value,
                },
            }
        )

    def _profile_routes(user_type: UserType, guard) -> None:
        prefix = f"/api/{user_type.value}/profile"
        name = user_type.value

        @app.route(prefix, methods=["GET"], endpoint=f"{name}_profile")
        @guard
        def profile():
            return jsonify(container.profile_service.get_profile(user_type, current_user_id()))

        @app.route(f"{prefix}/update", methods=["POST"], endpoint=f"{name}_profile_update")
        @guard
        def profile_update():
            data = json_body()
            updated = container.profile_service.update_contact(
                user_type,
                current_user_id(),
                email=data.get("email"),
                phone=data.get("phone"),
            )
            return jsonify({"message": "Profile updated successfully", "profile": updated})

        @app.route(f"{prefix}/upload-picture", methods=["POST"], endpoint=f"{name}_profile_upload_picture")
        @guard
        def profile_upload_picture():
            path = container.profile_service.upload_picture(
                user_type,
                current_user_id(),
                request.files.get("profileImage"),
            )
            return jsonify({"message": "Profile picture uploaded successfully", "profileImage": path})

        @app.route(f"{prefix}/delete-picture", methods=["DELETE"], endpoint=f"{name}_profile_delete_picture")
        @guard
        def profile_delete_picture():
            container.profile_service.delete_picture(user_type, current_user_id())
            return jsonify({"message": "Profile picture deleted successfully"})

    _profile_routes(UserType.TEACHER, teacher_required)
    _profile_routes(UserType.STUDENT, student_required)

    @app.route("/api/student/qr-payload", methods=["GET"], endpoint="student_qr_payload")
    @student_required
    def student_qr_payload():
        """Data the client renders into the student's attendance QR image."""
        return jsonify(container.profile_service.qr_payload(current_user_id()))
