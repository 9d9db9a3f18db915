from __future__ import annotations

from functools import wraps
from typing import Any

from flask import Flask, jsonify, request
from flask_jwt_extended import JWTManager, get_jwt, get_jwt_identity, verify_jwt_in_request
from werkzeug.exceptions import HTTPException

from ..core.enums import UserType
from ..core.exceptions import (
    AuthenticationError,
    Conflict,
    DomainError,
    InvalidInput,
    NotFound,
    NotFoundOrForbidden,
    RecordingFailed,
    StoreError,
)
from .app_logger import get_logger

logger = get_logger("http")

STATUS_BY_ERROR = {
    InvalidInput: 400,
    AuthenticationError: 401,
    NotFoundOrForbidden: 403,
    NotFound: 404,
    Conflict: 409,
    RecordingFailed: 500,
}


def status_for(error: DomainError) -> int:
    for cls in type(error).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 400


def error_body(message: str, kind: str) -> dict:
    return {"success": False, "message": message, "kind": kind}


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")
    return data


def current_user_id() -> int:
    return int(get_jwt_identity())


def _role_required(user_type: UserType):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if get_jwt().get("userType") != user_type.value:
                return (
                    jsonify(error_body(f"Access denied. {user_type.value.capitalize()} role required.", "forbidden")),
                    403,
                )
            return view(*args, **kwargs)

        return wrapper

    return decorator


teacher_required = _role_required(UserType.TEACHER)
student_required = _role_required(UserType.STUDENT)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if status >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.path, e.kind, e)
        return jsonify(error_body(str(e), e.kind)), status

    @app.errorhandler(StoreError)
    def handle_store_error(e: StoreError):
        logger.error("%s %s -> store error: %s", request.method, request.path, e)
        return jsonify(error_body("Database error", "store_error")), 500

    @app.errorhandler(413)
    def handle_too_large(_e: Any):
        return jsonify(error_body("Uploaded file is too large", "invalid_input")), 413

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify(error_body(e.description or e.name, "http_error")), e.code
        logger.exception("%s %s failed", request.method, request.path)
        return jsonify(error_body("Internal server error", "internal_error")), 500


def register_jwt_handlers(jwt: JWTManager) -> None:
    @jwt.unauthorized_loader
    def missing_token(reason: str):
        return jsonify(error_body("Access denied. No token provided.", "unauthorized")), 401

    @jwt.invalid_token_loader
    def invalid_token(reason: str):
        return jsonify(error_body("Invalid token", "forbidden")), 403

    @jwt.expired_token_loader
    def expired_token(jwt_header: dict, jwt_payload: dict):
        return jsonify(error_body("Token expired", "forbidden")), 403
