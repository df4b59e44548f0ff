from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError


class ApiError(Exception):
    """
    Generic business error. Subclasses pin the HTTP status and the
    machine-readable ``payload.code`` so callers can tell failures apart.
    """
    status_code = 400
    code = None

    def __init__(self, message, status_code=None, errors=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or {}
        self.payload = dict(payload or {})
        if self.code and "code" not in self.payload:
            self.payload["code"] = self.code


class Unauthenticated(ApiError):
    status_code = 401
    code = "UNAUTHENTICATED"


class Forbidden(ApiError):
    status_code = 403
    code = "FORBIDDEN"


class NotFound(ApiError):
    status_code = 404
    code = "NOT_FOUND"


class UnknownCaller(ApiError):
    status_code = 404
    code = "UNKNOWN_CALLER"


class RequestValidationError(ApiError):
    status_code = 400
    code = "VALIDATION_ERROR"


class StoreError(ApiError):
    """Persistence failure. The only kind allowed to carry the low-level message."""
    status_code = 500
    code = "STORE_ERROR"

    @classmethod
    def wrap(cls, message, exc):
        errors = {"detail": str(exc)} if current_app.debug else None
        return cls(message, errors=errors)


def _error_body(message, errors=None, payload=None):
    response = {
        "success": False,
        "message": message,
    }
    if errors:
        response["errors"] = errors
    if payload:
        response["payload"] = payload
    return response


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(_error_body(err.message, err.errors, err.payload)), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err: ValidationError):
        response = _error_body(
            "Invalid data",
            err.messages if hasattr(err, "messages") else str(err),
            {"code": RequestValidationError.code},
        )
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return jsonify(_error_body(err.description or "HTTP error")), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        app.logger.exception(err)
        return jsonify(_error_body("Internal server error")), 500


def register_jwt_handlers(jwt):
    """Render Flask-JWT-Extended failures with the same envelope as ``Unauthenticated``."""

    def _unauthenticated(message):
        err = Unauthenticated(message)
        return jsonify(_error_body(err.message, payload=err.payload)), err.status_code

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _unauthenticated("Not authenticated")

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _unauthenticated("Invalid token")

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return _unauthenticated("Token expired")
