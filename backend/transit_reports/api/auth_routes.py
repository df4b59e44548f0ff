from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from transit_reports.schemas.auth_schemas import ChangePasswordSchema, LoginSchema, RegisterSchema
from transit_reports.services import auth_service
from transit_reports.utils.responses import success_response
from transit_reports.utils.security import current_caller, require_known_user

bp = Blueprint("auth", __name__)


@bp.post("/register")
def register():
    data = RegisterSchema().load(request.get_json(silent=True) or {})
    user = auth_service.create_user(data["name"], data["email"], data["password"])
    return success_response(
        data=auth_service.user_to_dict(user),
        message="User registered successfully",
        status_code=201
    )


@bp.post("/login")
def login():
    data = LoginSchema().load(request.get_json(silent=True) or {})
    result = auth_service.authenticate(data["email"], data["password"])
    return success_response(data=result, message="Login successful")


@bp.get("/me")
@jwt_required()
def me():
    user = require_known_user(current_caller())
    return success_response(data=auth_service.user_to_dict(user), message="User profile")


@bp.post("/change-password")
@jwt_required()
def change_password():
    user = require_known_user(current_caller())
    data = ChangePasswordSchema().load(request.get_json(silent=True) or {})
    auth_service.change_password(user, data["current_password"], data["new_password"])
    return success_response(message="Password updated successfully")
