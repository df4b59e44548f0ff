from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from transit_reports.schemas.incident_schemas import (
    CommentCreateSchema,
    IncidentCommentSchema,
    IncidentCreateSchema,
    IncidentSchema,
    StatusUpdateSchema,
)
from transit_reports.services import comment_service, incident_service
from transit_reports.utils.errors import RequestValidationError
from transit_reports.utils.responses import success_response
from transit_reports.utils.security import READ, UPDATE_STATUS, authorize, current_caller

bp = Blueprint("incidents", __name__)

incident_schema = IncidentSchema()
incident_list_schema = IncidentSchema(many=True)
comment_list_schema = IncidentCommentSchema(many=True)
incident_create_schema = IncidentCreateSchema()
status_update_schema = StatusUpdateSchema()
comment_create_schema = CommentCreateSchema()


def _request_payload() -> dict:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


@bp.get("")
@jwt_required()
def list_incidents():
    caller = current_caller()
    result = incident_service.list_incidents(
        caller,
        page=request.args.get("page"),
        limit=request.args.get("limit"),
        search=request.args.get("search"),
    )
    return success_response(
        data={
            "incidents": incident_list_schema.dump(result.items),
            "total": result.total,
            "page": result.page,
            "limit": result.limit,
            "totalPages": result.total_pages,
        }
    )


@bp.get("/<int:incident_id>")
@jwt_required()
def get_incident(incident_id: int):
    caller = current_caller()
    authorize(caller, READ)
    incident = incident_service.get_incident(incident_id)
    return success_response(data=incident_schema.dump(incident))


@bp.post("")
@jwt_required()
def create_incident():
    caller = current_caller()
    data = incident_create_schema.load(_request_payload())
    incident = incident_service.create_incident(caller, data, photo=request.files.get("photo"))
    return success_response(
        data=incident_schema.dump(incident),
        message="Incident created successfully",
        status_code=201,
    )


@bp.delete("/<int:incident_id>")
@jwt_required()
def delete_incident(incident_id: int):
    caller = current_caller()
    incident_service.delete_incident(caller, incident_id)
    return success_response(data={"id": incident_id}, message="Incident deleted successfully")


@bp.delete("")
@jwt_required()
def delete_incident_by_query():
    """``DELETE /api/incidents?id=<id>``, the form used by the dashboard."""
    caller = current_caller()
    incident_id = (request.args.get("id") or "").strip()
    if not incident_id:
        raise RequestValidationError("Incident ID is required")
    incident_service.delete_incident(caller, incident_id)
    return success_response(data={"id": incident_id}, message="Incident deleted successfully")


def _update_status(payload: dict):
    caller = current_caller()
    # Role gate comes before any payload validation
    authorize(caller, UPDATE_STATUS)
    data = status_update_schema.load(payload)
    incident = incident_service.update_status(caller, data["id"], data["status"])
    return success_response(
        data=incident_schema.dump(incident),
        message="Incident status updated successfully",
    )


@bp.patch("")
@jwt_required()
def update_status():
    return _update_status(request.get_json(silent=True) or {})


@bp.patch("/<int:incident_id>/status")
@jwt_required()
def update_status_by_id(incident_id: int):
    payload = dict(request.get_json(silent=True) or {})
    payload["id"] = incident_id
    return _update_status(payload)


@bp.get("/<int:incident_id>/comments")
@jwt_required()
def list_comments(incident_id: int):
    caller = current_caller()
    comments = comment_service.list_comments(caller, incident_id)
    return success_response(data=comment_list_schema.dump(comments))


def _add_comment(incident_id, data: dict):
    caller = current_caller()
    comments = comment_service.add_comment(caller, incident_id, data["content"])
    return success_response(
        data=comment_list_schema.dump(comments),
        message="Comment added successfully",
        status_code=201,
    )


@bp.post("/<int:incident_id>/comments")
@jwt_required()
def add_comment(incident_id: int):
    data = comment_create_schema.load(request.get_json(silent=True) or {})
    return _add_comment(incident_id, data)


@bp.post("/comments")
@jwt_required()
def add_comment_by_body():
    """``POST /api/incidents/comments`` with ``{incidentId, content}``."""
    data = comment_create_schema.load(request.get_json(silent=True) or {})
    if data.get("incident_id") is None:
        raise RequestValidationError("Incident ID is required")
    return _add_comment(data["incident_id"], data)
