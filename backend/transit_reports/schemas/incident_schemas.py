from marshmallow import EXCLUDE, fields, pre_load, validate

from transit_reports.extensions import ma
from transit_reports.models.incident import Incident, INCIDENT_STATUSES
from transit_reports.models.incident_comment import IncidentComment


_non_blank = validate.Length(min=1, error="This field cannot be empty.")


def _strip_strings(data):
    if not hasattr(data, "items"):
        return data
    return {k: (v.strip() if isinstance(v, str) else v) for k, v in data.items()}


class IncidentCommentSchema(ma.SQLAlchemySchema):
    class Meta:
        model = IncidentComment

    id = ma.auto_field()
    content = ma.auto_field()
    created_at = ma.auto_field(data_key="createdAt")
    author = fields.Method("get_author")

    def get_author(self, obj):
        return obj.author


class IncidentSchema(ma.SQLAlchemySchema):
    """
    Public shape of an incident. Snapshots are rendered as nested objects
    (``reportedBy``, ``updatedBy``) and the address lives under ``location``.
    """

    class Meta:
        model = Incident

    id = ma.auto_field()
    title = ma.auto_field()
    location = fields.Method("get_location")
    type = ma.auto_field()
    severity = ma.auto_field()
    description = ma.auto_field()
    photo_url = ma.auto_field(data_key="photoUrl")
    status = fields.String()
    reported_by = fields.Method("get_reported_by", data_key="reportedBy")
    updated_by = fields.Method("get_updated_by", data_key="updatedBy")
    comments = fields.Nested(IncidentCommentSchema, many=True)
    created_at = ma.auto_field(data_key="createdAt")
    updated_at = ma.auto_field(data_key="updatedAt")

    def get_location(self, obj):
        return {
            "address": obj.location_address or "",
            "coordinates": obj.location_coordinates,
        }

    def get_reported_by(self, obj):
        return obj.reported_by

    def get_updated_by(self, obj):
        return obj.updated_by


class IncidentCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=_non_blank)
    # Plain address text; the stored shape is location.address
    location = fields.String(required=True, validate=_non_blank)
    type = fields.String(required=True, validate=_non_blank)
    severity = fields.String(required=True, validate=_non_blank)
    description = fields.String(required=False, load_default="")

    @pre_load
    def normalize(self, data, **kwargs):
        data = _strip_strings(data)
        # Accept {"location": {"address": "..."}} as sent by JSON clients
        loc = data.get("location") if hasattr(data, "get") else None
        if isinstance(loc, dict):
            data = dict(data)
            data["location"] = str(loc.get("address") or "").strip()
        if data.get("description") is None and "description" in data:
            data = dict(data)
            data["description"] = ""
        return data


class StatusUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Integer(required=True, strict=False)
    status = fields.String(
        required=True,
        validate=validate.OneOf(INCIDENT_STATUSES, error="Invalid status value"),
    )

    @pre_load
    def normalize(self, data, **kwargs):
        return _strip_strings(data)


class CommentCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    incident_id = fields.Integer(required=False, data_key="incidentId")
    content = fields.String(required=True, validate=_non_blank)

    @pre_load
    def normalize(self, data, **kwargs):
        return _strip_strings(data)
