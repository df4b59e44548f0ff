from __future__ import annotations

from datetime import datetime

from flask import current_app

from transit_reports.extensions import db
from transit_reports.models.incident_comment import IncidentComment
from transit_reports.services.incident_service import commit_or_raise, get_incident
from transit_reports.utils.errors import RequestValidationError
from transit_reports.utils.security import COMMENT, READ, Caller, authorize


def list_comments(caller: Caller, incident_id) -> list[IncidentComment]:
	authorize(caller, READ)
	return list(get_incident(incident_id).comments)


def add_comment(caller: Caller, incident_id, content: str | None) -> list[IncidentComment]:
	"""Append a comment at the end of the incident's sequence and return the whole sequence."""
	authorize(caller, COMMENT)

	text = (content or "").strip()
	if not text:
		raise RequestValidationError("Comment content is required")

	incident = get_incident(incident_id)

	now = datetime.utcnow()
	comment = IncidentComment(
		content=text,
		author_name=caller.name,
		author_email=caller.email,
		created_at=now,
	)
	incident.comments.append(comment)
	incident.touch(now)
	db.session.add(comment)

	commit_or_raise("Could not add comment")
	current_app.logger.info("Comment %s added to incident %s by %s", comment.id, incident.id, caller.email)
	return list(incident.comments)
