from __future__ import annotations

from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from transit_reports.extensions import db
from transit_reports.models.incident import Incident, INCIDENT_STATUSES
from transit_reports.models.incident_comment import IncidentComment
from transit_reports.services import storage_service
from transit_reports.utils.errors import NotFound, RequestValidationError, StoreError
from transit_reports.utils.query import Page, build_search_filter, paginate, parse_page_args
from transit_reports.utils.security import (
	CREATE,
	DELETE,
	READ,
	UPDATE_STATUS,
	Caller,
	authorize,
	require_known_user,
)


SEARCH_COLUMNS = (
	Incident.title,
	Incident.description,
	Incident.location_address,
	Incident.type,
)

# Newest first; id breaks ties so page windows never overlap
LISTING_ORDER = (Incident.created_at.desc(), Incident.id.desc())


def commit_or_raise(message: str) -> None:
	try:
		db.session.commit()
	except SQLAlchemyError as exc:
		db.session.rollback()
		current_app.logger.exception("Store failure: %s", message)
		raise StoreError.wrap(message, exc)


def get_incident(incident_id) -> Incident:
	try:
		incident_id = int(incident_id)
	except (TypeError, ValueError):
		raise NotFound("Incident not found")

	incident: Incident | None = db.session.get(Incident, incident_id)
	if not incident:
		raise NotFound("Incident not found")
	return incident


def list_incidents(caller: Caller, page=None, limit=None, search: str | None = None) -> Page:
	authorize(caller, READ)

	page_int, limit_int = parse_page_args(
		page,
		limit,
		default_limit=current_app.config.get("DEFAULT_PAGE_SIZE", 10),
		max_limit=current_app.config.get("MAX_PAGE_SIZE", 100),
	)

	query = Incident.query.options(selectinload(Incident.comments))
	condition = build_search_filter(search, SEARCH_COLUMNS)
	if condition is not None:
		query = query.filter(condition)

	return paginate(query, page_int, limit_int, LISTING_ORDER)


def create_incident(caller: Caller, data: dict, photo=None) -> Incident:
	"""
	Insert a new incident reported by ``caller``.

	``data`` is the already validated create payload. The reporter snapshot
	always comes from the caller's user record, never from the payload.
	"""
	authorize(caller, CREATE)
	user = require_known_user(caller)

	photo_url = storage_service.save_photo(photo)

	now = datetime.utcnow()
	incident = Incident(
		title=data["title"],
		location_address=data["location"],
		location_coordinates=None,
		type=data["type"],
		severity=data["severity"],
		description=data.get("description") or "",
		photo_url=photo_url,
		status="pending",
		reported_by_id=user.id,
		reported_by_name=user.name,
		reported_by_email=user.email,
		created_at=now,
		updated_at=now,
	)
	db.session.add(incident)

	try:
		commit_or_raise("Could not create incident")
	except StoreError:
		storage_service.delete_photo(photo_url)
		raise

	current_app.logger.info("Incident %s created by %s", incident.id, user.email)
	return incident


def delete_incident(caller: Caller, incident_id) -> None:
	incident = get_incident(incident_id)
	authorize(caller, DELETE, incident)

	target_id = incident.id
	db.session.expunge(incident)

	IncidentComment.query.filter_by(incident_id=target_id).delete(synchronize_session=False)
	deleted = Incident.query.filter_by(id=target_id).delete(synchronize_session=False)
	if not deleted:
		# Removed by someone else between the lookup and the delete
		db.session.rollback()
		raise NotFound("Incident not found")

	commit_or_raise("Could not delete incident")
	current_app.logger.info("Incident %s deleted by %s", target_id, caller.email)


def update_status(caller: Caller, incident_id, status: str | None) -> Incident:
	authorize(caller, UPDATE_STATUS)

	if incident_id in (None, "") or not status:
		raise RequestValidationError("Incident ID and status are required")
	if status not in INCIDENT_STATUSES:
		raise RequestValidationError("Invalid status value")

	incident = get_incident(incident_id)

	previous = incident.status
	incident.status = status
	incident.touch()
	incident.updated_by_id = caller.id
	incident.updated_by_name = caller.name
	incident.updated_by_email = caller.email

	commit_or_raise("Could not update incident status")
	current_app.logger.info(
		"Incident %s status %s -> %s by %s", incident.id, previous, status, caller.email
	)
	return incident
