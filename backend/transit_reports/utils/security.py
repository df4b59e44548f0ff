from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from flask_jwt_extended import get_jwt, get_jwt_identity

from transit_reports.extensions import db
from transit_reports.models.incident import Incident
from transit_reports.models.user import User
from transit_reports.utils.errors import Forbidden, Unauthenticated, UnknownCaller


READ = "read"
CREATE = "create"
COMMENT = "comment"
UPDATE_STATUS = "update_status"
DELETE = "delete"

# Actions each role may perform on any incident.
ROLE_GRANTS: dict[str, frozenset[str]] = {
	"user": frozenset({READ, CREATE, COMMENT}),
	"official": frozenset({READ, CREATE, COMMENT, UPDATE_STATUS, DELETE}),
	"admin": frozenset({READ, CREATE, COMMENT, DELETE}),
}

# Actions the reporter may perform on their own incident.
OWNER_GRANTS: frozenset[str] = frozenset({DELETE})


@dataclass(frozen=True)
class Caller:
	id: int
	name: str
	email: str
	role: str


def current_caller() -> Caller:
	"""Build the caller from the verified JWT. Must run under ``jwt_required``."""
	identity = get_jwt_identity()
	try:
		user_id = int(identity)
	except (TypeError, ValueError):
		raise Unauthenticated("Invalid token")

	claims = get_jwt() or {}
	return Caller(
		id=user_id,
		name=str(claims.get("name") or ""),
		email=str(claims.get("email") or "").strip().lower(),
		role=str(claims.get("role") or "user").strip().lower(),
	)


def is_allowed(caller: Caller, action: str, incident: Incident | None = None) -> bool:
	if action in ROLE_GRANTS.get(caller.role, frozenset()):
		return True
	if incident is not None and action in OWNER_GRANTS:
		return incident.is_reported_by(caller.email)
	return False


def authorize(caller: Caller, action: str, incident: Incident | None = None) -> None:
	if is_allowed(caller, action, incident):
		return

	current_app.logger.warning(
		"Denied %s for %s (role=%s) on incident %s",
		action,
		caller.email,
		caller.role,
		incident.id if incident is not None else "-",
	)
	if action == UPDATE_STATUS:
		raise Forbidden("Not authorized to update incident status")
	if action == DELETE:
		raise Forbidden("Not authorized to delete this incident")
	raise Forbidden("Not authorized")


def require_known_user(caller: Caller) -> User:
	user: User | None = db.session.get(User, caller.id)
	if not user:
		raise UnknownCaller("User not found")
	return user
