from .user import User
from .incident import Incident, INCIDENT_STATUSES
from .incident_comment import IncidentComment

__all__ = ["User", "Incident", "INCIDENT_STATUSES", "IncidentComment"]
