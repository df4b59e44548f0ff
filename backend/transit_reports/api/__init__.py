from .auth_routes import bp as auth_bp
from .incident_routes import bp as incidents_bp

__all__ = [
    "auth_bp",
    "incidents_bp",
]
