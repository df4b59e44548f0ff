from datetime import datetime, timedelta

from sqlalchemy.dialects import mysql
from sqlalchemy.orm import validates

from transit_reports.extensions import db


# Any status may follow any other; only membership is enforced.
INCIDENT_STATUSES = ("pending", "in_progress", "resolved", "rejected")

# Microsecond precision so updated_at keeps strictly increasing on MySQL
Timestamp = db.DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")


class Incident(db.Model):
    __tablename__ = "incidents"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    title = db.Column(db.String(200), nullable=False)
    location_address = db.Column(db.String(300), nullable=False)
    # Kept for parity with the public shape; never filled on create
    location_coordinates = db.Column(db.JSON, nullable=True)
    type = db.Column(db.String(100), nullable=False)
    severity = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    photo_url = db.Column(db.String(500), nullable=True)

    status = db.Column(
        db.Enum(*INCIDENT_STATUSES, name="incident_status_enum"),
        nullable=False,
        default="pending",
        server_default="pending",
    )

    # Snapshot of the reporter at creation time, not a live reference
    reported_by_id = db.Column(db.Integer, nullable=False)
    reported_by_name = db.Column(db.String(150), nullable=False)
    reported_by_email = db.Column(db.String(255), nullable=False, index=True)

    # Snapshot of the last official who changed the status
    updated_by_id = db.Column(db.Integer, nullable=True)
    updated_by_name = db.Column(db.String(150), nullable=True)
    updated_by_email = db.Column(db.String(255), nullable=True)

    created_at = db.Column(Timestamp, nullable=False, default=datetime.utcnow, index=True)
    updated_at = db.Column(Timestamp, nullable=False, default=datetime.utcnow)

    comments = db.relationship(
        "IncidentComment",
        back_populates="incident",
        cascade="all, delete-orphan",
        order_by="IncidentComment.id",
        passive_deletes=True,
    )

    @validates("status")
    def validate_status(self, key, value):
        if value not in INCIDENT_STATUSES:
            raise ValueError(f"Invalid incident status: {value!r}")
        return value

    @validates("reported_by_id", "reported_by_name", "reported_by_email")
    def validate_reporter_immutable(self, key, value):
        current = getattr(self, key)
        if current is not None and current != value:
            raise ValueError(f"{key} cannot change after creation")
        return value

    @property
    def reported_by(self) -> dict:
        return {
            "id": self.reported_by_id,
            "name": self.reported_by_name,
            "email": self.reported_by_email,
        }

    @property
    def updated_by(self) -> dict | None:
        if self.updated_by_email is None:
            return None
        return {
            "id": self.updated_by_id,
            "name": self.updated_by_name,
            "email": self.updated_by_email,
        }

    def is_reported_by(self, email: str | None) -> bool:
        if not email or not self.reported_by_email:
            return False
        return self.reported_by_email.strip().lower() == email.strip().lower()

    def touch(self, now: datetime | None = None) -> datetime:
        """Stamp ``updated_at``, always moving it forward."""
        now = now or datetime.utcnow()
        if self.updated_at is not None and now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now
        return now

    def __repr__(self) -> str:
        return f"<Incident id={self.id} status={self.status}>"
