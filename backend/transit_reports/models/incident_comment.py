from datetime import datetime

from transit_reports.extensions import db
from transit_reports.models.incident import Timestamp


class IncidentComment(db.Model):
    """Append-only comment. Order within an incident follows ``id``."""

    __tablename__ = "incident_comments"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    incident_id = db.Column(
        db.Integer,
        db.ForeignKey("incidents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    content = db.Column(db.Text, nullable=False)

    # Author snapshot at posting time
    author_name = db.Column(db.String(150), nullable=False)
    author_email = db.Column(db.String(255), nullable=False)

    created_at = db.Column(Timestamp, nullable=False, default=datetime.utcnow)

    incident = db.relationship("Incident", back_populates="comments")

    @property
    def author(self) -> dict:
        return {"name": self.author_name, "email": self.author_email}
