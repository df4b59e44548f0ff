from transit_reports.extensions import db
from sqlalchemy import func


USER_ROLES = ("user", "official", "admin")


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(
        db.Enum(*USER_ROLES, name="user_role_enum"),
        nullable=False,
        default="user",
        server_default="user",
    )

    created_at = db.Column(
        db.TIMESTAMP,
        server_default=func.current_timestamp()
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role}>"
