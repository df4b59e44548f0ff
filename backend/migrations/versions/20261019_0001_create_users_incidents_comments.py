"""create users, incidents and incident_comments

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


INCIDENT_STATUSES = ("pending", "in_progress", "resolved", "rejected")
USER_ROLES = ("user", "official", "admin")

Timestamp = sa.DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")


def upgrade():
    bind = op.get_bind()
    insp = inspect(bind)
    tables = set(insp.get_table_names())

    if "users" not in tables:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(length=150), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("password_hash", sa.String(length=255), nullable=False),
            sa.Column(
                "role",
                sa.Enum(*USER_ROLES, name="user_role_enum"),
                server_default="user",
                nullable=False,
            ),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
            sa.UniqueConstraint("email", name="uq_users_email"),
        )

    if "incidents" not in tables:
        op.create_table(
            "incidents",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("location_address", sa.String(length=300), nullable=False),
            sa.Column("location_coordinates", sa.JSON(), nullable=True),
            sa.Column("type", sa.String(length=100), nullable=False),
            sa.Column("severity", sa.String(length=50), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("photo_url", sa.String(length=500), nullable=True),
            sa.Column(
                "status",
                sa.Enum(*INCIDENT_STATUSES, name="incident_status_enum"),
                server_default="pending",
                nullable=False,
            ),
            sa.Column("reported_by_id", sa.Integer(), nullable=False),
            sa.Column("reported_by_name", sa.String(length=150), nullable=False),
            sa.Column("reported_by_email", sa.String(length=255), nullable=False),
            sa.Column("updated_by_id", sa.Integer(), nullable=True),
            sa.Column("updated_by_name", sa.String(length=150), nullable=True),
            sa.Column("updated_by_email", sa.String(length=255), nullable=True),
            sa.Column("created_at", Timestamp, nullable=False),
            sa.Column("updated_at", Timestamp, nullable=False),
        )
        op.create_index("ix_incidents_created_at", "incidents", ["created_at"], unique=False)
        op.create_index("ix_incidents_reported_by_email", "incidents", ["reported_by_email"], unique=False)

    if "incident_comments" not in tables:
        op.create_table(
            "incident_comments",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("incident_id", sa.Integer(), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("author_name", sa.String(length=150), nullable=False),
            sa.Column("author_email", sa.String(length=255), nullable=False),
            sa.Column("created_at", Timestamp, nullable=False),
            sa.ForeignKeyConstraint(["incident_id"], ["incidents.id"], ondelete="CASCADE"),
        )
        op.create_index("ix_incident_comments_incident_id", "incident_comments", ["incident_id"], unique=False)


def downgrade():
    bind = op.get_bind()
    insp = inspect(bind)
    tables = set(insp.get_table_names())

    if "incident_comments" in tables:
        op.drop_index("ix_incident_comments_incident_id", table_name="incident_comments")
        op.drop_table("incident_comments")

    if "incidents" in tables:
        op.drop_index("ix_incidents_reported_by_email", table_name="incidents")
        op.drop_index("ix_incidents_created_at", table_name="incidents")
        op.drop_table("incidents")

    if "users" in tables:
        op.drop_table("users")
