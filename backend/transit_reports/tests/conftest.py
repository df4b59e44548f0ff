from datetime import datetime, timedelta

import pytest

from sqlalchemy.pool import StaticPool
from flask_jwt_extended import create_access_token

from transit_reports import create_app
from transit_reports.config import TestConfig as BaseTestConfig
from transit_reports.extensions import db, bcrypt

# Import models so SQLAlchemy registers mappers/tables
import transit_reports.models  # noqa: F401
from transit_reports.models.incident import Incident
from transit_reports.models.user import User
from transit_reports.services import auth_service


class PytestConfig(BaseTestConfig):
	SQLALCHEMY_DATABASE_URI = "sqlite://"
	SQLALCHEMY_ENGINE_OPTIONS = {
		"connect_args": {"check_same_thread": False},
		"poolclass": StaticPool,
	}
	JWT_SECRET_KEY = "test-secret-with-enough-length-for-hs256"


@pytest.fixture(scope="session")
def app(tmp_path_factory):
	PytestConfig.UPLOAD_FOLDER = str(tmp_path_factory.mktemp("uploads"))
	app = create_app(PytestConfig)
	with app.app_context():
		db.create_all()
		yield app
		db.session.remove()
		db.drop_all()


@pytest.fixture(autouse=True)
def _clean_tables(app):
	yield
	db.session.rollback()
	for table in reversed(db.metadata.sorted_tables):
		db.session.execute(table.delete())
	db.session.commit()
	db.session.expunge_all()


@pytest.fixture()
def client(app):
	return app.test_client()


@pytest.fixture()
def db_session(app):
	with app.app_context():
		yield db.session
		db.session.rollback()


@pytest.fixture()
def make_user(db_session):
	def _make_user(
		email: str,
		name: str = "Test User",
		role: str = "user",
		password: str = "Passw0rd!",
	):
		u = User(
			name=name,
			email=email,
			password_hash=bcrypt.generate_password_hash(password).decode("utf-8"),
			role=role,
		)
		db_session.add(u)
		db_session.commit()
		return u

	return _make_user


@pytest.fixture()
def make_token(app):
	def _make_token(user: User) -> str:
		with app.app_context():
			return auth_service.issue_token(user)

	return _make_token


@pytest.fixture()
def auth_header(make_token):
	def _auth_header(user: User) -> dict:
		return {"Authorization": f"Bearer {make_token(user)}"}

	return _auth_header


@pytest.fixture()
def raw_auth_header(app):
	"""Token for an identity that may not exist in the users table."""
	def _raw_auth_header(user_id: int, email: str, role: str = "user", name: str = "Ghost") -> dict:
		with app.app_context():
			token = create_access_token(
				identity=str(user_id),
				additional_claims={"name": name, "email": email, "role": role},
			)
		return {"Authorization": f"Bearer {token}"}

	return _raw_auth_header


@pytest.fixture()
def make_incident(db_session):
	base = datetime(2026, 1, 1, 8, 0, 0)

	def _make_incident(
		reporter: User,
		title: str = "Bus collision",
		location: str = "5th Ave",
		type: str = "collision",
		severity: str = "high",
		description: str = "",
		minutes: int = 0,
	):
		created = base + timedelta(minutes=minutes)
		i = Incident(
			title=title,
			location_address=location,
			type=type,
			severity=severity,
			description=description,
			status="pending",
			reported_by_id=reporter.id,
			reported_by_name=reporter.name,
			reported_by_email=reporter.email,
			created_at=created,
			updated_at=created,
		)
		db_session.add(i)
		db_session.commit()
		return i

	return _make_incident
