from typing import Optional

from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from transit_reports.extensions import db, bcrypt
from transit_reports.models.user import User, USER_ROLES
from transit_reports.utils.errors import ApiError, RequestValidationError, StoreError


def get_user_by_id(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_by_email(email: str) -> Optional[User]:
    return User.query.filter_by(email=(email or "").lower().strip()).first()


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


def _hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode("utf-8")


def create_user(name: str, email: str, password: str, role: str = "user") -> User:
    correo = email.lower().strip()
    if role not in USER_ROLES:
        raise RequestValidationError(f"Invalid role. Use one of: {', '.join(USER_ROLES)}")

    if get_user_by_email(correo):
        raise ApiError("Email is already registered", 400)

    user = User(
        name=name.strip(),
        email=correo,
        password_hash=_hash_password(password),
        role=role,
    )
    db.session.add(user)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ApiError("Email is already registered", 400)
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError.wrap("Could not create user", exc)

    current_app.logger.info("Registered user %s (role=%s)", user.email, user.role)
    return user


def issue_token(user: User) -> str:
    return create_access_token(
        identity=str(user.id),
        additional_claims={
            "name": user.name,
            "email": user.email,
            "role": user.role,
        },
    )


def authenticate(email: str, password: str) -> dict:
    user = get_user_by_email(email)
    if not user:
        raise ApiError("Invalid credentials", 401)

    try:
        password_ok = bcrypt.check_password_hash(user.password_hash or "", password)
    except (ValueError, TypeError):
        # Corrupted hash must not surface as a 500
        raise ApiError("Invalid credentials", 401)

    if not password_ok:
        raise ApiError("Invalid credentials", 401)

    return {
        "access_token": issue_token(user),
        "user": user_to_dict(user),
    }


def change_password(user: User, current_password: str, new_password: str) -> None:
    try:
        password_ok = bcrypt.check_password_hash(user.password_hash or "", current_password)
    except (ValueError, TypeError):
        password_ok = False

    if not password_ok:
        raise RequestValidationError("Current password is incorrect")

    user.password_hash = _hash_password(new_password)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError.wrap("Could not update password", exc)

    current_app.logger.info("Password changed for %s", user.email)
