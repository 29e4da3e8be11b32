"""Authentication service layer."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from habittracker.core.auth.password import hash_password, verify_password
from habittracker.core.auth.schemas import LoginRequest, RegisterRequest
from habittracker.core.auth.tokens import issue_token
from habittracker.core.errors import AuthError, ConflictError
from habittracker.core.users.models import User
from habittracker.extensions import db

logger = logging.getLogger(__name__)


def register_user(payload: RegisterRequest) -> dict:
    """Create a user with a bcrypt digest and hand back a fresh token."""
    email = payload.email.strip().lower()
    if User.query.filter(func.lower(User.email) == email).first():
        raise ConflictError("email_already_exists")

    user = User(
        email=email,
        name=(payload.name or "").strip() or None,
        password_hash=hash_password(payload.password),
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same email.
        db.session.rollback()
        raise ConflictError("email_already_exists") from exc

    logger.info("Registered user %s", user.id)
    return {"user": user, "token": issue_token(user.id)}


def authenticate_user(payload: LoginRequest) -> dict:
    """Return the user and a token if credentials are valid."""
    user = User.query.filter(func.lower(User.email) == payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise AuthError("invalid_credentials")
    return {"user": user, "token": issue_token(user.id)}
