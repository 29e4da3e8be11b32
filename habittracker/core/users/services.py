"""User service layer."""

from __future__ import annotations

from habittracker.core.errors import NotFoundError
from habittracker.core.users.models import User
from habittracker.extensions import db


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError("user_not_found")
    return user


def update_profile(user_id: int, *, name: str | None) -> User:
    user = get_user(user_id)
    user.name = (name or "").strip() or None
    db.session.commit()
    return user
