"""Bearer token issuance and verification."""

from __future__ import annotations

from typing import Optional

from flask import current_app, jsonify
from flask_jwt_extended import JWTManager, create_access_token, decode_token, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from habittracker.core.errors import AuthError


def issue_token(user_id: int) -> str:
    """Sign an access token whose identity is the user id."""
    return create_access_token(identity=str(user_id))


def verify_token(token: Optional[str]) -> int:
    """Return the user id embedded in ``token`` or raise AuthError."""
    if not token:
        raise AuthError("missing_token")
    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException) as exc:
        raise AuthError("invalid_token") from exc
    return _user_id_from(claims.get(current_app.config.get("JWT_IDENTITY_CLAIM", "sub")))


def current_user_id() -> int:
    """User id of the already-verified request token (inside @jwt_required)."""
    return _user_id_from(get_jwt_identity())


def _user_id_from(identity) -> int:
    try:
        return int(identity)
    except (TypeError, ValueError) as exc:
        raise AuthError("invalid_token") from exc


def register_token_handlers(manager: JWTManager) -> None:
    """Answer every token failure with 401 and the standard error body."""

    @manager.unauthorized_loader
    def _missing(reason: str):
        return jsonify({"ok": False, "error": "missing_token"}), 401

    @manager.invalid_token_loader
    def _invalid(reason: str):
        return jsonify({"ok": False, "error": "invalid_token"}), 401

    @manager.expired_token_loader
    def _expired(jwt_header, jwt_payload):
        return jsonify({"ok": False, "error": "token_expired"}), 401
