"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from pydantic import ValidationError

from habittracker.core.auth.auth_service import authenticate_user, register_user
from habittracker.core.auth.schemas import LoginRequest, RegisterRequest
from habittracker.core.auth.tokens import current_user_id
from habittracker.core.users.schemas import ProfileUpdateRequest, serialize_user
from habittracker.core.users.services import get_user, update_profile
from habittracker.core.utils.validation import validation_response
from habittracker.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


@auth_bp.post("/register")
@limiter.limit("5/minute")
def register():
    payload = request.get_json(silent=True) or {}
    try:
        data = RegisterRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_response(exc)
    result = register_user(data)
    return (
        jsonify({"ok": True, "user": serialize_user(result["user"]), "token": result["token"]}),
        201,
    )


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_response(exc)
    result = authenticate_user(data)
    return jsonify({"ok": True, "user": serialize_user(result["user"]), "token": result["token"]})


@auth_bp.get("/profile")
@jwt_required()
def profile():
    user = get_user(current_user_id())
    return jsonify({"ok": True, "user": serialize_user(user)})


@auth_bp.put("/profile")
@jwt_required()
def update_profile_route():
    payload = request.get_json(silent=True) or {}
    try:
        data = ProfileUpdateRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_response(exc)
    user = update_profile(current_user_id(), name=data.name)
    return jsonify({"ok": True, "user": serialize_user(user)})
