"""Sync JSON API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from habittracker.core.auth.tokens import current_user_id
from habittracker.domains.sync.schemas.sync_schemas import serialize_outcome, serialize_status
from habittracker.domains.sync.services import get_sync_engine

sync_api_bp = Blueprint("sync_api", __name__)


@sync_api_bp.get("/status")
@jwt_required()
def sync_status():
    status = get_sync_engine().status(current_user_id())
    return jsonify({"ok": True, **serialize_status(status)})


@sync_api_bp.post("/upload")
@jwt_required()
def sync_upload():
    outcome = get_sync_engine().upload(current_user_id())
    return jsonify({"ok": True, **serialize_outcome(outcome)})


@sync_api_bp.post("/download")
@jwt_required()
def sync_download():
    outcome = get_sync_engine().download(current_user_id())
    return jsonify({"ok": True, **serialize_outcome(outcome)})


@sync_api_bp.post("/auto")
@jwt_required()
def sync_auto():
    outcome = get_sync_engine().auto(current_user_id())
    return jsonify({"ok": True, **serialize_outcome(outcome)})
