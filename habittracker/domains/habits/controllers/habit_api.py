"""Habits JSON API controllers (thin, schema-validated)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from pydantic import ValidationError

from habittracker.core.auth.tokens import current_user_id
from habittracker.core.utils.validation import validation_response
from habittracker.domains.habits import services as habit_services
from habittracker.domains.habits.schemas.habit_schemas import (
    ENTRY_REQUESTS,
    HabitCreate,
    HabitUpdate,
    serialize_entry,
    serialize_habit,
)

habit_api_bp = Blueprint("habit_api", __name__)


@habit_api_bp.get("")
@jwt_required()
def list_habits():
    habits = habit_services.list_habits(current_user_id())
    return jsonify({"ok": True, "habits": [serialize_habit(h) for h in habits]})


@habit_api_bp.post("")
@jwt_required()
def create_habit():
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_response(exc)
    habit = habit_services.create_habit(current_user_id(), **data.model_dump())
    return jsonify({"ok": True, "habit": serialize_habit(habit)}), 201


@habit_api_bp.get("/<int:habit_id>")
@jwt_required()
def habit_detail(habit_id: int):
    habit = habit_services.get_habit(current_user_id(), habit_id)
    return jsonify({"ok": True, "habit": serialize_habit(habit)})


@habit_api_bp.route("/<int:habit_id>", methods=["PUT", "PATCH"])
@jwt_required()
def update_habit(habit_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitUpdate.model_validate(payload)
    except ValidationError as exc:
        return validation_response(exc)
    habit = habit_services.update_habit(
        current_user_id(), habit_id, **data.model_dump(exclude_unset=True)
    )
    return jsonify({"ok": True, "habit": serialize_habit(habit)})


@habit_api_bp.delete("/<int:habit_id>")
@jwt_required()
def delete_habit(habit_id: int):
    habit_services.delete_habit(current_user_id(), habit_id)
    return jsonify({"ok": True})


def _record_entry(habit_id: int, variant: str):
    payload = request.get_json(silent=True) or {}
    try:
        data = ENTRY_REQUESTS[variant].model_validate(payload)
    except ValidationError as exc:
        return validation_response(exc)
    field = habit_services.ENTRY_VARIANTS[variant].field
    entry = habit_services.upsert_entry(
        habit_id, current_user_id(), data.date, variant, getattr(data, field)
    )
    return jsonify({"ok": True, "entry": serialize_entry(entry, variant)})


@habit_api_bp.post("/<int:habit_id>/completion")
@jwt_required()
def record_completion(habit_id: int):
    return _record_entry(habit_id, "completion")


@habit_api_bp.post("/<int:habit_id>/value")
@jwt_required()
def record_value(habit_id: int):
    return _record_entry(habit_id, "value")


@habit_api_bp.post("/<int:habit_id>/mood")
@jwt_required()
def record_mood(habit_id: int):
    return _record_entry(habit_id, "mood")


def _entries(variant: str):
    entries = habit_services.list_entries(current_user_id(), variant)
    return jsonify({"ok": True, "entries": [serialize_entry(e, variant) for e in entries]})


@habit_api_bp.get("/completions")
@jwt_required()
def list_completions():
    return _entries("completion")


@habit_api_bp.get("/values")
@jwt_required()
def list_values():
    return _entries("value")


@habit_api_bp.get("/moods")
@jwt_required()
def list_moods():
    return _entries("mood")
