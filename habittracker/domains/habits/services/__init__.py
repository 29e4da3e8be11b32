"""Habit services: CRUD on habits and idempotent per-day entries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Type

from sqlalchemy import select

from habittracker.core.errors import NotFoundError, ValidationError
from habittracker.core.storage.adapter import upsert_statement
from habittracker.domains.habits.models.habit_models import (
    DEFAULT_COLOR,
    DEFAULT_SCHEDULE_TYPE,
    HABIT_CATEGORIES,
    MOOD_MAX,
    MOOD_MIN,
    Habit,
    HabitCompletion,
    HabitMood,
    HabitValue,
)
from habittracker.extensions import db


@dataclass(frozen=True)
class EntryVariant:
    name: str
    model: Type[db.Model]
    field: str
    category: str


ENTRY_VARIANTS: Dict[str, EntryVariant] = {
    "completion": EntryVariant("completion", HabitCompletion, "completed", "binary"),
    "value": EntryVariant("value", HabitValue, "value", "quantity"),
    "mood": EntryVariant("mood", HabitMood, "mood", "mood"),
}

_UPDATABLE_FIELDS = (
    "name",
    "description",
    "unit",
    "target",
    "color",
    "schedule_type",
)
# Not nullable: an explicit null keeps the stored value.
_REQUIRED_FIELDS = ("target", "color", "schedule_type")


def _clean(value):
    if isinstance(value, str):
        return value.strip() or None
    return value


def list_habits(user_id: int) -> List[Habit]:
    return (
        Habit.query.filter_by(user_id=user_id)
        .order_by(Habit.created_at.desc(), Habit.id.desc())
        .all()
    )


def get_habit(user_id: int, habit_id: int) -> Habit:
    habit = Habit.query.filter_by(id=habit_id, user_id=user_id).first()
    if not habit:
        raise NotFoundError("habit_not_found")
    return habit


def create_habit(
    user_id: int,
    *,
    name: str,
    category: str,
    description: str | None = None,
    unit: str | None = None,
    target: float | None = None,
    color: str | None = None,
    schedule_type: str | None = None,
) -> Habit:
    name_norm = (name or "").strip()
    if not name_norm:
        raise ValidationError("name_required")
    if category not in HABIT_CATEGORIES:
        raise ValidationError("invalid_category")

    habit = Habit(
        user_id=user_id,
        name=name_norm,
        description=_clean(description),
        category=category,
        unit=_clean(unit),
        target=target if target is not None else 1,
        color=_clean(color) or DEFAULT_COLOR,
        schedule_type=_clean(schedule_type) or DEFAULT_SCHEDULE_TYPE,
    )
    db.session.add(habit)
    db.session.commit()
    return habit


def update_habit(user_id: int, habit_id: int, **fields) -> Habit:
    habit = get_habit(user_id, habit_id)

    category = fields.get("category")
    if category is not None and category != habit.category:
        raise ValidationError("category_immutable")
    if "name" in fields and not (fields["name"] or "").strip():
        raise ValidationError("name_required")

    for key in _UPDATABLE_FIELDS:
        if key not in fields:
            continue
        value = _clean(fields[key])
        if value is None and key in _REQUIRED_FIELDS:
            continue
        setattr(habit, key, value)
    habit.updated_at = datetime.utcnow()
    db.session.commit()
    return habit


def delete_habit(user_id: int, habit_id: int) -> bool:
    habit = get_habit(user_id, habit_id)
    # ORM cascade removes completions, values and moods with the habit.
    db.session.delete(habit)
    db.session.commit()
    return True


def upsert_entry(habit_id: int, user_id: int, entry_date: date, variant: str, payload):
    """Insert or replace the (habit, user, date) row of the habit's entry table."""
    kind = ENTRY_VARIANTS.get(variant)
    if kind is None:
        raise ValidationError("invalid_entry_variant")
    habit = get_habit(user_id, habit_id)
    if habit.category != kind.category:
        raise ValidationError(f"{variant}_not_allowed_for_{habit.category}")
    if variant == "mood" and not (MOOD_MIN <= int(payload) <= MOOD_MAX):
        raise ValidationError("mood_out_of_range")

    now = datetime.utcnow()
    table = kind.model.__table__
    stmt = upsert_statement(
        table,
        {
            "habit_id": habit_id,
            "user_id": user_id,
            "date": entry_date,
            kind.field: payload,
            "created_at": now,
            "updated_at": now,
        },
        conflict_keys=("habit_id", "user_id", "date"),
        update_columns=(kind.field, "updated_at"),
        dialect_name=db.session.get_bind().dialect.name,
    )
    try:
        db.session.execute(stmt)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return db.session.scalars(
        select(kind.model)
        .where(
            kind.model.habit_id == habit_id,
            kind.model.user_id == user_id,
            kind.model.date == entry_date,
        )
        .execution_options(populate_existing=True)
    ).one()


def list_entries(user_id: int, variant: str) -> list:
    kind = ENTRY_VARIANTS.get(variant)
    if kind is None:
        raise ValidationError("invalid_entry_variant")
    model = kind.model
    return (
        model.query.filter_by(user_id=user_id)
        .order_by(model.date.desc(), model.habit_id)
        .all()
    )
