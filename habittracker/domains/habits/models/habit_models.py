"""Habit and daily entry models."""

from __future__ import annotations

import datetime as dt

from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from habittracker.core.users.models import TimestampMixin
from habittracker.extensions import db

HABIT_CATEGORIES = ("binary", "quantity", "mood")
DEFAULT_COLOR = "#667eea"
DEFAULT_SCHEDULE_TYPE = "daily"
MOOD_MIN, MOOD_MAX = 1, 5


class Habit(db.Model, TimestampMixin):
    __tablename__ = "habits"
    __table_args__ = (
        db.CheckConstraint(
            "category IN ('binary', 'quantity', 'mood')", name="ck_habits_category"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    category: Mapped[str] = mapped_column(db.String(50), nullable=False)
    unit: Mapped[str | None] = mapped_column(db.String(50))
    target: Mapped[float] = mapped_column(db.Float, default=1)
    color: Mapped[str] = mapped_column(db.String(7), default=DEFAULT_COLOR)
    # Cadence; the column keeps its historical name "type".
    schedule_type: Mapped[str] = mapped_column("type", db.String(20), default=DEFAULT_SCHEDULE_TYPE)

    completions: Mapped[list["HabitCompletion"]] = relationship(
        "HabitCompletion", cascade="all, delete-orphan"
    )
    values: Mapped[list["HabitValue"]] = relationship("HabitValue", cascade="all, delete-orphan")
    moods: Mapped[list["HabitMood"]] = relationship("HabitMood", cascade="all, delete-orphan")


class EntryMixin(TimestampMixin):
    """Columns shared by the three per-day entry tables."""

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[dt.date] = mapped_column(db.Date, nullable=False, index=True)

    @declared_attr
    def habit_id(cls) -> Mapped[int]:
        return mapped_column(
            db.ForeignKey("habits.id", ondelete="CASCADE"), index=True, nullable=False
        )

    @declared_attr
    def user_id(cls) -> Mapped[int]:
        return mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    @declared_attr.directive
    def __table_args__(cls):
        return (
            db.UniqueConstraint(
                "habit_id", "user_id", "date", name=f"uq_{cls.__tablename__}_habit_user_date"
            ),
        )


class HabitCompletion(db.Model, EntryMixin):
    __tablename__ = "habit_completions"

    completed: Mapped[bool] = mapped_column(default=False, nullable=False)


class HabitValue(db.Model, EntryMixin):
    __tablename__ = "habit_values"

    value: Mapped[float] = mapped_column(db.Float, nullable=False)


class HabitMood(db.Model, EntryMixin):
    __tablename__ = "habit_moods"
    __table_args__ = (
        db.UniqueConstraint("habit_id", "user_id", "date", name="uq_habit_moods_habit_user_date"),
        db.CheckConstraint(f"mood >= {MOOD_MIN} AND mood <= {MOOD_MAX}", name="ck_habit_moods_range"),
    )

    mood: Mapped[int] = mapped_column(nullable=False)
