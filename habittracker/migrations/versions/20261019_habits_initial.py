"""users, habits and daily entry tables

Revision ID: 20261019_habits_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_habits_initial"
down_revision = None
branch_labels = None
depends_on = None

ENTRY_TABLES = (
    ("habit_completions", "completed", sa.Boolean),
    ("habit_values", "value", sa.Float),
    ("habit_moods", "mood", sa.Integer),
)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255)),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "habits",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("unit", sa.String(length=50)),
        sa.Column("target", sa.Float(), nullable=False, server_default="1"),
        sa.Column("color", sa.String(length=7), nullable=False, server_default="#667eea"),
        sa.Column("type", sa.String(length=20), nullable=False, server_default="daily"),
        *_timestamps(),
        sa.CheckConstraint(
            "category IN ('binary', 'quantity', 'mood')", name="ck_habits_category"
        ),
    )
    op.create_index("ix_habits_user_id", "habits", ["user_id"])

    for table, payload, payload_type in ENTRY_TABLES:
        extra = []
        if table == "habit_moods":
            extra.append(sa.CheckConstraint("mood >= 1 AND mood <= 5", name="ck_habit_moods_range"))
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "habit_id",
                sa.Integer(),
                sa.ForeignKey("habits.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column(
                "user_id",
                sa.Integer(),
                sa.ForeignKey("users.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column(payload, payload_type(), nullable=False),
            *_timestamps(),
            sa.UniqueConstraint("habit_id", "user_id", "date", name=f"uq_{table}_habit_user_date"),
            *extra,
        )
        op.create_index(f"ix_{table}_habit_id", table, ["habit_id"])
        op.create_index(f"ix_{table}_date", table, ["date"])


def downgrade():
    for table, _, _ in reversed(ENTRY_TABLES):
        op.drop_index(f"ix_{table}_date", table_name=table)
        op.drop_index(f"ix_{table}_habit_id", table_name=table)
        op.drop_table(table)
    op.drop_index("ix_habits_user_id", table_name="habits")
    op.drop_table("habits")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
