"""Storage adapter: one relational store behind a uniform habit interface.

The same adapter class fronts the local store and the cloud store. Each
instance wraps a SQLAlchemy engine and speaks that engine's upsert dialect
(``ON CONFLICT`` for SQLite/PostgreSQL, ``ON DUPLICATE KEY`` for MySQL).
Connectivity failures surface as :class:`BackendUnavailableError`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from sqlalchemy import MetaData, Table, func, select, text
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError

from habittracker.core.errors import BackendUnavailableError, ConflictError, InternalError

logger = logging.getLogger(__name__)

_INSERTERS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
    "mysql": mysql.insert,
    "mariadb": mysql.insert,
}

# Columns copied across stores; "type" is the habit cadence column.
HABIT_COLUMNS = (
    "id",
    "user_id",
    "name",
    "description",
    "category",
    "unit",
    "target",
    "color",
    "type",
    "created_at",
    "updated_at",
)
# Overwritten when the id already exists in the target store.
HABIT_MUTABLE_COLUMNS = (
    "name",
    "description",
    "category",
    "unit",
    "target",
    "color",
    "type",
    "updated_at",
)
USER_COLUMNS = ("id", "email", "password_hash", "name", "created_at", "updated_at")


def _inserter(dialect_name: str):
    try:
        return _INSERTERS[dialect_name]
    except KeyError as exc:
        raise InternalError(f"upsert_unsupported_dialect:{dialect_name}") from exc


def upsert_statement(
    table: Table,
    values: Dict[str, Any],
    *,
    conflict_keys: Sequence[str],
    update_columns: Iterable[str],
    dialect_name: str,
    owner_column: Optional[str] = None,
):
    """Build an insert-or-update for ``table`` in the given SQL dialect.

    With ``owner_column`` set, a conflicting row is only updated when it
    belongs to the same owner; otherwise it is left untouched.
    """
    stmt = _inserter(dialect_name)(table).values(**values)
    update_columns = list(update_columns)
    if dialect_name in ("mysql", "mariadb"):
        if owner_column is None:
            return stmt.on_duplicate_key_update(
                {col: stmt.inserted[col] for col in update_columns}
            )
        same_owner = table.c[owner_column] == stmt.inserted[owner_column]
        return stmt.on_duplicate_key_update(
            {
                col: func.if_(same_owner, stmt.inserted[col], table.c[col])
                for col in update_columns
            }
        )
    where = None
    if owner_column is not None:
        where = table.c[owner_column] == stmt.excluded[owner_column]
    return stmt.on_conflict_do_update(
        index_elements=list(conflict_keys),
        set_={col: stmt.excluded[col] for col in update_columns},
        where=where,
    )


def insert_missing_statement(
    table: Table,
    values: Dict[str, Any],
    *,
    conflict_keys: Sequence[str],
    dialect_name: str,
):
    """Build an insert that leaves an existing row with the same key untouched."""
    stmt = _inserter(dialect_name)(table).values(**values)
    if dialect_name in ("mysql", "mariadb"):
        # No-op assignment; ensure_user checks which account holds the id.
        key = conflict_keys[0]
        return stmt.on_duplicate_key_update({key: table.c[key]})
    return stmt.on_conflict_do_nothing(index_elements=list(conflict_keys))


class StoreAdapter:
    """Habit-level operations against one store."""

    def __init__(self, name: str, engine: Engine, metadata: MetaData):
        self.name = name
        self.engine = engine
        self._metadata = metadata

    def __repr__(self) -> str:
        return f"<StoreAdapter {self.name} ({self.dialect})>"

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @property
    def habits(self) -> Table:
        return self._metadata.tables["habits"]

    @property
    def users(self) -> Table:
        return self._metadata.tables["users"]

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            logger.warning("%s store rejected %s: %s", self.name, action, exc.orig)
            raise ConflictError(f"{self.name}_store_conflict") from exc
        except (OperationalError, InterfaceError) as exc:
            logger.warning("%s store unavailable during %s: %s", self.name, action, exc.orig)
            raise BackendUnavailableError(f"{self.name}_store_unavailable") from exc

    # --- reads ---

    def ping(self) -> bool:
        try:
            with self._guard("ping"), self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except BackendUnavailableError:
            return False
        return True

    def count_habits(self, user_id: int) -> int:
        stmt = select(func.count()).select_from(self.habits).where(self.habits.c.user_id == user_id)
        with self._guard("count_habits"), self.engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one())

    def fetch_habits(self, user_id: int) -> List[Dict[str, Any]]:
        cols = [self.habits.c[name] for name in HABIT_COLUMNS]
        stmt = select(*cols).where(self.habits.c.user_id == user_id).order_by(self.habits.c.id)
        with self._guard("fetch_habits"), self.engine.connect() as conn:
            return [dict(row) for row in conn.execute(stmt).mappings()]

    def fetch_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        cols = [self.users.c[name] for name in USER_COLUMNS]
        stmt = select(*cols).where(self.users.c.id == user_id)
        with self._guard("fetch_user"), self.engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row else None

    # --- writes ---

    def ensure_user(self, row: Dict[str, Any]) -> None:
        """Insert the owning user row if its id is absent; never overwrite.

        Raises ConflictError when the id is held by a different account here
        or the email belongs to another id.
        """
        stmt = insert_missing_statement(
            self.users,
            {name: row.get(name) for name in USER_COLUMNS},
            conflict_keys=("id",),
            dialect_name=self.dialect,
        )
        check = select(self.users.c.email).where(self.users.c.id == row["id"])
        with self._guard("ensure_user"), self.engine.begin() as conn:
            conn.execute(stmt)
            stored = conn.execute(check).scalar_one_or_none()
            if stored is None or stored.lower() != (row.get("email") or "").lower():
                logger.warning(
                    "%s store holds user id %s under another account", self.name, row["id"]
                )
                raise ConflictError(f"{self.name}_user_mismatch")

    def upsert_habit(self, row: Dict[str, Any]) -> bool:
        """Insert the habit under its own id or overwrite its mutable fields.

        A habit id owned by another user in this store is left untouched and
        the call returns False.
        """
        stmt = upsert_statement(
            self.habits,
            {name: row.get(name) for name in HABIT_COLUMNS},
            conflict_keys=("id",),
            update_columns=HABIT_MUTABLE_COLUMNS,
            dialect_name=self.dialect,
            owner_column="user_id",
        )
        owner = select(self.habits.c.user_id).where(self.habits.c.id == row["id"])
        with self._guard("upsert_habit"), self.engine.begin() as conn:
            conn.execute(stmt)
            written = conn.execute(owner).scalar_one() == row["user_id"]
        if not written:
            logger.warning(
                "%s store: habit id %s belongs to another user; skipped", self.name, row["id"]
            )
        return written

    def upsert_habits(self, rows: Iterable[Dict[str, Any]]) -> int:
        """Upsert rows one transaction at a time; a failure keeps earlier rows.

        Returns the number of rows actually written.
        """
        written = 0
        for row in rows:
            if self.upsert_habit(row):
                written += 1
        return written

    def ensure_schema(self) -> None:
        with self._guard("ensure_schema"):
            self._metadata.create_all(self.engine)
