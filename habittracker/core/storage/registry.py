"""Resolve the configured stores once, at application start."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from flask import Flask, current_app

from habittracker.config import STORAGE_MODE_CLOUD, STORAGE_MODE_HYBRID
from habittracker.core.errors import BackendUnavailableError
from habittracker.core.storage.adapter import StoreAdapter
from habittracker.extensions import db

logger = logging.getLogger(__name__)

REMOTE_BIND_KEY = "remote"


@dataclass(frozen=True)
class StoreRegistry:
    """The primary store serves CRUD; local/remote are the sync endpoints.

    In hybrid mode the primary store is the local one and ``remote`` is set
    only when a cloud URL is configured. In cloud mode there is no local
    store and the primary store is the cloud store.
    """

    mode: str
    primary: StoreAdapter
    local: Optional[StoreAdapter]
    remote: Optional[StoreAdapter]

    @property
    def hybrid(self) -> bool:
        return self.mode == STORAGE_MODE_HYBRID

    def describe(self) -> dict:
        """Backend summary for /health; probes the cloud store."""
        if not self.hybrid:
            return {"local": "disabled", "cloud": _probe(self.primary)}
        return {
            "local": f"available ({self.primary.dialect})",
            "cloud": _probe(self.remote) if self.remote else "not configured",
        }


def _probe(store: StoreAdapter) -> str:
    state = "configured" if store.ping() else "unreachable"
    return f"{state} ({store.dialect})"


def build_stores(app: Flask) -> StoreRegistry:
    """Wrap the Flask-SQLAlchemy engines in adapters. Needs an app context."""
    mode = app.config.get("STORAGE_MODE", STORAGE_MODE_HYBRID)
    if mode not in (STORAGE_MODE_HYBRID, STORAGE_MODE_CLOUD):
        raise ValueError(f"Unknown STORAGE_MODE: {mode}")

    if mode == STORAGE_MODE_CLOUD:
        primary = StoreAdapter("cloud", db.engine, db.metadata)
        return StoreRegistry(mode=mode, primary=primary, local=None, remote=None)

    local = StoreAdapter("local", db.engine, db.metadata)
    remote = None
    if REMOTE_BIND_KEY in (app.config.get("SQLALCHEMY_BINDS") or {}):
        remote = StoreAdapter("cloud", db.engines[REMOTE_BIND_KEY], db.metadata)
    return StoreRegistry(mode=mode, primary=local, local=local, remote=remote)


def bootstrap_schema(stores: StoreRegistry) -> None:
    """Create missing tables; an unreachable cloud store only downgrades to local."""
    stores.primary.ensure_schema()
    if stores.remote is None:
        return
    try:
        stores.remote.ensure_schema()
    except BackendUnavailableError:
        logger.warning("Cloud store unreachable at startup; running with local store only")


def get_stores() -> StoreRegistry:
    return current_app.extensions["stores"]
