"""Sync reconciliation between the local and the cloud habit stores.

Convergence is approximated by row counts: a user is ``synced`` when both
stores hold the same number of habits. When they differ the larger side is
pushed over the smaller one, habit by habit, keyed on the habit id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from flask import current_app

from habittracker.core.errors import BackendUnavailableError
from habittracker.core.storage.adapter import StoreAdapter
from habittracker.core.storage.registry import StoreRegistry

logger = logging.getLogger(__name__)

SYNCED = "synced"
OUT_OF_SYNC = "out_of_sync"
UPLOAD = "upload"
DOWNLOAD = "download"


@dataclass
class SyncStatus:
    status: str
    database: str
    environment: str
    last_sync: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    local_count: Optional[int] = None
    cloud_count: Optional[int] = None
    cloud_available: Optional[bool] = None


@dataclass
class SyncOutcome:
    message: str
    direction: Optional[str] = None
    uploaded: Optional[int] = None
    downloaded: Optional[int] = None


def decide_direction(local_count: int, cloud_count: int) -> str:
    return UPLOAD if local_count > cloud_count else DOWNLOAD


class SyncEngine:
    """Count-based reconciliation over two store adapters.

    ``local`` is None when the application runs against the cloud store
    only; the engine is then disabled and every call is a no-op.
    """

    def __init__(
        self,
        local: Optional[StoreAdapter],
        remote: Optional[StoreAdapter],
        *,
        database: str,
        environment: str,
    ):
        self.local = local
        self.remote = remote
        self.database = database
        self.environment = environment

    @classmethod
    def from_stores(cls, stores: StoreRegistry, environment: str) -> "SyncEngine":
        database = stores.mode if stores.hybrid else stores.primary.dialect
        return cls(stores.local, stores.remote, database=database, environment=environment)

    @property
    def enabled(self) -> bool:
        return self.local is not None

    def _remote(self) -> StoreAdapter:
        if self.remote is None:
            raise BackendUnavailableError("cloud_store_not_configured")
        return self.remote

    def status(self, user_id: int) -> SyncStatus:
        if not self.enabled:
            return SyncStatus(status=SYNCED, database=self.database, environment=self.environment)

        local_count = self.local.count_habits(user_id)
        cloud_count = 0
        cloud_available = False
        if self.remote is not None:
            try:
                cloud_count = self.remote.count_habits(user_id)
                cloud_available = True
            except BackendUnavailableError:
                logger.warning("Cloud store unavailable; reporting 0 cloud habits for user %s", user_id)

        status = SYNCED if local_count == cloud_count else OUT_OF_SYNC
        logger.info(
            "Sync status for user %s: local=%d cloud=%d -> %s",
            user_id,
            local_count,
            cloud_count,
            status,
        )
        return SyncStatus(
            status=status,
            database=self.database,
            environment=self.environment,
            local_count=local_count,
            cloud_count=cloud_count,
            cloud_available=cloud_available,
        )

    def _transfer(self, source: StoreAdapter, target: StoreAdapter, user_id: int) -> int:
        rows = source.fetch_habits(user_id)
        if rows:
            owner = source.fetch_user(user_id)
            if owner is not None:
                target.ensure_user(owner)
        written = target.upsert_habits(rows)
        logger.info(
            "Synced %d habits for user %s from %s to %s", written, user_id, source.name, target.name
        )
        return written

    def upload(self, user_id: int) -> SyncOutcome:
        if not self.enabled:
            return SyncOutcome(message="sync_not_required_in_cloud_mode")
        uploaded = self._transfer(self.local, self._remote(), user_id)
        return SyncOutcome(message="uploaded_to_cloud", direction=UPLOAD, uploaded=uploaded)

    def download(self, user_id: int) -> SyncOutcome:
        if not self.enabled:
            return SyncOutcome(message="sync_not_required_in_cloud_mode")
        downloaded = self._transfer(self._remote(), self.local, user_id)
        return SyncOutcome(message="downloaded_from_cloud", direction=DOWNLOAD, downloaded=downloaded)

    def auto(self, user_id: int) -> SyncOutcome:
        if not self.enabled:
            return SyncOutcome(message="sync_not_required_in_cloud_mode")
        current = self.status(user_id)
        if current.status == SYNCED:
            return SyncOutcome(message="already_synced")
        direction = decide_direction(current.local_count, current.cloud_count)
        logger.info("Auto sync for user %s chose %s", user_id, direction)
        if direction == UPLOAD:
            return self.upload(user_id)
        return self.download(user_id)


def get_sync_engine() -> SyncEngine:
    return current_app.extensions["sync_engine"]
