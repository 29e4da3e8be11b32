from __future__ import annotations

from datetime import datetime

import pytest

pytestmark = pytest.mark.integration

from habittracker.core.errors import BackendUnavailableError
from habittracker.core.storage.registry import get_stores
from habittracker.domains.habits import services as habit_services
from habittracker.domains.sync.services import (
    DOWNLOAD,
    OUT_OF_SYNC,
    SYNCED,
    UPLOAD,
    decide_direction,
    get_sync_engine,
)


def _seed_local(user_id, count):
    return [
        habit_services.create_habit(user_id, name=f"Local {i}", category="binary")
        for i in range(count)
    ]


def _seed_cloud(user_id, ids, name="Cloud"):
    stores = get_stores()
    stores.remote.ensure_user(stores.local.fetch_user(user_id))
    now = datetime(2024, 1, 1)
    for habit_id in ids:
        stores.remote.upsert_habit(
            {
                "id": habit_id,
                "user_id": user_id,
                "name": f"{name} {habit_id}",
                "description": "from cloud",
                "category": "quantity",
                "unit": "km",
                "target": 5.0,
                "color": "#112233",
                "type": "weekly",
                "created_at": now,
                "updated_at": now,
            }
        )


@pytest.mark.unit
def test_decide_direction():
    assert decide_direction(5, 2) == UPLOAD
    assert decide_direction(2, 5) == DOWNLOAD
    assert decide_direction(3, 3) == DOWNLOAD


def test_status_synced_when_both_empty(app, user):
    status = get_sync_engine().status(user["user_id"])
    assert status.status == SYNCED
    assert status.local_count == 0
    assert status.cloud_count == 0
    assert status.cloud_available is True
    assert status.database == "hybrid"
    assert status.environment == "testing"


def test_status_compares_counts_only(app, user):
    habits = _seed_local(user["user_id"], 2)
    # Same count, different content: still reported as synced.
    _seed_cloud(user["user_id"], [h.id + 100 for h in habits])
    assert get_sync_engine().status(user["user_id"]).status == SYNCED


def test_auto_uploads_when_local_has_more(app, user):
    uid = user["user_id"]
    habits = _seed_local(uid, 5)
    _seed_cloud(uid, [habits[0].id, habits[1].id])
    engine = get_sync_engine()

    before = engine.status(uid)
    assert (before.status, before.local_count, before.cloud_count) == (OUT_OF_SYNC, 5, 2)

    outcome = engine.auto(uid)
    assert outcome.direction == UPLOAD
    assert outcome.uploaded == 5

    after = engine.status(uid)
    assert after.status == SYNCED
    assert after.cloud_count == after.local_count == 5

    cloud_rows = {row["id"]: row for row in get_stores().remote.fetch_habits(uid)}
    # Existing cloud rows are overwritten in place under the same id.
    assert cloud_rows[habits[0].id]["name"] == habits[0].name
    assert cloud_rows[habits[0].id]["category"] == "binary"


def test_upload_pushes_owner_row(app, user):
    uid = user["user_id"]
    _seed_local(uid, 1)
    assert get_stores().remote.fetch_user(uid) is None
    get_sync_engine().upload(uid)
    assert get_stores().remote.fetch_user(uid)["email"] == "tester@example.com"


def test_auto_downloads_when_cloud_has_more(app, user):
    uid = user["user_id"]
    _seed_cloud(uid, [11, 12, 13])
    outcome = get_sync_engine().auto(uid)
    assert outcome.direction == DOWNLOAD
    assert outcome.downloaded == 3

    local = get_stores().local.fetch_habits(uid)
    assert [row["id"] for row in local] == [11, 12, 13]
    assert local[0]["type"] == "weekly"
    assert get_sync_engine().status(uid).status == SYNCED


def test_download_keeps_local_entries(app, user):
    uid = user["user_id"]
    habit = _seed_local(uid, 1)[0]
    habit_services.upsert_entry(habit.id, uid, datetime(2024, 3, 1).date(), "completion", True)
    _seed_cloud(uid, [habit.id], name="Renamed")

    assert get_sync_engine().download(uid).downloaded == 1
    assert len(habit_services.list_entries(uid, "completion")) == 1
    assert get_stores().local.fetch_habits(uid)[0]["name"] == f"Renamed {habit.id}"


def test_auto_is_noop_when_synced(app, user):
    outcome = get_sync_engine().auto(user["user_id"])
    assert outcome.direction is None
    assert outcome.message == "already_synced"


def test_unreachable_cloud_degrades_status(make_app, tmp_path):
    # A directory is not a database file: every connection attempt fails.
    app = make_app(CLOUD_DATABASE_URL=f"sqlite:///{tmp_path}")
    with app.app_context():
        from habittracker.core.auth.auth_service import register_user
        from habittracker.core.auth.schemas import RegisterRequest

        uid = register_user(RegisterRequest(email="offline@example.com", password="secret123"))[
            "user"
        ].id
        _seed_local(uid, 2)
        engine = get_sync_engine()

        status = engine.status(uid)
        assert status.cloud_available is False
        assert status.cloud_count == 0
        assert status.status == OUT_OF_SYNC

        with pytest.raises(BackendUnavailableError):
            engine.upload(uid)
        with pytest.raises(BackendUnavailableError):
            engine.auto(uid)


def test_missing_cloud_configuration(make_app):
    app = make_app(CLOUD_DATABASE_URL=None)
    with app.app_context():
        engine = get_sync_engine()
        assert get_stores().remote is None
        status = engine.status(1)
        assert status.cloud_available is False
        assert status.status == SYNCED
        with pytest.raises(BackendUnavailableError) as exc:
            engine.download(1)
        assert exc.value.message == "cloud_store_not_configured"


def test_cloud_mode_disables_sync(make_app):
    app = make_app(STORAGE_MODE="cloud")
    with app.app_context():
        engine = get_sync_engine()
        assert not engine.enabled
        status = engine.status(1)
        assert status.status == SYNCED
        assert status.local_count is None
        assert status.database == "sqlite"
        outcome = engine.upload(1)
        assert outcome.direction is None
        assert outcome.uploaded is None
        assert engine.auto(1).message == "sync_not_required_in_cloud_mode"


def test_upload_leaves_other_users_habit_alone(app, user):
    uid = user["user_id"]
    mine = _seed_local(uid, 1)[0]
    remote = get_stores().remote
    owner = get_stores().local.fetch_user(uid)
    bob = {**owner, "id": uid + 50, "email": "bob@example.com", "name": "Bob"}
    remote.ensure_user(bob)
    remote.upsert_habit(
        {
            "id": mine.id,
            "user_id": bob["id"],
            "name": "Bob's mood",
            "description": None,
            "category": "mood",
            "unit": None,
            "target": 1.0,
            "color": "#667eea",
            "type": "daily",
            "created_at": datetime(2024, 1, 1),
            "updated_at": datetime(2024, 1, 1),
        }
    )

    outcome = get_sync_engine().upload(uid)

    assert outcome.uploaded == 0
    bob_rows = remote.fetch_habits(bob["id"])
    assert [(r["id"], r["name"], r["category"]) for r in bob_rows] == [
        (mine.id, "Bob's mood", "mood")
    ]
    assert remote.count_habits(uid) == 0
    assert get_sync_engine().status(uid).status == OUT_OF_SYNC


def test_upload_failure_keeps_committed_rows(app, user, monkeypatch):
    uid = user["user_id"]
    _seed_local(uid, 3)
    remote = get_stores().remote
    original = remote.upsert_habit
    calls = []

    def flaky_upsert(row):
        calls.append(row["id"])
        if len(calls) == 2:
            raise BackendUnavailableError("cloud_store_unavailable")
        return original(row)

    monkeypatch.setattr(remote, "upsert_habit", flaky_upsert)

    with pytest.raises(BackendUnavailableError):
        get_sync_engine().upload(uid)

    # The first row stays committed; the third is never attempted.
    assert len(calls) == 2
    assert [row["id"] for row in remote.fetch_habits(uid)] == [calls[0]]
