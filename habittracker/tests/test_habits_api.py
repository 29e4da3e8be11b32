"""Habits API tests.

- GET /habits, POST /habits
- GET/PUT/PATCH/DELETE /habits/<id>
- POST /habits/<id>/completion|value|mood
- GET /habits/completions|values|moods
"""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration


def _create(client, headers, **fields):
    payload = {"name": "Drink water", "category": "quantity", "unit": "glasses", "target": 8}
    payload.update(fields)
    resp = client.post("/habits", json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["habit"]


def test_habits_require_auth(client):
    assert client.get("/habits").status_code == 401
    assert client.post("/habits", json={"name": "x", "category": "binary"}).status_code == 401
    assert client.get("/habits/completions").status_code == 401


def test_list_habits_empty(client, auth_headers):
    resp = client.get("/habits", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True, "habits": []}


def test_create_and_fetch_habit(client, auth_headers, user):
    habit = _create(client, auth_headers, type="weekly")
    assert habit["user_id"] == user["user_id"]
    assert habit["category"] == "quantity"
    assert habit["schedule_type"] == "weekly"
    assert habit["color"] == "#667eea"

    resp = client.get(f"/habits/{habit['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["habit"]["name"] == "Drink water"

    listed = client.get("/habits", headers=auth_headers).get_json()["habits"]
    assert [h["id"] for h in listed] == [habit["id"]]


def test_create_habit_invalid_category(client, auth_headers):
    resp = client.post("/habits", json={"name": "x", "category": "daily"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid_category"


def test_create_habit_missing_name(client, auth_headers):
    resp = client.post("/habits", json={"category": "binary"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_update_habit(client, auth_headers):
    habit = _create(client, auth_headers)
    resp = client.put(
        f"/habits/{habit['id']}", json={"name": "Hydrate", "target": 10}, headers=auth_headers
    )
    assert resp.status_code == 200
    body = resp.get_json()["habit"]
    assert body["name"] == "Hydrate"
    assert body["target"] == 10
    assert body["unit"] == "glasses"

    resp = client.patch(f"/habits/{habit['id']}", json={"color": "#000000"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["habit"]["color"] == "#000000"


def test_update_habit_category_rejected(client, auth_headers):
    habit = _create(client, auth_headers)
    resp = client.put(f"/habits/{habit['id']}", json={"category": "mood"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "category_immutable"


def test_update_missing_habit(client, auth_headers):
    resp = client.put("/habits/999", json={"name": "x"}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.get_json() == {"ok": False, "error": "habit_not_found"}


def test_other_user_cannot_touch_habit(client, auth_headers):
    habit = _create(client, auth_headers)
    resp = client.post(
        "/auth/register", json={"email": "intruder@example.com", "password": "secret123"}
    )
    other = {"Authorization": f"Bearer {resp.get_json()['token']}"}

    assert client.get(f"/habits/{habit['id']}", headers=other).status_code == 404
    assert client.delete(f"/habits/{habit['id']}", headers=other).status_code == 404
    assert client.get("/habits", headers=other).get_json()["habits"] == []


def test_delete_habit(client, auth_headers):
    habit = _create(client, auth_headers, name="Meditate", category="binary")
    client.post(
        f"/habits/{habit['id']}/completion",
        json={"date": "2024-03-01", "completed": True},
        headers=auth_headers,
    )
    resp = client.delete(f"/habits/{habit['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True}
    assert client.get(f"/habits/{habit['id']}", headers=auth_headers).status_code == 404
    assert client.get("/habits/completions", headers=auth_headers).get_json()["entries"] == []
    assert client.delete(f"/habits/{habit['id']}", headers=auth_headers).status_code == 404


def test_quantity_value_upsert_scenario(client, auth_headers):
    habit = _create(client, auth_headers)
    url = f"/habits/{habit['id']}/value"

    first = client.post(url, json={"date": "2024-03-01", "value": 5}, headers=auth_headers)
    assert first.status_code == 200
    second = client.post(url, json={"date": "2024-03-01", "value": 7}, headers=auth_headers)
    assert second.status_code == 200
    entry = second.get_json()["entry"]
    assert entry["value"] == 7
    assert entry["date"] == "2024-03-01"
    assert entry["habit_id"] == habit["id"]

    entries = client.get("/habits/values", headers=auth_headers).get_json()["entries"]
    assert len(entries) == 1
    assert entries[0]["value"] == 7


def test_completion_and_mood_entries(client, auth_headers):
    binary = _create(client, auth_headers, name="Run", category="binary")
    mood = _create(client, auth_headers, name="Mood", category="mood")

    resp = client.post(
        f"/habits/{binary['id']}/completion",
        json={"date": "2024-03-02", "completed": True},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["entry"]["completed"] is True

    resp = client.post(
        f"/habits/{mood['id']}/mood", json={"date": "2024-03-02", "mood": 4}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.get_json()["entry"]["mood"] == 4

    moods = client.get("/habits/moods", headers=auth_headers).get_json()["entries"]
    assert [m["mood"] for m in moods] == [4]


def test_entry_validation_errors(client, auth_headers):
    mood = _create(client, auth_headers, name="Mood", category="mood")
    url = f"/habits/{mood['id']}/mood"

    resp = client.post(url, json={"date": "2024-03-02", "mood": 9}, headers=auth_headers)
    assert resp.status_code == 400
    resp = client.post(url, json={"mood": 3}, headers=auth_headers)
    assert resp.status_code == 400
    resp = client.post(url, json={"date": "not-a-date", "mood": 3}, headers=auth_headers)
    assert resp.status_code == 400

    # Wrong variant for the habit's category.
    resp = client.post(
        f"/habits/{mood['id']}/value", json={"date": "2024-03-02", "value": 3}, headers=auth_headers
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "value_not_allowed_for_mood"


def test_entry_for_missing_habit(client, auth_headers):
    resp = client.post(
        "/habits/4242/completion", json={"date": "2024-03-02", "completed": True}, headers=auth_headers
    )
    assert resp.status_code == 404
