from __future__ import annotations

import io
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

PLANT = {
    "name": "Monstera",
    "species_type": "Monstera",
    "species_name": "Deliciosa",
    "location": "Living Room",
    "date_acquired": "2024-01-15",
}


def _create_plant(client, **overrides):
    resp = client.post("/api/v1/plants", json={**PLANT, **overrides})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def _upload(client, content: bytes, filename: str = "plants.csv"):
    return client.post(
        "/api/v1/plants/bulk-upload",
        data={"file": (io.BytesIO(content), filename)},
        content_type="multipart/form-data",
    )


@pytest.fixture()
def plant(client):
    return _create_plant(client)


@pytest.fixture()
def other_client(app, container):
    other_id = container.database.create_user("other-user")
    c = app.test_client()
    with c.session_transaction() as sess:
        sess["user_id"] = other_id
    return c


def test_requires_sign_in(anonymous_client):
    for path in ("/api/v1/plants", "/api/v1/tasks/upcoming", "/api/v1/tasks/overdue"):
        resp = anonymous_client.get(path)
        assert resp.status_code == 401
        body = resp.get_json()
        assert body["ok"] is False
        assert body["error"]["message"] == "Authentication required"


def test_create_plant_seeds_default_tasks(client, plant, api_user_id):
    assert plant["user_id"] == api_user_id
    assert plant["assigned_user_id"] == api_user_id

    resp = client.get(f"/api/v1/tasks/plant/{plant['plant_id']}")
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["count"] == 4
    assert {t["type"] for t in data["tasks"]} == {"water", "fertilize", "mist", "repot_check"}
    assert all(t["schedule_mode"] == "recurring" for t in data["tasks"])


def test_create_plant_validation(client):
    resp = client.post("/api/v1/plants", json={"name": "No Details"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"]["message"] == "Invalid request"
    assert {e["loc"][0] for e in body["details"]["errors"]} >= {"species_type", "location", "date_acquired"}


def test_list_and_get_plants(client, plant):
    listed = client.get("/api/v1/plants").get_json()["data"]
    assert listed["count"] == 1
    assert listed["plants"][0]["name"] == "Monstera"

    resp = client.get(f"/api/v1/plants/{plant['plant_id']}")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["species_name"] == "Deliciosa"

    assert client.get("/api/v1/plants/999999").status_code == 404


def test_other_users_plant_is_forbidden(other_client, plant):
    assert other_client.get(f"/api/v1/plants/{plant['plant_id']}").status_code == 403
    assert other_client.get(f"/api/v1/tasks/plant/{plant['plant_id']}").status_code == 403
    resp = other_client.post(
        "/api/v1/tasks",
        json={"plant_id": plant["plant_id"], "type": "prune", "title": "Prune"},
    )
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Bulk upload
# ---------------------------------------------------------------------------


def test_bulk_upload(client):
    content = (FIXTURES_DIR / "sample-bulk-upload.csv").read_bytes()

    resp = _upload(client, content)

    assert resp.status_code == 200, resp.get_json()
    result = resp.get_json()["data"]
    assert result["success"] is True
    assert result["stats"]["successful_inserts"] == 20
    assert client.get("/api/v1/plants").get_json()["data"]["count"] == 20

    again = _upload(client, content).get_json()["data"]
    assert again["stats"]["successful_inserts"] == 0
    assert again["stats"]["updated_plants"] == 20
    assert client.get("/api/v1/plants").get_json()["data"]["count"] == 20


def test_bulk_upload_without_valid_rows(client):
    resp = _upload(client, b"name,species_type,species_name,location,date_acquired\n,Fern,Boston,Porch,2024-01-01")

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"]["message"] == "Plant name is required"
    result = body["details"]["result"]
    assert result["stats"]["failed_rows"] == 1
    assert result["error_csv"].startswith("Row,Error Field,Error Message")


def test_bulk_upload_rejects_non_csv(client):
    resp = _upload(client, b"hello", "plants.txt")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["message"].startswith("Invalid file type")


def test_bulk_upload_requires_file(client):
    resp = client.post("/api/v1/plants/bulk-upload", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["message"] == "No file provided"


@pytest.mark.parametrize("simple, lines", [("false", 3), ("true", 2)])
def test_template_download(client, simple, lines):
    resp = client.get(f"/api/v1/plants/bulk-upload/template?simple={simple}")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attachment; filename=plant-upload-template-" in resp.headers["Content-Disposition"]
    assert len(resp.get_data(as_text=True).splitlines()) == lines


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def test_task_lifecycle(client, plant):
    resp = client.post(
        "/api/v1/tasks",
        json={
            "plant_id": plant["plant_id"],
            "type": "rotate",
            "title": "Rotate toward window",
            "recurrence_pattern": {"frequency": 1, "unit": "weeks"},
        },
    )
    assert resp.status_code == 201
    task = resp.get_json()["data"]
    assert task["schedule_mode"] == "recurring"
    first_due = datetime.fromisoformat(task["next_due_date"])

    skipped = client.post(f"/api/v1/tasks/{task['task_id']}/skip", json={"days": 2}).get_json()["data"]
    assert datetime.fromisoformat(skipped["next_due_date"]) == first_due + timedelta(days=2)

    done = client.post(f"/api/v1/tasks/{task['task_id']}/complete", json={"notes": "Quarter turn"})
    assert done.status_code == 200
    data = done.get_json()["data"]
    assert data["removed"] is False
    assert data["task"]["last_completed_at"] is not None

    history = client.get(f"/api/v1/tasks/{task['task_id']}/history").get_json()["data"]
    assert [c["notes"] for c in history["completions"]] == ["Quarter turn"]

    assert client.delete(f"/api/v1/tasks/{task['task_id']}").status_code == 200
    assert client.get(f"/api/v1/tasks/{task['task_id']}/history").status_code == 404


def test_one_time_task_is_removed_on_completion(client, plant):
    due = (datetime.now(timezone.utc) + timedelta(days=2)).isoformat()
    task = client.post(
        "/api/v1/tasks",
        json={
            "plant_id": plant["plant_id"],
            "type": "custom",
            "title": "Check for pests",
            "schedule_mode": "one-time",
            "due_date": due,
        },
    ).get_json()["data"]
    assert datetime.fromisoformat(task["next_due_date"]) == datetime.fromisoformat(due)

    upcoming = client.get("/api/v1/tasks/upcoming?days=3").get_json()["data"]
    assert task["task_id"] in {t["task_id"] for t in upcoming["tasks"]}

    data = client.post(f"/api/v1/tasks/{task['task_id']}/complete", json={}).get_json()["data"]
    assert data == {"task": None, "removed": True}


def test_skipping_unscheduled_task_is_rejected(client, plant):
    task = client.post(
        "/api/v1/tasks",
        json={"plant_id": plant["plant_id"], "type": "prune", "title": "Prune", "schedule_mode": "unscheduled"},
    ).get_json()["data"]
    assert task["next_due_date"] is None

    resp = client.post(f"/api/v1/tasks/{task['task_id']}/skip", json={})
    assert resp.status_code == 400
    assert resp.get_json()["error"]["message"] == "Cannot skip unscheduled task"


def test_recurring_task_without_pattern_is_rejected(client, plant):
    resp = client.post(
        "/api/v1/tasks",
        json={"plant_id": plant["plant_id"], "type": "prune", "title": "Prune"},
    )
    assert resp.status_code == 400


def test_task_request_validation(client, plant):
    resp = client.post(
        "/api/v1/tasks",
        json={
            "plant_id": plant["plant_id"],
            "type": "sing",
            "title": "",
            "recurrence_pattern": {"frequency": 0, "unit": "years"},
        },
    )
    assert resp.status_code == 400
    errors = resp.get_json()["details"]["errors"]
    assert {e["loc"][0] for e in errors} == {"type", "title", "recurrence_pattern"}


def test_edit_convert_and_reschedule(client, plant):
    tasks = client.get(f"/api/v1/tasks/plant/{plant['plant_id']}").get_json()["data"]["tasks"]
    water = next(t for t in tasks if t["type"] == "water")

    edited = client.patch(f"/api/v1/tasks/{water['task_id']}", json={"title": "Water well"}).get_json()["data"]
    assert edited["title"] == "Water well"
    assert edited["schedule_mode"] == "recurring"

    converted = client.post(f"/api/v1/tasks/{water['task_id']}/convert-to-unscheduled").get_json()["data"]
    assert converted["is_recurring"] is False
    assert converted["recurrence_pattern"] is None

    new_due = "2030-05-01T09:00:00+00:00"
    moved = client.put(f"/api/v1/tasks/{water['task_id']}/due-date", json={"due_date": new_due}).get_json()["data"]
    assert moved["next_due_date"] == new_due

    cleared = client.put(f"/api/v1/tasks/{water['task_id']}/assign", json={"assigned_user_id": None})
    assert cleared.get_json()["data"]["assigned_user_id"] is None


def test_bulk_complete(client, plant):
    tasks = client.get(f"/api/v1/tasks/plant/{plant['plant_id']}").get_json()["data"]["tasks"]
    ids = [t["task_id"] for t in tasks[:2]]

    resp = client.post("/api/v1/tasks/bulk-complete", json={"task_ids": [*ids, 999999]})

    assert resp.status_code == 200
    result = resp.get_json()["data"]
    assert (result["completed"], result["failed"]) == (2, 1)
    assert result["errors"] == ["Task 999999: Task 999999 not found"]


def test_overdue_and_assigned(client, plant, api_user_id):
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    client.post(
        "/api/v1/tasks",
        json={
            "plant_id": plant["plant_id"],
            "type": "custom",
            "title": "Late",
            "schedule_mode": "one-time",
            "due_date": past,
        },
    )

    overdue = client.get("/api/v1/tasks/overdue").get_json()["data"]
    assert [t["title"] for t in overdue["tasks"]] == ["Late"]
    assert overdue["tasks"][0]["plant"]["name"] == "Monstera"

    assigned = client.get("/api/v1/tasks/assigned").get_json()["data"]
    assert assigned["count"] == 5
    assert all(t["assigned_user_id"] == api_user_id for t in assigned["tasks"])


def test_upcoming_days_must_be_positive(client):
    assert client.get("/api/v1/tasks/upcoming?days=0").status_code == 400


def test_task_defaults(client):
    data = client.get("/api/v1/tasks/defaults/repot_check").get_json()["data"]
    assert data["frequency"] == 6
    assert data["unit"] == "months"

    assert client.get("/api/v1/tasks/defaults/unknown").get_json()["data"]["title"] == "Custom Task"


def test_unknown_api_route_is_json(client):
    resp = client.get("/api/v1/plants/not-a-route/at-all")
    assert resp.status_code == 404
    assert resp.get_json()["ok"] is False
