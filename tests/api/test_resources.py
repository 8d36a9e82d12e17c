"""End-to-end flows through the HTTP surface."""

from datetime import timedelta

import pytest

from projecthub.shared.utils.datetime import utc_now, utc_today


def headers(user) -> dict[str, str]:
    return {"X-User-ID": str(user.id)}


@pytest.mark.requires_db
async def test_create_task_with_dependencies(client, seed) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    a, b = await seed.task(ws, user), await seed.task(ws, user)

    response = await client.post(
        "/api/v1/tasks",
        json={
            "workspace_id": ws.id,
            "reporter_id": user.id,
            "title": "Release",
            "dependency_ids": [a.id, b.id],
            "dependency_types": ["relates_to"],
        },
        headers=headers(user),
    )

    assert response.status_code == 201
    assert response.json()["dependencies"] == [
        {"dependency_id": a.id, "type": "relates_to"},
        {"dependency_id": b.id, "type": "blocks"},
    ]


@pytest.mark.requires_db
async def test_custom_field_value_scenario(client, seed) -> None:
    """Select options Low/High: Medium is a 422 on value, High is stored."""
    ws = await seed.workspace()
    user = await seed.user()
    task = await seed.task(ws, user)
    field = await seed.custom_field(ws, key="priority", type="select", options=["Low", "High"])
    body = {"custom_field_id": field.id, "entity_type": "tasks", "entity_id": task.id}

    rejected = await client.post(
        "/api/v1/custom-field-values", json={**body, "value": "Medium"}, headers=headers(user)
    )
    assert rejected.status_code == 422
    assert rejected.json()["errors"] == {"value": ["The selected value is invalid."]}

    accepted = await client.post(
        "/api/v1/custom-field-values", json={**body, "value": "High"}, headers=headers(user)
    )
    assert accepted.status_code == 201
    assert accepted.json()["value"] == "High"

    listed = await client.get(f"/api/v1/custom-field-values/entity/tasks/{task.id}")
    assert [v["value"] for v in listed.json()] == ["High"]


@pytest.mark.requires_db
async def test_single_running_timer(client, seed) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    task = await seed.task(ws, user)
    start = {"user_id": user.id, "task_id": task.id, "started_at": utc_now().isoformat()}

    first = await client.post("/api/v1/time-logs", json=start, headers=headers(user))
    assert first.status_code == 201
    assert first.json()["workspace_id"] == ws.id

    second = await client.post("/api/v1/time-logs", json=start, headers=headers(user))
    assert second.status_code == 422
    assert second.json()["errors"] == {
        "user_id": ["User already has a running time log. Please stop it first."]
    }

    stopped = await client.post(
        f"/api/v1/time-logs/{first.json()['id']}/stop", headers=headers(user)
    )
    assert stopped.status_code == 200
    assert stopped.json()["duration"] >= 1

    retry = await client.post("/api/v1/time-logs", json=start, headers=headers(user))
    assert retry.status_code == 201


@pytest.mark.requires_db
async def test_wiki_update_records_revisions(client, seed) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    created = await client.post(
        "/api/v1/wikis",
        json={"workspace_id": ws.id, "title": "Home", "content": "v1"},
        headers=headers(user),
    )
    assert created.status_code == 201
    wiki_id = created.json()["id"]

    await client.patch(f"/api/v1/wikis/{wiki_id}", json={"content": "v2"}, headers=headers(user))
    await client.patch(
        f"/api/v1/wikis/{wiki_id}", json={"is_published": True}, headers=headers(user)
    )

    revisions = await client.get(f"/api/v1/wikis/{wiki_id}/revisions")
    assert [r["content"] for r in revisions.json()] == ["v2", "v1"]


@pytest.mark.requires_db
async def test_attachment_upload_and_download(client, seed, blob_store) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    task = await seed.task(ws, user)

    uploaded = await client.post(
        "/api/v1/attachments",
        data={"workspace_id": str(ws.id), "attachable_type": "tasks", "attachable_id": str(task.id)},
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers(user),
    )
    assert uploaded.status_code == 201
    attachment = uploaded.json()
    assert attachment["size"] == 5
    assert await blob_store.exists("local", attachment["path"]) is True

    downloaded = await client.get(f"/api/v1/attachments/{attachment['id']}/download")
    assert downloaded.status_code == 200
    assert downloaded.content == b"hello"

    deleted = await client.delete(
        f"/api/v1/attachments/{attachment['id']}", headers=headers(user)
    )
    assert deleted.json() == {"deleted": True}
    assert await blob_store.exists("local", attachment["path"]) is False


@pytest.mark.requires_db
async def test_list_filters_from_query(client, seed) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    await seed.task(ws, user, priority="high")
    await seed.task(ws, user, priority="low")

    response = await client.get(
        "/api/v1/tasks", params={"workspace_id": ws.id, "priority": "high", "per_page": 5}
    )
    body = response.json()
    assert body["total"] == 1
    assert body["per_page"] == 5
    assert body["data"][0]["priority"] == "high"


@pytest.mark.requires_db
async def test_recurring_task_generate_and_toggle(client, seed) -> None:
    ws = await seed.workspace()
    user = await seed.user()
    template = await seed.task(ws, user, title="Standup notes")
    start = utc_today() + timedelta(days=30)
    recurring = await seed.recurring(template, next_due_date=start)
    base = f"/api/v1/recurring-tasks/{recurring.id}"

    generated = await client.post(f"{base}/generate", headers=headers(user))
    assert generated.status_code == 201
    assert generated.json()["title"] == "Standup notes"
    assert generated.json()["due_date"] == start.isoformat()
    next_due = (start + timedelta(days=1)).isoformat()
    assert (await client.get(base)).json()["next_due_date"] == next_due

    deactivated = await client.post(f"{base}/deactivate", headers=headers(user))
    assert deactivated.json()["is_active"] is False
    refused = await client.post(f"{base}/generate", headers=headers(user))
    assert refused.status_code == 409
    activated = await client.post(f"{base}/activate", headers=headers(user))
    assert activated.json()["is_active"] is True

    stats = (await client.get("/api/v1/recurring-tasks/stats")).json()
    assert stats == {"total": 1, "active": 1, "due": 0, "by_frequency": {"daily": 1}}
