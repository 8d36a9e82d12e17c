"""Error envelopes: 401, 403, 404, 409 and 422."""

import pytest


def headers(user) -> dict[str, str]:
    return {"X-User-ID": str(user.id)}


@pytest.mark.requires_db
async def test_missing_actor_is_401(client) -> None:
    response = await client.post("/api/v1/tasks", json={"title": "x"})
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


@pytest.mark.requires_db
async def test_unknown_actor_is_401(client) -> None:
    response = await client.post("/api/v1/tasks", json={}, headers={"X-User-ID": "424242"})
    assert response.status_code == 401


@pytest.mark.requires_db
async def test_validation_envelope(client, seed) -> None:
    user = await seed.user()
    response = await client.post("/api/v1/tasks", json={}, headers=headers(user))
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "VALIDATION_FAILED"
    assert body["message"] == "The given data was invalid."
    assert body["errors"]["workspace_id"] == ["The workspace id field is required."]
    assert body["errors"]["title"] == ["The title field is required."]


@pytest.mark.requires_db
async def test_unknown_id_is_404(client) -> None:
    response = await client.get("/api/v1/tasks/9999")
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


@pytest.mark.requires_db
async def test_member_cannot_update_custom_field(client, seed) -> None:
    ws = await seed.workspace()
    member, admin = await seed.user(), await seed.user(is_admin=True)
    field = await seed.custom_field(ws)

    denied = await client.patch(
        f"/api/v1/custom-fields/{field.id}", json={"name": "Renamed"}, headers=headers(member)
    )
    assert denied.status_code == 403
    assert denied.json() == {"error": "PERMISSION_DENIED", "message": "This action is unauthorized."}

    allowed = await client.patch(
        f"/api/v1/custom-fields/{field.id}", json={"name": "Renamed"}, headers=headers(admin)
    )
    assert allowed.status_code == 200
    assert allowed.json()["name"] == "Renamed"


@pytest.mark.requires_db
async def test_removing_last_owner_is_409(client, seed) -> None:
    ws = await seed.workspace()
    owner, member = await seed.user(), await seed.user()
    created = await client.post(
        "/api/v1/conversations",
        json={"workspace_id": ws.id, "name": "Team", "user_ids": [member.id]},
        headers=headers(owner),
    )
    assert created.status_code == 201
    conversation_id = created.json()["id"]

    response = await client.request(
        "DELETE",
        f"/api/v1/conversations/{conversation_id}/members",
        json={"user_ids": [owner.id]},
        headers=headers(owner),
    )
    assert response.status_code == 409
    assert response.json()["details"]["invariant"] == "conversation_owner_required"
