"""Events calendar: network-wide vs chapter events."""

import pytest
from httpx import AsyncClient

from portal.core.states import Role
from tests.conftest import auth_headers, create_chapter, create_event, create_user

EVENT = {
    "title": "Leadership Summit",
    "event_date": "2030-05-01",
    "event_time": "10:00",
    "location": "City Hall",
}


@pytest.mark.asyncio
async def test_chapter_events_only_visible_to_that_chapter(client: AsyncClient):
    c1 = await create_chapter("One")
    c2 = await create_chapter("Two")
    await create_user("one", chapter=c1)
    await create_user("loner")
    network = await create_event()
    local = await create_event(c1)
    await create_event(c2)

    mine = await client.get("/api/v1/events", headers=auth_headers("one"))
    assert {e["id"] for e in mine.json()} == {str(network.id), str(local.id)}

    theirs = await client.get("/api/v1/events", headers=auth_headers("loner"))
    assert {e["id"] for e in theirs.json()} == {str(network.id)}


@pytest.mark.asyncio
async def test_admin_sees_all_events(client: AsyncClient):
    c1 = await create_chapter("One")
    await create_user("admin", role=Role.ADMIN)
    await create_event()
    await create_event(c1)

    response = await client.get("/api/v1/events", headers=auth_headers("admin"))
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_admin_event_defaults_to_own_chapter(client: AsyncClient):
    chapter = await create_chapter("Home")
    await create_user("admin", role=Role.ADMIN, chapter=chapter)

    local = await client.post("/api/v1/events", json=EVENT, headers=auth_headers("admin"))
    assert local.status_code == 201
    assert local.json()["chapter_id"] == str(chapter.id)
    assert local.json()["chapter_name"] == chapter.name
    assert local.json()["created_by"] == "admin"

    network = await client.post(
        "/api/v1/events", json={**EVENT, "chapter_id": None}, headers=auth_headers("admin")
    )
    assert network.json()["chapter_id"] is None


@pytest.mark.asyncio
async def test_non_admins_cannot_create_events(client: AsyncClient):
    await create_user("mod", role=Role.MODERATOR)
    response = await client.post("/api/v1/events", json=EVENT, headers=auth_headers("mod"))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_event_delete_rights(client: AsyncClient):
    await create_user("admin", role=Role.ADMIN)
    await create_user("member")
    event = await create_event(created_by="admin")

    denied = await client.delete(f"/api/v1/events/{event.id}", headers=auth_headers("member"))
    assert denied.status_code == 403

    deleted = await client.delete(f"/api/v1/events/{event.id}", headers=auth_headers("admin"))
    assert deleted.status_code == 204

    missing = await client.delete(f"/api/v1/events/{event.id}", headers=auth_headers("admin"))
    assert missing.status_code == 404
