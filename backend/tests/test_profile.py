"""Profile onboarding, owner edits and the dashboard."""

import pytest
from httpx import AsyncClient

from portal.core.states import ChapterLinkState, MembershipState, Role
from portal.db.session import async_session_factory
from portal.models.metadata_document import MetadataDocument
from tests.conftest import auth_headers, create_chapter, create_event, create_user


async def _seed_affiliations(*values: str) -> None:
    async with async_session_factory() as session:
        session.add(MetadataDocument(key="affiliations", values=list(values)))
        await session.commit()


@pytest.mark.asyncio
async def test_incomplete_profile_dashboard_redirects_to_setup(client: AsyncClient):
    response = await client.get("/api/v1/dashboard", headers=auth_headers("fresh"))
    assert response.status_code == 409
    body = response.json()
    assert body["redirect_to"] == "/profile/setup"
    assert body["type"] == "profile-incomplete"


@pytest.mark.asyncio
async def test_setup_forces_pending_member(client: AsyncClient):
    await _seed_affiliations("Youth Council", "Debate Club")
    response = await client.post(
        "/api/v1/profile/setup",
        json={
            "full_name": "Casey Setup",
            "major": "History",
            "interests": "Health, Tech, Health",
            "affiliations": ["youth council"],
            "role": "admin",
            "membership_status": "Active",
        },
        headers=auth_headers("casey"),
    )
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["role"] == "member"
    assert data["membership_status"] == "Pending"
    assert data["chapter_approval_status"] == "none"
    assert data["profile_completed"] is True
    assert data["interests"] == ["Health", "Tech"]
    assert data["affiliations"] == ["Youth Council"]


@pytest.mark.asyncio
async def test_setup_rejects_unknown_affiliation(client: AsyncClient):
    await _seed_affiliations("Youth Council")
    response = await client.post(
        "/api/v1/profile/setup",
        json={
            "full_name": "Casey Setup",
            "major": "History",
            "interests": ["Health"],
            "affiliations": ["Secret Society"],
        },
        headers=auth_headers("casey"),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_chapter_member_must_pick_a_chapter(client: AsyncClient):
    response = await client.post(
        "/api/v1/profile/setup",
        json={
            "full_name": "Casey Setup",
            "major": "History",
            "interests": ["Health"],
            "membership_type": "Chapter Member",
        },
        headers=auth_headers("casey"),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_second_setup_points_to_dashboard(client: AsyncClient):
    await create_user("done")
    response = await client.post(
        "/api/v1/profile/setup",
        json={"full_name": "Done Already", "major": "Art", "interests": ["Art"]},
        headers=auth_headers("done"),
    )
    assert response.status_code == 409
    assert response.json()["redirect_to"] == "/dashboard"


@pytest.mark.asyncio
async def test_owner_edit_cannot_touch_workflow_fields(client: AsyncClient):
    await create_user("owner", status=MembershipState.PENDING)
    response = await client.patch(
        "/api/v1/profile/me",
        json={
            "major": "Physics",
            "role": "admin",
            "membership_status": "Active",
            "email": "hijack@example.com",
        },
        headers=auth_headers("owner"),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["major"] == "Physics"
    assert data["role"] == "member"
    assert data["membership_status"] == "Pending"
    assert data["email"] == "owner@example.com"


@pytest.mark.asyncio
async def test_changing_chapter_opens_transfer_request(client: AsyncClient):
    c1 = await create_chapter("One")
    c2 = await create_chapter("Two")
    await create_user("mover", chapter=c1)

    response = await client.patch(
        "/api/v1/profile/me", json={"chapter_id": str(c2.id)}, headers=auth_headers("mover")
    )
    assert response.status_code == 200
    data = response.json()
    assert data["chapter_id"] == str(c2.id)
    assert data["chapter_approval_status"] == ChapterLinkState.PENDING.value
    assert data["membership_status"] == "Active"

    unchanged = await client.patch(
        "/api/v1/profile/me", json={"chapter_id": str(c2.id)}, headers=auth_headers("mover")
    )
    assert unchanged.json()["chapter_approval_status"] == "pending"


@pytest.mark.asyncio
async def test_dashboard_for_member(client: AsyncClient):
    c1 = await create_chapter("One")
    c2 = await create_chapter("Two")
    await create_user("me", chapter=c1)
    network = await create_event()
    local = await create_event(c1)
    await create_event(c2)

    response = await client.get("/api/v1/dashboard", headers=auth_headers("me"))
    assert response.status_code == 200
    data = response.json()
    assert data["profile"]["chapter_name"] == c1.name
    assert {e["id"] for e in data["events"]} == {str(network.id), str(local.id)}
    assert data["opportunities_count"] == 0
    assert data["pending_approvals"] is None
    assert data["can_create_events"] is False


@pytest.mark.asyncio
async def test_dashboard_for_moderator_counts_pending(client: AsyncClient):
    c1 = await create_chapter("One")
    await create_user("mod", role=Role.MODERATOR, chapter=c1)
    await create_user("waiting", chapter=c1, status=MembershipState.PENDING)

    response = await client.get("/api/v1/dashboard", headers=auth_headers("mod"))
    assert response.json()["pending_approvals"] == 1
