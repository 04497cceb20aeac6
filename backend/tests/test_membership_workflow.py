"""Membership approval workflow: signups, chapter requests, manual overrides."""

from types import SimpleNamespace

import pytest
from httpx import AsyncClient

from portal.core.states import ChapterLinkState, Decision, MembershipState, Role
from portal.services.membership import decision_updates, is_pending
from tests.conftest import auth_headers, create_chapter, create_user, load_user


def _pending(membership: str, chapter: str) -> SimpleNamespace:
    return SimpleNamespace(membership_status=membership, chapter_approval_status=chapter)


def test_decision_settles_only_pending_concerns():
    both = _pending("Pending", "pending")
    assert decision_updates(both, Decision.APPROVE) == {
        "membership_status": "Active",
        "chapter_approval_status": "approved",
    }
    assert decision_updates(both, Decision.REJECT) == {
        "membership_status": "Rejected",
        "chapter_approval_status": "rejected",
    }

    transfer = _pending("Active", "pending")
    assert decision_updates(transfer, Decision.APPROVE) == {"chapter_approval_status": "approved"}

    settled = _pending("Active", "approved")
    assert not is_pending(settled)
    assert decision_updates(settled, Decision.REJECT) == {}


async def _setup_profile(client: AsyncClient, sub: str, chapter=None) -> dict:
    body = {
        "full_name": f"Member {sub}",
        "major": "Biology",
        "interests": ["Health", "Tech"],
    }
    if chapter is not None:
        body["membership_type"] = "Chapter Member"
        body["chapter_id"] = str(chapter.id)
    response = await client.post("/api/v1/profile/setup", json=body, headers=auth_headers(sub))
    assert response.status_code == 200, response.text
    return response.json()


@pytest.mark.asyncio
async def test_new_member_approved_leaves_queue(client: AsyncClient):
    chapter = await create_chapter()
    await create_user("admin", role=Role.ADMIN)
    profile = await _setup_profile(client, "newbie", chapter)
    assert profile["membership_status"] == "Pending"
    assert profile["chapter_approval_status"] == "pending"

    queue = await client.get("/api/v1/admin/approvals", headers=auth_headers("admin"))
    assert queue.status_code == 200
    [item] = [i for i in queue.json() if i["id"] == "newbie"]
    assert item["is_new_member"] is True
    assert item["is_chapter_request"] is True
    assert item["chapter_name"] == chapter.name

    decided = await client.post(
        "/api/v1/admin/approvals/newbie",
        json={"decision": "approve"},
        headers=auth_headers("admin"),
    )
    assert decided.status_code == 200
    # One approval resolves both pending concerns
    assert decided.json()["membership_status"] == "Active"
    assert decided.json()["chapter_approval_status"] == "approved"

    queue = await client.get("/api/v1/admin/approvals", headers=auth_headers("admin"))
    assert "newbie" not in {i["id"] for i in queue.json()}


@pytest.mark.asyncio
async def test_chapter_request_approval_keeps_membership_status(client: AsyncClient):
    chapter = await create_chapter()
    await create_user("admin", role=Role.ADMIN)
    await create_user(
        "mover",
        chapter=chapter,
        status=MembershipState.INACTIVE,
        chapter_status=ChapterLinkState.PENDING,
    )

    response = await client.post(
        "/api/v1/admin/approvals/mover",
        json={"decision": "approve"},
        headers=auth_headers("admin"),
    )
    assert response.status_code == 200

    user = await load_user("mover")
    assert user.chapter_approval_status == "approved"
    assert user.membership_status == "Inactive"


@pytest.mark.asyncio
async def test_rejection_is_final_until_manual_override(client: AsyncClient):
    await create_user("admin", role=Role.ADMIN)
    await _setup_profile(client, "hopeful")

    rejected = await client.post(
        "/api/v1/admin/approvals/hopeful",
        json={"decision": "reject"},
        headers=auth_headers("admin"),
    )
    assert rejected.json()["membership_status"] == "Rejected"

    # Nothing is pending any more, so a later approve changes nothing
    again = await client.post(
        "/api/v1/admin/approvals/hopeful",
        json={"decision": "approve"},
        headers=auth_headers("admin"),
    )
    assert again.status_code == 200
    assert again.json()["membership_status"] == "Rejected"

    override = await client.patch(
        "/api/v1/admin/members/hopeful",
        json={"membership_status": "Active"},
        headers=auth_headers("admin"),
    )
    assert override.status_code == 200
    assert override.json()["membership_status"] == "Active"


@pytest.mark.asyncio
async def test_incomplete_profiles_stay_out_of_queue(client: AsyncClient):
    await create_user("admin", role=Role.ADMIN)
    await create_user("ghost", completed=False, status=MembershipState.PENDING)

    queue = await client.get("/api/v1/admin/approvals", headers=auth_headers("admin"))
    assert "ghost" not in {i["id"] for i in queue.json()}


@pytest.mark.asyncio
async def test_moderator_queue_is_chapter_scoped(client: AsyncClient):
    c1 = await create_chapter("One")
    c2 = await create_chapter("Two")
    await create_user("mod", role=Role.MODERATOR, chapter=c1)
    await create_user("near", chapter=c1, status=MembershipState.PENDING)
    await create_user("far", chapter=c2, status=MembershipState.PENDING)

    queue = await client.get("/api/v1/admin/approvals", headers=auth_headers("mod"))
    assert queue.status_code == 200
    ids = {i["id"] for i in queue.json()}
    assert "near" in ids
    assert "far" not in ids

    denied = await client.post(
        "/api/v1/admin/approvals/far",
        json={"decision": "approve"},
        headers=auth_headers("mod"),
    )
    assert denied.status_code == 403
    assert (await load_user("far")).membership_status == "Pending"

    allowed = await client.post(
        "/api/v1/admin/approvals/near",
        json={"decision": "approve"},
        headers=auth_headers("mod"),
    )
    assert allowed.status_code == 200
    assert allowed.json()["membership_status"] == "Active"


@pytest.mark.asyncio
async def test_member_cannot_reach_console(client: AsyncClient):
    await create_user("plain")
    response = await client.get("/api/v1/admin/approvals", headers=auth_headers("plain"))
    assert response.status_code == 403
    assert response.json()["redirect_to"] == "/"


@pytest.mark.asyncio
async def test_moderator_cannot_assign_roles_or_foreign_chapters(client: AsyncClient):
    c1 = await create_chapter("One")
    c2 = await create_chapter("Two")
    await create_user("mod", role=Role.MODERATOR, chapter=c1)
    await create_user("local", chapter=c1)

    role_change = await client.patch(
        "/api/v1/admin/members/local", json={"role": "admin"}, headers=auth_headers("mod")
    )
    assert role_change.status_code == 403

    transfer = await client.patch(
        "/api/v1/admin/members/local",
        json={"chapter_id": str(c2.id)},
        headers=auth_headers("mod"),
    )
    assert transfer.status_code == 403
    user = await load_user("local")
    assert user.role == "member"
    assert user.chapter_id == c1.id


@pytest.mark.asyncio
async def test_admin_chapter_assignment_is_approved(client: AsyncClient):
    chapter = await create_chapter()
    await create_user("admin", role=Role.ADMIN)
    await create_user("solo")

    assigned = await client.patch(
        "/api/v1/admin/members/solo",
        json={"chapter_id": str(chapter.id), "role": "moderator"},
        headers=auth_headers("admin"),
    )
    assert assigned.status_code == 200
    data = assigned.json()
    assert data["chapter_approval_status"] == "approved"
    assert data["role"] == "moderator"

    cleared = await client.patch(
        "/api/v1/admin/members/solo", json={"chapter_id": None}, headers=auth_headers("admin")
    )
    assert cleared.json()["chapter_id"] is None
    assert cleared.json()["chapter_approval_status"] == "none"


@pytest.mark.asyncio
async def test_moderator_chapter_list_is_scoped(client: AsyncClient):
    c1 = await create_chapter("One")
    await create_chapter("Two")
    await create_user("mod", role=Role.MODERATOR, chapter=c1)
    await create_user("admin", role=Role.ADMIN)

    mine = await client.get("/api/v1/admin/chapters", headers=auth_headers("mod"))
    assert [c["id"] for c in mine.json()] == [str(c1.id)]

    everything = await client.get("/api/v1/admin/chapters", headers=auth_headers("admin"))
    assert len(everything.json()) == 2


@pytest.mark.asyncio
async def test_pending_transfer_grants_no_scope_over_new_chapter(client: AsyncClient):
    c1 = await create_chapter("One")
    c2 = await create_chapter("Two")
    await create_user("mod", role=Role.MODERATOR, chapter=c1)
    await create_user("waiting", chapter=c2, status=MembershipState.PENDING)

    moved = await client.patch(
        "/api/v1/profile/me", json={"chapter_id": str(c2.id)}, headers=auth_headers("mod")
    )
    assert moved.status_code == 200
    assert moved.json()["chapter_approval_status"] == "pending"

    queue = await client.get("/api/v1/admin/approvals", headers=auth_headers("mod"))
    assert queue.status_code == 200
    assert queue.json() == []

    for user_id in ("waiting", "mod"):
        denied = await client.post(
            f"/api/v1/admin/approvals/{user_id}",
            json={"decision": "approve"},
            headers=auth_headers("mod"),
        )
        assert denied.status_code == 403

    chapter_edit = await client.patch(
        f"/api/v1/chapters/{c2.id}", json={"name": "Taken over"}, headers=auth_headers("mod")
    )
    assert chapter_edit.status_code == 403

    directory = await client.get("/api/v1/members", headers=auth_headers("mod"))
    assert "waiting" not in {m["id"] for m in directory.json()}

    assert (await load_user("waiting")).membership_status == "Pending"
    assert (await load_user("mod")).chapter_approval_status == "pending"


@pytest.mark.asyncio
async def test_moderator_cannot_decide_own_membership(client: AsyncClient):
    c1 = await create_chapter("One")
    await create_user("mod", role=Role.MODERATOR, chapter=c1, status=MembershipState.PENDING)

    queue = await client.get("/api/v1/admin/approvals", headers=auth_headers("mod"))
    assert "mod" not in {i["id"] for i in queue.json()}

    self_approval = await client.post(
        "/api/v1/admin/approvals/mod", json={"decision": "approve"}, headers=auth_headers("mod")
    )
    assert self_approval.status_code == 403

    self_edit = await client.patch(
        "/api/v1/admin/members/mod",
        json={"membership_status": "Active"},
        headers=auth_headers("mod"),
    )
    assert self_edit.status_code == 403
    assert (await load_user("mod")).membership_status == "Pending"
