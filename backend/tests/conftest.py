"""Shared test fixtures."""

import os
import tempfile
import uuid
from collections.abc import AsyncGenerator
from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

# Tests run against a throwaway SQLite file; RLS policies are Postgres-only
_DB_PATH = os.path.join(tempfile.gettempdir(), f"portal-test-{uuid.uuid4().hex[:8]}.db")

os.environ.setdefault("COGNITO_MOCK", "true")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_DB_PATH}")

from portal.core.security import create_mock_access_token  # noqa: E402
from portal.core.states import (  # noqa: E402
    ChapterLinkState,
    ChapterStatus,
    MembershipState,
    MembershipType,
    OpportunityStatus,
    OpportunityType,
    ResourceCategory,
    ResourceFileType,
    Role,
)
from portal.db.base import Base  # noqa: E402
from portal.db.session import async_session_factory  # noqa: E402
from portal.db.session import engine as app_engine  # noqa: E402
from portal.main import app  # noqa: E402
from portal.models.chapter import Chapter  # noqa: E402
from portal.models.event import Event  # noqa: E402
from portal.models.opportunity import Opportunity  # noqa: E402
from portal.models.resource import Resource  # noqa: E402
from portal.models.user import User  # noqa: E402


@pytest.fixture(autouse=True)
async def schema() -> AsyncGenerator[None, None]:
    """Fresh tables for every test."""
    async with app_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await app_engine.dispose()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP test client for the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def _uid() -> str:
    return uuid.uuid4().hex[:8]


def make_token(sub: str = "test-sub", email: str | None = None) -> str:
    """Generate a mock JWT for testing."""
    return create_mock_access_token(sub=sub, email=email or f"{sub}@example.com")


def auth_headers(sub: str = "test-sub", email: str | None = None) -> dict:
    """Return Authorization headers with a mock JWT."""
    token = make_token(sub=sub, email=email)
    return {"Authorization": f"Bearer {token}"}


async def create_chapter(name: str = "Chapter", **fields) -> Chapter:
    values = {
        "name": f"{name} {_uid()}",
        "institution": "State University",
        "president_name": "Pat President",
        "president_email": "president@example.com",
        "email": "chapter@example.com",
        "status": ChapterStatus.ACTIVE.value,
    }
    values.update(fields)
    async with async_session_factory() as session:
        chapter = Chapter(**values)
        session.add(chapter)
        await session.commit()
    return chapter


async def create_user(
    sub: str | None = None,
    *,
    role: Role = Role.MEMBER,
    status: MembershipState = MembershipState.ACTIVE,
    chapter: Chapter | None = None,
    chapter_status: ChapterLinkState | None = None,
    completed: bool = True,
    **fields,
) -> User:
    """Seed a user row directly, bypassing onboarding."""
    sub = sub or f"user-{_uid()}"
    if chapter_status is None:
        chapter_status = ChapterLinkState.APPROVED if chapter else ChapterLinkState.NONE
    values = {
        "id": sub,
        "email": f"{sub}@example.com",
        "full_name": f"User {sub}",
        "major": "Biology",
        "interests": ["Health"],
        "membership_type": (
            MembershipType.CHAPTER.value if chapter else MembershipType.INDIVIDUAL.value
        ),
        "membership_status": status.value,
        "role": role.value,
        "chapter_id": chapter.id if chapter else None,
        "chapter_approval_status": chapter_status.value,
        "profile_completed": completed,
    }
    values.update(fields)
    async with async_session_factory() as session:
        user = User(**values)
        session.add(user)
        await session.commit()
    return user


async def create_opportunity(
    created_by: str = "someone",
    status: OpportunityStatus | None = OpportunityStatus.APPROVED,
    **fields,
) -> Opportunity:
    values = {
        "title": f"Opportunity {_uid()}",
        "organization": "Acme",
        "type": OpportunityType.INTERNSHIP.value,
        "location": "Remote",
        "deadline": date.today() + timedelta(days=30),
        "description": "A description that is long enough to pass.",
        "link": "https://example.com/apply",
        "tags": [],
        "status": status.value if status else None,
        "created_by": created_by,
    }
    values.update(fields)
    async with async_session_factory() as session:
        opportunity = Opportunity(**values)
        session.add(opportunity)
        await session.commit()
    return opportunity


async def create_resource(
    category: ResourceCategory = ResourceCategory.OTHER,
    uploaded_by: str = "admin",
    **fields,
) -> Resource:
    values = {
        "title": f"Resource {_uid()}",
        "category": category.value,
        "file_type": ResourceFileType.PDF.value,
        "url": "https://example.com/file.pdf",
        "tags": [],
        "uploaded_by": uploaded_by,
    }
    values.update(fields)
    async with async_session_factory() as session:
        resource = Resource(**values)
        session.add(resource)
        await session.commit()
    return resource


async def create_event(
    chapter: Chapter | None = None, created_by: str = "admin", **fields
) -> Event:
    values = {
        "title": f"Event {_uid()}",
        "event_date": date.today() + timedelta(days=7),
        "event_time": "18:00",
        "location": "Main Hall",
        "created_by": created_by,
        "chapter_id": chapter.id if chapter else None,
        "chapter_name": chapter.name if chapter else None,
    }
    values.update(fields)
    async with async_session_factory() as session:
        event = Event(**values)
        session.add(event)
        await session.commit()
    return event


async def load_user(user_id: str) -> User | None:
    async with async_session_factory() as session:
        return await session.get(User, user_id)


async def load_opportunity(opportunity_id: uuid.UUID) -> Opportunity | None:
    async with async_session_factory() as session:
        return await session.get(Opportunity, opportunity_id)
