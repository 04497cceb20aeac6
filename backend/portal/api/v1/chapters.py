"""Chapter directory (public) and chapter management."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_actor, get_db
from portal.core.exceptions import NotFoundError
from portal.core.policy import Action, Actor, enforce
from portal.core.states import ChapterStatus
from portal.models.chapter import Chapter
from portal.models.user import User
from portal.schemas.chapter import ChapterCreate, ChapterResponse, ChapterUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_chapter(db: AsyncSession, chapter_id: uuid.UUID) -> Chapter:
    chapter = await db.get(Chapter, chapter_id)
    if chapter is None:
        raise NotFoundError("Chapter")
    return chapter


@router.get("", response_model=list[ChapterResponse])
async def list_chapters(
    search: str | None = Query(None, max_length=100),
    status: ChapterStatus | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[ChapterResponse]:
    """Public chapter directory."""
    stmt = select(Chapter).order_by(Chapter.name.asc())
    if search:
        term = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            func.lower(Chapter.name).like(term) | func.lower(Chapter.institution).like(term)
        )
    if status is not None:
        stmt = stmt.where(Chapter.status == status.value)
    result = await db.execute(stmt)
    return [ChapterResponse.model_validate(c) for c in result.scalars().all()]


@router.get("/{chapter_id}", response_model=ChapterResponse)
async def get_chapter(
    chapter_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> ChapterResponse:
    return ChapterResponse.model_validate(await _get_chapter(db, chapter_id))


@router.post("", response_model=ChapterResponse, status_code=201)
async def create_chapter(
    body: ChapterCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ChapterResponse:
    enforce(actor, Action.CREATE_CHAPTER)

    data = body.model_dump()
    data["status"] = body.status.value
    chapter = Chapter(**data)
    db.add(chapter)
    await db.flush()
    logger.info("Chapter %s created by %s", chapter.id, actor.user_id)
    return ChapterResponse.model_validate(chapter)


@router.patch("/{chapter_id}", response_model=ChapterResponse)
async def update_chapter(
    chapter_id: uuid.UUID,
    body: ChapterUpdate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ChapterResponse:
    chapter = await _get_chapter(db, chapter_id)
    enforce(actor, Action.MANAGE_CHAPTER, chapter)

    update_data = body.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field not in {"location", "founded_date", "logo_url"}:
            continue
        setattr(chapter, field, value.value if isinstance(value, ChapterStatus) else value)

    await db.flush()
    return ChapterResponse.model_validate(chapter)


@router.delete("/{chapter_id}", status_code=204)
async def delete_chapter(
    chapter_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a chapter. Its members keep a dangling chapter reference."""
    enforce(actor, Action.DELETE_CHAPTER)
    chapter = await _get_chapter(db, chapter_id)

    orphaned = (
        await db.execute(select(func.count()).where(User.chapter_id == chapter_id))
    ).scalar_one()
    await db.delete(chapter)
    await db.flush()
    logger.info(
        "Chapter %s deleted by %s; %d members now reference an unknown chapter",
        chapter_id,
        actor.user_id,
        orphaned,
    )
