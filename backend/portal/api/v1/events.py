"""Events calendar: network-wide and chapter events."""

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_actor, get_db
from portal.core.exceptions import NotFoundError
from portal.core.policy import Action, Actor, authorize, enforce
from portal.models.event import Event
from portal.schemas.event import EventCreate, EventResponse
from portal.services.scoping import chapter_names, events_query

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[EventResponse])
async def list_events(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[EventResponse]:
    """Network-wide events plus those of the caller's own chapter."""
    result = await db.execute(events_query(actor))
    return [EventResponse.model_validate(e) for e in result.scalars().all()]


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    body: EventCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    enforce(actor, Action.CREATE_EVENT)

    data = body.model_dump()
    if "chapter_id" not in body.model_fields_set:
        data["chapter_id"] = actor.chapter_id
    names = await chapter_names(db, [data["chapter_id"]])

    event = Event(
        **data,
        chapter_name=names.get(data["chapter_id"]),
        created_by=actor.user_id,
    )
    db.add(event)
    await db.flush()
    logger.info(
        "Event %s created by %s (chapter=%s)", event.id, actor.user_id, event.chapter_id
    )
    return EventResponse.model_validate(event)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    event = await db.get(Event, event_id)
    if event is None or not authorize(actor, Action.VIEW_EVENT, event):
        raise NotFoundError("Event")
    enforce(actor, Action.DELETE_EVENT, event)

    await db.delete(event)
    await db.flush()
    logger.info("Event %s deleted by %s", event_id, actor.user_id)
