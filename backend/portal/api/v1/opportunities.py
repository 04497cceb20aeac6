"""Opportunities board: browse, submit, delete."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_actor, get_db
from portal.core.policy import Actor
from portal.core.states import OpportunityType
from portal.schemas.opportunity import OpportunityCreate, OpportunityResponse
from portal.services import opportunities

router = APIRouter()


@router.get("", response_model=list[OpportunityResponse])
async def browse_opportunities(
    type: OpportunityType | None = Query(None),
    search: str | None = Query(None, max_length=100),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[OpportunityResponse]:
    """Published opportunities only (approved, or legacy rows without a status)."""
    items = await opportunities.list_published(
        db, type=type.value if type else None, search=search
    )
    return [OpportunityResponse.model_validate(o) for o in items]


@router.post("", response_model=OpportunityResponse, status_code=201)
async def submit_opportunity(
    body: OpportunityCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> OpportunityResponse:
    """Submit an opportunity for review. It is stored as pending."""
    opportunity = await opportunities.create_opportunity(db, actor, body)
    return OpportunityResponse.model_validate(opportunity)


@router.get("/{opportunity_id}", response_model=OpportunityResponse)
async def get_opportunity(
    opportunity_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> OpportunityResponse:
    opportunity = await opportunities.get_visible(db, actor, opportunity_id)
    return OpportunityResponse.model_validate(opportunity)


@router.delete("/{opportunity_id}", status_code=204)
async def delete_opportunity(
    opportunity_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    await opportunities.delete_opportunity(db, actor, opportunity_id)
