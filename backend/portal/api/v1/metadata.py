"""Vocabulary documents (interest tags, affiliations)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_actor, get_db
from portal.core.policy import Actor
from portal.core.states import MetadataKey
from portal.schemas.metadata import MetadataResponse, MetadataValues
from portal.services import metadata

router = APIRouter()


@router.get("/{key}", response_model=MetadataResponse)
async def get_metadata(
    key: MetadataKey,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> MetadataResponse:
    return MetadataResponse(key=key.value, values=await metadata.get_values(db, key))


@router.put("/{key}", response_model=MetadataResponse)
async def put_metadata(
    key: MetadataKey,
    body: MetadataValues,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> MetadataResponse:
    values = await metadata.save_values(db, actor, key, body.values)
    return MetadataResponse(key=key.value, values=values)
