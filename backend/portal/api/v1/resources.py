"""Resource library."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_actor, get_db
from portal.core.exceptions import NotFoundError
from portal.core.policy import Action, Actor, authorize, enforce
from portal.core.states import ResourceCategory
from portal.models.resource import Resource
from portal.schemas.resource import ResourceCreate, ResourceResponse
from portal.services.scoping import resources_query

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[ResourceResponse])
async def list_resources(
    category: ResourceCategory | None = Query(None),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[ResourceResponse]:
    stmt = resources_query(actor, category=category.value if category else None)
    result = await db.execute(stmt)
    return [ResourceResponse.model_validate(r) for r in result.scalars().all()]


@router.post("", response_model=ResourceResponse, status_code=201)
async def create_resource(
    body: ResourceCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ResourceResponse:
    enforce(actor, Action.CREATE_RESOURCE)

    data = body.model_dump()
    data["category"] = body.category.value
    data["file_type"] = body.file_type.value
    resource = Resource(**data, uploaded_by=actor.user_id)
    db.add(resource)
    await db.flush()
    logger.info("Resource %s added by %s", resource.id, actor.user_id)
    return ResourceResponse.model_validate(resource)


@router.delete("/{resource_id}", status_code=204)
async def delete_resource(
    resource_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> None:
    resource = await db.get(Resource, resource_id)
    # Restricted resources are reported missing to callers who cannot see them
    if resource is None or not authorize(actor, Action.VIEW_RESOURCE, resource):
        raise NotFoundError("Resource")
    enforce(actor, Action.DELETE_RESOURCE, resource)

    await db.delete(resource)
    await db.flush()
    logger.info("Resource %s deleted by %s", resource_id, actor.user_id)
