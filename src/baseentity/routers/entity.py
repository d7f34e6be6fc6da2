"""Entity endpoints."""

from datetime import datetime

from fastapi import APIRouter

from baseentity.context import EntityContext
from baseentity.dependencies import DB
from baseentity.schemas.entity import (
    ChangeRecordResponse,
    EntityCreate,
    EntityDeleteInput,
    EntityResponse,
    EntityUpdate,
)
from baseentity.services.entity import (
    create_entity,
    delete_entity,
    get_as_of,
    get_history,
    update_entity,
)

router = APIRouter(prefix="/entities", tags=["entities"])


@router.post("", response_model=EntityResponse, status_code=201)
async def create(body: EntityCreate, db: DB) -> EntityResponse:
    context = EntityContext.for_change(body.as_of, body.set_valid_from)
    entity = await create_entity(db, body.name, context)
    return EntityResponse.model_validate(entity)


@router.get("/{object_id}", response_model=ChangeRecordResponse, status_code=200)
async def read_as_of(
    object_id: int, db: DB, as_of: datetime | None = None
) -> ChangeRecordResponse:
    """State of an entity at ``as_of`` (default now), rebuilt from its audit log."""
    record = await get_as_of(db, object_id, as_of or datetime.now())
    return ChangeRecordResponse.model_validate(record)


@router.patch("/{object_id}", response_model=EntityResponse, status_code=200)
async def update(object_id: int, body: EntityUpdate, db: DB) -> EntityResponse:
    context = EntityContext.for_change(body.as_of, body.set_valid_from)
    entity = await update_entity(db, object_id, body.name, context)
    return EntityResponse.model_validate(entity)


@router.post("/delete", response_model=ChangeRecordResponse, status_code=200)
async def delete(body: EntityDeleteInput, db: DB) -> ChangeRecordResponse:
    """Delete an entity. The body uses the ObjectId / AsOf / SetValidFrom contract."""
    record = await delete_entity(db, body)
    return ChangeRecordResponse.model_validate(record)


@router.get("/{object_id}/history", response_model=list[ChangeRecordResponse], status_code=200)
async def history(object_id: int, db: DB) -> list[ChangeRecordResponse]:
    records = await get_history(db, object_id)
    return [ChangeRecordResponse.model_validate(record) for record in records]
