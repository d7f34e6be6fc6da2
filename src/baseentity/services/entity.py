"""Entity business logic.

Every change writes one audit log row tagged with its ChangedType and carrying
a snapshot of the entity's name. SQLAlchemy failures are re-raised as
DatabaseError with the original as the cause.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from baseentity.context import EntityContext
from baseentity.enums import ChangedType
from baseentity.exceptions import DatabaseError, DomainError, NotFoundError
from baseentity.logging import get_logger
from baseentity.models import AuditLog, Entity
from baseentity.repositories.entity import (
    add_audit_log,
    add_entity,
    get_audit_log_as_of,
    get_entity,
    list_audit_log,
)
from baseentity.schemas.entity import EntityDeleteInput

logger = get_logger(__name__)


@contextmanager
def _database_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise DatabaseError(f"{operation} failed: {exc}", exc) from exc


async def _require_entity(db: AsyncSession, object_id: int) -> Entity:
    entity = await get_entity(db, object_id)
    if entity is None:
        raise NotFoundError("Entity", object_id)
    return entity


def _check_not_before_valid_from(entity: Entity, context: EntityContext) -> None:
    """A historized change may not be effective before the entity's current state."""
    if not context.historized or entity.valid_from is None:
        return
    if context.as_of < entity.valid_from:
        raise DomainError(
            f"AsOf [{context.as_of}] earlier than ValidFrom [{entity.valid_from}]"
            f" for Entity [{entity.object_id}]"
        )


async def create_entity(db: AsyncSession, name: str, context: EntityContext) -> Entity:
    context.require_writable()
    with _database_errors("Insert"):
        entity = await add_entity(db, name, context.valid_from)
        await add_audit_log(
            db, entity.object_id, ChangedType.INSERTED, entity.valid_from, name=entity.name
        )

    logger.info("entity_inserted", object_id=entity.object_id, as_of=context.as_of.isoformat())
    return entity


async def update_entity(
    db: AsyncSession, object_id: int, name: str, context: EntityContext
) -> Entity:
    """Rename an entity. A historized context also moves its valid-from marker forward."""
    context.require_writable()
    with _database_errors("Update"):
        entity = await _require_entity(db, object_id)
        _check_not_before_valid_from(entity, context)
        entity.name = name
        if context.historized:
            entity.valid_from = context.as_of
        await db.flush()
        await db.refresh(entity)
        await add_audit_log(
            db, entity.object_id, ChangedType.UPDATED, entity.valid_from, name=entity.name
        )

    logger.info("entity_updated", object_id=object_id, as_of=context.as_of.isoformat())
    return entity


async def delete_entity(db: AsyncSession, request: EntityDeleteInput) -> AuditLog:
    """Delete the entity named by ``request`` and return the audit row written.

    With ``set_valid_from`` the deletion is stamped with ``request.as_of``,
    which may not precede the entity's current valid-from marker. Otherwise
    the deletion keeps that marker.
    """
    context = EntityContext.for_delete(request)
    context.require_writable()
    with _database_errors("Delete"):
        entity = await _require_entity(db, request.object_id)
        _check_not_before_valid_from(entity, context)
        valid_from = context.valid_from if context.historized else entity.valid_from
        record = await add_audit_log(
            db, entity.object_id, ChangedType.DELETED, valid_from, name=entity.name
        )
        await db.delete(entity)
        await db.flush()

    logger.info(
        "entity_deleted",
        object_id=request.object_id,
        as_of=request.as_of.isoformat(),
        set_valid_from=request.set_valid_from,
    )
    return record


async def get_history(db: AsyncSession, object_id: int) -> list[AuditLog]:
    """Return every change recorded for ``object_id``, including deletions."""
    with _database_errors("History query"):
        records = await list_audit_log(db, object_id)
    if not records:
        raise NotFoundError("Entity", object_id)
    return records


async def get_as_of(db: AsyncSession, object_id: int, as_of: datetime) -> AuditLog:
    """Return the audit row describing ``object_id`` as it was at ``as_of``.

    The object is not found if it had not been inserted yet, or if it had
    already been deleted, at that point in time.
    """
    with _database_errors("As-of query"):
        record = await get_audit_log_as_of(db, object_id, as_of)
    if record is None or record.action == ChangedType.DELETED:
        raise NotFoundError("Entity", object_id)
    return record
