"""Entity data-access layer.

Pure query functions: no business logic, no HTTP concerns.
Each function takes a session and returns models or scalars.
"""

from datetime import datetime

from sqlalchemy import case, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from baseentity.enums import ChangedType
from baseentity.models import AuditLog, Entity


async def get_entity(db: AsyncSession, object_id: int) -> Entity | None:
    return await db.get(Entity, object_id)


async def add_entity(db: AsyncSession, name: str, valid_from: datetime | None) -> Entity:
    """Insert an entity and flush so its object_id is assigned."""
    entity = Entity(name=name, valid_from=valid_from)
    db.add(entity)
    await db.flush()
    await db.refresh(entity)
    return entity


async def add_audit_log(
    db: AsyncSession,
    object_id: int,
    action: ChangedType,
    valid_from: datetime | None,
    name: str | None = None,
) -> AuditLog:
    record = AuditLog(object_id=object_id, action=action, valid_from=valid_from, name=name)
    db.add(record)
    await db.flush()
    await db.refresh(record)
    return record


async def list_audit_log(db: AsyncSession, object_id: int) -> list[AuditLog]:
    """Return the change history of one object, oldest first."""
    stmt = select(AuditLog).where(AuditLog.object_id == object_id).order_by(AuditLog.tid)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_audit_log_as_of(
    db: AsyncSession, object_id: int, as_of: datetime
) -> AuditLog | None:
    """Latest audit row effective at ``as_of``: newest valid-from first, then newest tid.

    Rows without a valid-from marker predate any historized change, so they
    sort after every dated row.
    """
    stmt = (
        select(AuditLog)
        .where(
            AuditLog.object_id == object_id,
            or_(AuditLog.valid_from.is_(None), AuditLog.valid_from <= as_of),
        )
        .order_by(
            case((AuditLog.valid_from.is_(None), 1), else_=0),
            AuditLog.valid_from.desc(),
            AuditLog.tid.desc(),
        )
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalars().first()
