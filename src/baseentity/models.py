"""SQLAlchemy models.

Define all ORM models here. They must inherit from Base so that
Alembic's autogenerate can detect them.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from baseentity.db.session import Base
from baseentity.enums import ChangedType

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
ObjectIdType = BigInteger().with_variant(Integer(), "sqlite")


class Entity(Base):
    __tablename__ = "entities"

    object_id: Mapped[int] = mapped_column(ObjectIdType, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    valid_from: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class AuditLog(Base):
    """Append-only change history.

    object_id is not a foreign key: rows outlive the entity they describe.
    """

    __tablename__ = "audit_log"

    tid: Mapped[int] = mapped_column(ObjectIdType, primary_key=True)
    object_id: Mapped[int] = mapped_column(BigInteger, index=True)
    action: Mapped[ChangedType] = mapped_column(
        Enum(ChangedType, native_enum=False, length=16, validate_strings=True)
    )
    valid_from: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    # Name of the entity after the change (before it, for deletions)
    name: Mapped[str | None] = mapped_column(String(200))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
