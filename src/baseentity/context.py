"""Entity context: the as-of timestamp and write rules a unit of work runs under."""

from dataclasses import dataclass
from datetime import date, datetime

from baseentity.enums import HistorizationPolicy, ReadWriteMode
from baseentity.exceptions import ConflictError, DomainError
from baseentity.schemas.entity import EntityDeleteInput


@dataclass(frozen=True)
class EntityContext:
    """Immutable description of how changes in one unit of work are applied.

    ``as_of`` is the point in time the changes become effective. With a
    historization policy other than NONE every change is stamped with
    ``as_of`` as its valid-from marker, which is why a future ``as_of`` is
    rejected in that case.
    """

    as_of: datetime
    read_write_mode: ReadWriteMode = ReadWriteMode.READ_WRITE
    historization_policy: HistorizationPolicy = HistorizationPolicy.NONE

    def __post_init__(self) -> None:
        if self.historized and self.as_of.date() > date.today():
            raise DomainError("Session AsOf cannot be in the future")

    @classmethod
    def current(cls, as_of: datetime | None = None) -> "EntityContext":
        """Read-write for today's as-of, read-only for any other date."""
        as_of = as_of or datetime.now()
        if as_of.date() == date.today():
            return cls(as_of=as_of, read_write_mode=ReadWriteMode.READ_WRITE)
        return cls(as_of=as_of, read_write_mode=ReadWriteMode.READ_ONLY)

    @classmethod
    def for_change(cls, as_of: datetime | None, set_valid_from: bool) -> "EntityContext":
        """Context for an insert or update request.

        Historized changes may be back-dated, so they always get a read-write
        context. Plain changes follow current().
        """
        if set_valid_from:
            return cls(
                as_of=as_of or datetime.now(),
                read_write_mode=ReadWriteMode.READ_WRITE,
                historization_policy=HistorizationPolicy.ALL,
            )
        return cls.current(as_of)

    @classmethod
    def for_delete(cls, request: EntityDeleteInput) -> "EntityContext":
        policy = HistorizationPolicy.ALL if request.set_valid_from else HistorizationPolicy.NONE
        return cls(
            as_of=request.as_of,
            read_write_mode=ReadWriteMode.READ_WRITE,
            historization_policy=policy,
        )

    @property
    def historized(self) -> bool:
        return self.historization_policy != HistorizationPolicy.NONE

    @property
    def valid_from(self) -> datetime | None:
        """Valid-from marker for changes made in this context, if any."""
        return self.as_of if self.historized else None

    def require_writable(self) -> None:
        if self.read_write_mode == ReadWriteMode.READ_ONLY:
            raise ConflictError("Cannot write using a ReadOnly context")
