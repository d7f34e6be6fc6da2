"""Exceptions raised by the persistence layer and the entity workflow.

Services raise the domain errors to signal business-rule violations.
Code that touches the database re-raises driver and SQLAlchemy failures as
DatabaseError, keeping the original exception as the cause. Exception
handlers in main.py translate all of them into the standard error envelope:
{"error": {"code": "...", "message": "..."}}.
"""


class DatabaseError(Exception):
    """Raised when a database operation fails.

    Construct with a message alone, or with a message and the lower-level
    exception that caused it::

        try:
            await session.commit()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Commit failed: {exc}", exc) from exc

    ``cause`` is the exact object passed in, so diagnostic tooling can walk
    the chain. It is also set as ``__cause__`` for tracebacks.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class DomainError(Exception):
    """Base class for all domain exceptions."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class ConflictError(DomainError):
    """Raised when a write is attempted through a read-only context."""
