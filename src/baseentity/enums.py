"""Enumerations shared by the entity store.

ChangedType values are persisted in the audit log, so they must stay stable.
"""

from enum import StrEnum


class ChangedType(StrEnum):
    """What happened to an object or collection element."""

    INSERTED = "Inserted"
    UPDATED = "Updated"
    DELETED = "Deleted"


class ReadWriteMode(StrEnum):
    READ_ONLY = "ReadOnly"
    READ_WRITE = "ReadWrite"


class HistorizationPolicy(StrEnum):
    # NONE: changes keep the entity's current valid-from marker.
    # ALL: every change is stamped with the context's as-of timestamp.
    NONE = "None"
    ALL = "All"
