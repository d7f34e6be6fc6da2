"""Entity request and response schemas.

EntityDeleteInput is the interchange contract for delete requests: its JSON
field names are fixed (ObjectId, AsOf, SetValidFrom) independent of the
Python attribute names.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from baseentity.enums import ChangedType

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class EntityDeleteInput(BaseModel):
    """Request to delete an entity as of a point in time.

    A plain data holder. Whether ``object_id`` exists and whether ``as_of``
    is acceptable is decided by the delete workflow, not here.
    ``set_valid_from`` is forwarded untouched; the workflow uses it to decide
    whether ``as_of`` is also recorded as the valid-from marker.
    """

    model_config = {"populate_by_name": True, "validate_assignment": True}

    object_id: int = Field(alias="ObjectId", ge=INT64_MIN, le=INT64_MAX)
    as_of: datetime = Field(alias="AsOf")
    set_valid_from: bool = Field(default=False, alias="SetValidFrom")


class EntityCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    as_of: datetime | None = None
    set_valid_from: bool = False


class EntityUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    as_of: datetime | None = None
    set_valid_from: bool = False


class EntityResponse(BaseModel):
    """Single entity as stored."""

    model_config = {"from_attributes": True}

    object_id: int
    name: str
    valid_from: datetime | None
    created_at: datetime
    updated_at: datetime


class ChangeRecordResponse(BaseModel):
    """One audit log row: what happened to which object, effective when."""

    model_config = {"from_attributes": True}

    tid: int
    object_id: int
    action: ChangedType
    valid_from: datetime | None
    name: str | None = None
    created_at: datetime
