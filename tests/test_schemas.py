import json
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from baseentity.schemas.entity import EntityDeleteInput


@pytest.mark.parametrize(
    "object_id, as_of, set_valid_from",
    [
        (42, datetime(2024, 1, 15, tzinfo=UTC), True),
        (2**63 - 1, datetime(1999, 12, 31, 23, 59, 59), False),
        (-(2**63), datetime(2024, 2, 29, 12, 30), True),
    ],
    ids=["typical", "int64_max", "int64_min"],
)
def test_delete_input_fields_read_back(
    object_id: int, as_of: datetime, set_valid_from: bool
) -> None:
    request = EntityDeleteInput(object_id=object_id, as_of=as_of, set_valid_from=set_valid_from)

    assert (request.object_id, request.as_of, request.set_valid_from) == (
        object_id,
        as_of,
        set_valid_from,
    )


def test_delete_input_json_uses_explicit_field_names() -> None:
    request = EntityDeleteInput(object_id=42, as_of=datetime(2024, 1, 15, tzinfo=UTC))

    payload = json.loads(request.model_dump_json(by_alias=True))

    assert payload == {"ObjectId": 42, "AsOf": "2024-01-15T00:00:00Z", "SetValidFrom": False}


def test_delete_input_json_round_trip() -> None:
    raw = '{"ObjectId": 42, "AsOf": "2024-01-15T00:00:00Z", "SetValidFrom": true}'

    request = EntityDeleteInput.model_validate_json(raw)
    restored = EntityDeleteInput.model_validate_json(request.model_dump_json(by_alias=True))

    assert restored == request
    assert restored.object_id == 42
    assert restored.as_of == datetime(2024, 1, 15, tzinfo=UTC)
    assert restored.set_valid_from is True


def test_delete_input_set_valid_from_defaults_to_false() -> None:
    request = EntityDeleteInput.model_validate({"ObjectId": 7, "AsOf": "2024-01-15T00:00:00"})

    assert request.set_valid_from is False


def test_delete_input_fields_are_assignable() -> None:
    request = EntityDeleteInput(object_id=1, as_of=datetime(2024, 1, 15))

    request.object_id = 2
    request.set_valid_from = True

    assert request.object_id == 2
    assert request.set_valid_from is True


def test_delete_input_rejects_out_of_range_object_id() -> None:
    with pytest.raises(ValidationError):
        EntityDeleteInput(object_id=2**63, as_of=datetime(2024, 1, 15))


def test_delete_input_requires_as_of() -> None:
    with pytest.raises(ValidationError):
        EntityDeleteInput.model_validate({"ObjectId": 42})
