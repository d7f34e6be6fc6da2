from baseentity.enums import ChangedType


def test_changed_type_has_exactly_three_distinct_values() -> None:
    members = list(ChangedType)

    assert [m.name for m in members] == ["INSERTED", "UPDATED", "DELETED"]
    assert len({m.value for m in members}) == 3


def test_changed_type_members_are_not_aliases() -> None:
    assert ChangedType.INSERTED is not ChangedType.UPDATED
    assert ChangedType.UPDATED is not ChangedType.DELETED
    assert ChangedType.INSERTED is not ChangedType.DELETED
    assert len(ChangedType.__members__) == 3


def test_changed_type_lookup_by_value() -> None:
    assert ChangedType("Inserted") is ChangedType.INSERTED
    assert ChangedType("Updated") is ChangedType.UPDATED
    assert ChangedType("Deleted") is ChangedType.DELETED
