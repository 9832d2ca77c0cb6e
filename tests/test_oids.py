"""OID lookup tables built from raw catalog rows."""
from __future__ import annotations

from schemaspy.catalog import AccessMethodRow, IndexRow, InheritsRow, RelationRow, TypeRow
from schemaspy.oids import OidIndex


def _build(**rows):  # noqa: D401
    return OidIndex.build(
        relations=rows.get("relations", []),
        types=rows.get("types", []),
        indexes=rows.get("indexes", []),
        access_methods=rows.get("access_methods", []),
        inherits=rows.get("inherits", []),
    )


def test_duplicate_relation_keeps_last():
    oids = _build(relations=[
        RelationRow(1, "first", 10, 0, "r"),
        RelationRow(2, "other", 11, 0, "v"),
        RelationRow(1, "second", 12, 0, "r"),
    ])
    assert oids.relation_name(1) == "second"
    assert oids.relation_name(2) == "other"
    assert len(oids.relations) == 2


def test_duplicate_types_indexes_access_methods_keep_last():
    oids = _build(
        types=[TypeRow(25, "text"), TypeRow(25, "varchar")],
        indexes=[IndexRow(7, 1, False, False, (1,)), IndexRow(7, 1, True, True, (2,))],
        access_methods=[AccessMethodRow(403, "hash"), AccessMethodRow(403, "btree")],
        inherits=[InheritsRow(2, 1, 1), InheritsRow(2, 1, 1)],
    )
    assert oids.type_name(25) == "varchar"
    assert oids.indexes[7] == IndexRow(7, 1, True, True, (2,))
    assert oids.access_method_name(403) == "btree"
    # edges are kept as read
    assert oids.inherits == [InheritsRow(2, 1, 1), InheritsRow(2, 1, 1)]


def test_unknown_oid():
    oids = _build(
        relations=[RelationRow(1, "t", 10, 0, "r")],
        types=[TypeRow(25, "text")],
        access_methods=[AccessMethodRow(403, "btree")],
    )
    assert oids.relation_name(99) is None
    assert oids.type_name(99) is None
    assert oids.access_method_name(99) is None
    assert 99 not in oids.indexes
