"""OID lookup tables for one resolution pass."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from schemaspy.catalog import (
    AccessMethodRow,
    IndexRow,
    InheritsRow,
    RelationRow,
    TypeRow,
)


@dataclass
class OidIndex:
    """Raw catalog rows keyed by OID.

    Only lives for the duration of a pass; it holds no references into the
    resolved `Schema`. Duplicate OIDs keep the last row seen.
    """

    relations: Dict[int, RelationRow] = field(default_factory=dict)
    types: Dict[int, TypeRow] = field(default_factory=dict)
    indexes: Dict[int, IndexRow] = field(default_factory=dict)
    access_methods: Dict[int, AccessMethodRow] = field(default_factory=dict)
    inherits: List[InheritsRow] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        relations: Iterable[RelationRow],
        types: Iterable[TypeRow],
        indexes: Iterable[IndexRow],
        access_methods: Iterable[AccessMethodRow],
        inherits: Iterable[InheritsRow],
    ) -> "OidIndex":
        return cls(
            relations={r.oid: r for r in relations},
            types={t.oid: t for t in types},
            indexes={i.index_oid: i for i in indexes},
            access_methods={a.oid: a for a in access_methods},
            inherits=list(inherits),
        )

    def relation_name(self, oid: int) -> str | None:
        row = self.relations.get(oid)
        return row.name if row is not None else None

    def type_name(self, oid: int) -> str | None:
        row = self.types.get(oid)
        return row.name if row is not None else None

    def access_method_name(self, oid: int) -> str | None:
        row = self.access_methods.get(oid)
        return row.name if row is not None else None
