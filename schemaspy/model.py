"""Resolved schema graph returned by `schemaspy.resolve`.

All records are frozen: a `Schema` is built once per pass and never updated
afterwards. Name lists are tuples in their final order and every mapping is a
read-only `types.MappingProxyType` filled in name order, so iterating a
`Schema` gives reproducible output. Records holding mappings are not hashable.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Tuple

# key part of an index that is an expression, not a column;
# the expression text itself is not resolved
EXPRESSION = "[placeholder]"
# key part of an index whose owning relation is not part of the schema
UNKNOWN_COLUMN = "[unknown]"


class RelationKind(Enum):
    """pg_class.relkind, reduced to the kinds schemaspy tells apart."""

    TABLE = "table"
    VIEW = "view"
    MATERIALIZED_VIEW = "materialized view"
    INDEX = "index"
    OTHER = "other"

    @classmethod
    def from_code(cls, code: str) -> "RelationKind":
        return _KIND_CODES.get(code, cls.OTHER)


_KIND_CODES = {
    "r": RelationKind.TABLE,
    "v": RelationKind.VIEW,
    "m": RelationKind.MATERIALIZED_VIEW,
    "i": RelationKind.INDEX,
}


@dataclass(frozen=True)
class Column:
    """A column of a table, view or materialized view."""

    type: str
    not_null: bool
    position: int  # 1-based, dense within the relation


@dataclass(frozen=True)
class Relation:
    """A table, view or materialized view."""

    name: str
    kind: RelationKind
    columns: Mapping[str, Column] = field(default_factory=dict)
    inherits: Tuple[str, ...] = ()
    children: Tuple[str, ...] = ()
    indexes: Tuple[str, ...] = ()

    def column_names(self) -> List[str]:
        """Return column names in declaration order."""
        return [name for name, _ in sorted(self.columns.items(), key=lambda item: item[1].position)]

    def column_at(self, position: int) -> Optional[str]:
        """Return the name of the column at 1-based *position*, if any."""
        for name, col in self.columns.items():
            if col.position == position:
                return name
        return None


@dataclass(frozen=True)
class Index:
    """An index, keyed in `Schema.indexes` by its own name."""

    relation: str
    access_method: str
    unique: bool
    primary: bool
    columns: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Schema:
    """Snapshot of one namespace."""

    name: str
    relations: Mapping[str, Relation] = field(default_factory=dict)
    tables: Tuple[str, ...] = ()
    views: Tuple[str, ...] = ()
    materialized: Tuple[str, ...] = ()
    indexes: Mapping[str, Index] = field(default_factory=dict)

    def relation(self, name: str) -> Relation:
        return self.relations[name]

    def indexes_of(self, name: str) -> List[Index]:
        """Return the indexes defined on relation *name*, sorted by index name."""
        return [self.indexes[i] for i in self.relations[name].indexes]


@dataclass(frozen=True)
class Sequence:
    """Settings of a sequence."""

    start: int
    increment: int
    min_value: int
    max_value: int
    cycle: bool


@dataclass(frozen=True)
class Function:
    """A function (or procedure) signature."""

    name: str
    arguments: str
    result: str
    language: str

    @property
    def signature(self) -> str:
        return f"{self.name}({self.arguments})"
