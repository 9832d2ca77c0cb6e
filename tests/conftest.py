"""Shared fixtures: an in-memory stand-in for pg_catalog."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

import pytest

from schemaspy.catalog import (
    AccessMethodRow,
    AttributeRow,
    IndexRow,
    InheritsRow,
    NamespaceRow,
    RelationRow,
    TypeRow,
)

PUBLIC = 2200
OTHER = 3300

BTREE = 403
GIN = 2742

INT4 = 23
TEXT = 25
TID = 27
TIMESTAMPTZ = 1184
UUID = 2950


@dataclass
class FakeCatalog:
    """Implements the `CatalogSource` protocol from plain lists."""

    namespaces: List[NamespaceRow] = field(default_factory=list)
    relations: Dict[int, List[RelationRow]] = field(default_factory=dict)
    attributes: List[AttributeRow] = field(default_factory=list)
    types: List[TypeRow] = field(default_factory=list)
    inherits: List[InheritsRow] = field(default_factory=list)
    indexes: List[IndexRow] = field(default_factory=list)
    access_methods: List[AccessMethodRow] = field(default_factory=list)
    calls: List[str] = field(default_factory=list)

    def list_namespaces(self) -> List[NamespaceRow]:
        self.calls.append("namespaces")
        return list(self.namespaces)

    def list_relations(self, namespace_oid: int) -> List[RelationRow]:
        self.calls.append("relations")
        return list(self.relations.get(namespace_oid, []))

    def list_attributes(self) -> List[AttributeRow]:
        self.calls.append("attributes")
        return list(self.attributes)

    def list_types(self) -> List[TypeRow]:
        self.calls.append("types")
        return list(self.types)

    def list_inherits(self) -> List[InheritsRow]:
        self.calls.append("inherits")
        return list(self.inherits)

    def list_indexes(self) -> List[IndexRow]:
        self.calls.append("indexes")
        return list(self.indexes)

    def list_access_methods(self) -> List[AccessMethodRow]:
        self.calls.append("access methods")
        return list(self.access_methods)

    # ------------------------------------------------------------------
    # helpers to fill the catalog
    # ------------------------------------------------------------------

    def relation(self, oid: int, name: str, kind: str = "r", namespace: int = PUBLIC, am: int = 0) -> None:
        self.relations.setdefault(namespace, []).append(RelationRow(oid, name, oid + 1000, am, kind))

    def column(self, owner: int, name: str, type_oid: int, position: int, not_null: bool = False) -> None:
        self.attributes.append(AttributeRow(owner, name, type_oid, position, not_null))

    def index(self, oid: int, name: str, owner: int, keys, unique=False, primary=False, am=BTREE) -> None:
        self.relation(oid, name, kind="i", am=am)
        self.indexes.append(IndexRow(oid, owner, unique, primary, tuple(keys)))


@pytest.fixture
def catalog() -> FakeCatalog:
    """Catalog with two namespaces and the built-in types/access methods."""
    cat = FakeCatalog(
        namespaces=[NamespaceRow(11, "pg_catalog"), NamespaceRow(PUBLIC, "public"), NamespaceRow(OTHER, "other")],
        types=[
            TypeRow(INT4, "int4"),
            TypeRow(TEXT, "text"),
            TypeRow(TID, "tid"),
            TypeRow(TIMESTAMPTZ, "timestamptz"),
            TypeRow(UUID, "uuid"),
        ],
        access_methods=[AccessMethodRow(BTREE, "btree"), AccessMethodRow(GIN, "gin")],
    )
    return cat


@pytest.fixture
def simple(catalog: FakeCatalog) -> FakeCatalog:
    """``CREATE TABLE simple (id uuid not null, name text, t timestamptz)``"""
    catalog.relation(16384, "simple")
    # listed out of order on purpose
    catalog.column(16384, "t", TIMESTAMPTZ, 3)
    catalog.column(16384, "ctid", TID, -1, not_null=True)
    catalog.column(16384, "id", UUID, 1, not_null=True)
    catalog.column(16384, "name", TEXT, 2)
    return catalog


@pytest.fixture
def inherited(catalog: FakeCatalog) -> FakeCatalog:
    """``root`` and ``root_123 () INHERITS (root)``"""
    catalog.relation(16400, "root")
    catalog.relation(16401, "root_123")
    catalog.column(16400, "id", INT4, 1, not_null=True)
    catalog.column(16401, "id", INT4, 1, not_null=True)
    catalog.inherits.append(InheritsRow(16401, 16400, 1))
    return catalog


@pytest.fixture
def indexed(catalog: FakeCatalog) -> FakeCatalog:
    """``indexed(id, name, major, minor)`` with three indexes."""
    catalog.relation(16500, "indexed")
    catalog.column(16500, "id", INT4, 1, not_null=True)
    catalog.column(16500, "name", TEXT, 2)
    catalog.column(16500, "major", INT4, 3)
    catalog.column(16500, "minor", INT4, 4)
    catalog.index(16503, "indexed_name_key", 16500, [2], unique=True)
    catalog.index(16502, "indexed_major_minor_idx", 16500, [3, 4])
    catalog.index(16501, "indexed_lower_minor_idx", 16500, [0, 4])
    # index rows carry pg_attribute entries too
    catalog.column(16503, "name", TEXT, 1)
    return catalog
