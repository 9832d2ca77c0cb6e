"""Raw reads from the PostgreSQL system catalog.

`CatalogReader` runs one fixed query per pg_catalog table and returns the
rows unordered, keyed by OID exactly as the catalog stores them. It does no
cross-referencing; that is the job of `schemaspy.resolver`.

All queries go through the connection handed in, so running them inside a
single transaction gives a consistent snapshot.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Protocol, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from schemaspy.errors import QueryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamespaceRow:
    oid: int
    name: str


@dataclass(frozen=True)
class RelationRow:
    oid: int
    name: str
    type_oid: int
    access_method_oid: int
    kind_code: str


@dataclass(frozen=True)
class AttributeRow:
    owner_oid: int
    name: str
    type_oid: int
    position: int
    not_null: bool


@dataclass(frozen=True)
class TypeRow:
    oid: int
    name: str


@dataclass(frozen=True)
class InheritsRow:
    child_oid: int
    parent_oid: int
    seq_no: int


@dataclass(frozen=True)
class IndexRow:
    index_oid: int
    owner_oid: int
    is_unique: bool
    is_primary: bool
    key_positions: Tuple[int, ...]


@dataclass(frozen=True)
class AccessMethodRow:
    oid: int
    name: str


class CatalogSource(Protocol):
    """Anything that can list the raw catalog rows."""

    def list_namespaces(self) -> List[NamespaceRow]: ...

    def list_relations(self, namespace_oid: int) -> List[RelationRow]: ...

    def list_attributes(self) -> List[AttributeRow]: ...

    def list_types(self) -> List[TypeRow]: ...

    def list_inherits(self) -> List[InheritsRow]: ...

    def list_indexes(self) -> List[IndexRow]: ...

    def list_access_methods(self) -> List[AccessMethodRow]: ...


# https://www.postgresql.org/docs/current/catalogs.html
NAMESPACES_SQL = """
    SELECT oid, nspname
    FROM pg_catalog.pg_namespace
"""

RELATIONS_SQL = """
    SELECT oid, relname, reltype, relam, relkind
    FROM pg_catalog.pg_class
    WHERE relnamespace = :namespace
"""

ATTRIBUTES_SQL = """
    SELECT attrelid, attname, atttypid, attnum, attnotnull
    FROM pg_catalog.pg_attribute
    WHERE NOT attisdropped
"""

TYPES_SQL = """
    SELECT oid, typname
    FROM pg_catalog.pg_type
"""

INHERITS_SQL = """
    SELECT inhrelid, inhparent, inhseqno
    FROM pg_catalog.pg_inherits
"""

# indkey is an int2vector; slicing it turns it into a regular array
INDEXES_SQL = """
    SELECT indexrelid, indrelid, indisunique, indisprimary,
           indkey[0:array_length(indkey, 1)]::int4[]
    FROM pg_catalog.pg_index
"""

ACCESS_METHODS_SQL = """
    SELECT oid, amname
    FROM pg_catalog.pg_am
"""


class CatalogReader:
    """Read pg_catalog through a SQLAlchemy connection."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------

    def list_namespaces(self) -> List[NamespaceRow]:
        return [NamespaceRow(int(oid), name) for oid, name in self._fetch("namespaces", NAMESPACES_SQL)]

    def list_relations(self, namespace_oid: int) -> List[RelationRow]:
        rows = self._fetch("relations", RELATIONS_SQL, namespace=namespace_oid)
        return [
            RelationRow(int(oid), name, int(type_oid), int(am_oid), kind)
            for oid, name, type_oid, am_oid, kind in rows
        ]

    def list_attributes(self) -> List[AttributeRow]:
        rows = self._fetch("attributes", ATTRIBUTES_SQL)
        return [
            AttributeRow(int(owner), name, int(type_oid), int(num), bool(not_null))
            for owner, name, type_oid, num, not_null in rows
        ]

    def list_types(self) -> List[TypeRow]:
        return [TypeRow(int(oid), name) for oid, name in self._fetch("types", TYPES_SQL)]

    def list_inherits(self) -> List[InheritsRow]:
        rows = self._fetch("inherits", INHERITS_SQL)
        return [InheritsRow(int(child), int(parent), int(seq)) for child, parent, seq in rows]

    def list_indexes(self) -> List[IndexRow]:
        rows = self._fetch("indexes", INDEXES_SQL)
        return [
            IndexRow(int(index_oid), int(owner), bool(unique), bool(primary), tuple(int(k) for k in keys or ()))
            for index_oid, owner, unique, primary, keys in rows
        ]

    def list_access_methods(self) -> List[AccessMethodRow]:
        return [AccessMethodRow(int(oid), name) for oid, name in self._fetch("access methods", ACCESS_METHODS_SQL)]

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------

    def _fetch(self, listing: str, sql: str, **params: Any) -> List[Any]:
        try:
            rows = self._conn.execute(text(sql), params).all()
        except SQLAlchemyError as exc:
            raise QueryError(listing, str(exc)) from exc
        logger.debug("%s: %d rows", listing, len(rows))
        return rows
