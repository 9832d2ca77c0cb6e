"""Catalog resolution engine for schemaspy.

This module turns the flat, OID-keyed row sets of `schemaspy.catalog` into a
cross-referenced `Schema`:

* Resolves the requested namespace name to its OID.
* Classifies pg_class rows into tables, views and materialized views.
* Links inheritance edges in both directions.
* Attaches columns with their resolved type names.
* Resolves index key positions into column names and attaches each index to
  the relation it is defined on.

A pass works on a private `SchemaBuilder` and hands out a frozen `Schema` at
the end, so concurrent passes never share state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Tuple, Union

from rich.logging import RichHandler
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from schemaspy.catalog import AttributeRow, CatalogReader, CatalogSource, NamespaceRow
from schemaspy.connection import DEFAULT_SCHEMA, PgConnection, create_catalog_engine
from schemaspy.errors import NamespaceNotFoundError, TransactionError, UnresolvedTypeError
from schemaspy.model import (
    EXPRESSION,
    UNKNOWN_COLUMN,
    Column,
    Index,
    Relation,
    RelationKind,
    Schema,
)
from schemaspy.oids import OidIndex

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
logger.addHandler(RichHandler(markup=True))

_TRACKED_KINDS = (
    RelationKind.TABLE,
    RelationKind.VIEW,
    RelationKind.MATERIALIZED_VIEW,
)


def resolve_namespace(rows: Iterable[NamespaceRow], name: str) -> NamespaceRow:
    """Return the namespace called *name* ("" means the default one)."""
    wanted = name or DEFAULT_SCHEMA
    for row in rows:
        if row.name == wanted:
            return row
    raise NamespaceNotFoundError(wanted)


@dataclass
class _RelationDraft:
    name: str
    kind: RelationKind
    columns: Dict[str, Column] = field(default_factory=dict)
    inherits: List[Tuple[int, str]] = field(default_factory=list)  # (seq_no, parent)
    children: List[str] = field(default_factory=list)
    indexes: List[str] = field(default_factory=list)

    def freeze(self) -> Relation:
        columns = MappingProxyType(dict(sorted(self.columns.items(), key=lambda item: item[1].position)))
        return Relation(
            name=self.name,
            kind=self.kind,
            columns=columns,
            inherits=tuple(parent for _, parent in sorted(self.inherits)),
            children=tuple(sorted(self.children)),
            indexes=tuple(self.indexes),
        )


class SchemaBuilder:
    """Mutable state of a single resolution pass.

    The steps must run in order: `classify`, `link_inheritance`,
    `attach_columns`, `resolve_indexes`, then `freeze`.
    """

    def __init__(self, name: str, oids: OidIndex) -> None:
        self._name = name
        self._oids = oids
        self._relations: Dict[str, _RelationDraft] = {}
        self._by_kind: Dict[RelationKind, List[str]] = {kind: [] for kind in _TRACKED_KINDS}
        self._indexes: Dict[str, Index] = {}

    # ------------------------------------------------------------------
    # passes
    # ------------------------------------------------------------------

    def classify(self) -> None:
        """Seed one empty relation per table, view and materialized view."""
        for row in self._oids.relations.values():
            kind = RelationKind.from_code(row.kind_code)
            if kind not in _TRACKED_KINDS:
                continue
            self._relations[row.name] = _RelationDraft(row.name, kind)
            self._by_kind[kind].append(row.name)
        for names in self._by_kind.values():
            names.sort()

    def link_inheritance(self) -> None:
        for edge in self._oids.inherits:
            child = self._tracked(self._oids.relation_name(edge.child_oid))
            parent = self._tracked(self._oids.relation_name(edge.parent_oid))
            if child is None or parent is None:
                logger.debug("skipping inherits edge %d -> %d", edge.child_oid, edge.parent_oid)
                continue
            child.inherits.append((edge.seq_no, parent.name))
            parent.children.append(child.name)

    def attach_columns(self, attributes: Iterable[AttributeRow]) -> None:
        for attr in attributes:
            if attr.position < 0:
                # system column
                continue
            owner = self._tracked(self._oids.relation_name(attr.owner_oid))
            if owner is None:
                continue
            type_name = self._oids.type_name(attr.type_oid)
            if type_name is None:
                raise UnresolvedTypeError(attr.type_oid, f"{owner.name}.{attr.name}")
            owner.columns[attr.name] = Column(
                type=type_name,
                not_null=attr.not_null,
                position=attr.position,
            )

    def resolve_indexes(self) -> None:
        for oid, row in self._oids.relations.items():
            if RelationKind.from_code(row.kind_code) is not RelationKind.INDEX:
                continue
            facts = self._oids.indexes.get(oid)
            if facts is None:
                logger.debug("no pg_index row for index %s", row.name)
                continue
            owner_name = self._oids.relation_name(facts.owner_oid)
            if owner_name is None:
                # owner lives outside the namespace; keep the index unattached
                logger.debug("index %s is defined on a relation outside the namespace", row.name)
            owner = self._tracked(owner_name)
            by_position = {}
            if owner is not None:
                by_position = {col.position: name for name, col in owner.columns.items()}

            columns = []
            for key in facts.key_positions:
                if key == 0:
                    columns.append(EXPRESSION)
                else:
                    columns.append(by_position.get(key, UNKNOWN_COLUMN))

            access_method = self._oids.access_method_name(row.access_method_oid)
            if access_method is None:
                logger.debug("index %s has unknown access method %d", row.name, row.access_method_oid)
                access_method = ""

            self._indexes[row.name] = Index(
                relation=owner_name or "",
                access_method=access_method,
                unique=facts.is_unique,
                primary=facts.is_primary,
                columns=tuple(columns),
            )
            if owner is not None:
                owner.indexes.append(row.name)
                owner.indexes.sort()

    def freeze(self) -> Schema:
        return Schema(
            name=self._name,
            relations=MappingProxyType({name: self._relations[name].freeze() for name in sorted(self._relations)}),
            tables=tuple(self._by_kind[RelationKind.TABLE]),
            views=tuple(self._by_kind[RelationKind.VIEW]),
            materialized=tuple(self._by_kind[RelationKind.MATERIALIZED_VIEW]),
            indexes=MappingProxyType({name: self._indexes[name] for name in sorted(self._indexes)}),
        )

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------

    def _tracked(self, name: str | None) -> _RelationDraft | None:
        if name is None:
            return None
        return self._relations.get(name)


# ----------------------------------------------------------------------
# public API
# ----------------------------------------------------------------------


def resolve_catalog(source: CatalogSource, schema_name: str = "") -> Schema:
    """Build a `Schema` from any catalog source."""
    namespace = resolve_namespace(source.list_namespaces(), schema_name)
    oids = OidIndex.build(
        relations=source.list_relations(namespace.oid),
        types=source.list_types(),
        indexes=source.list_indexes(),
        access_methods=source.list_access_methods(),
        inherits=source.list_inherits(),
    )

    builder = SchemaBuilder(namespace.name, oids)
    builder.classify()
    builder.link_inheritance()
    builder.attach_columns(source.list_attributes())
    builder.resolve_indexes()
    schema = builder.freeze()

    logger.info(
        "[bold cyan]%s[/bold cyan]: %d tables, %d views, %d materialized views, %d indexes",
        schema.name,
        len(schema.tables),
        len(schema.views),
        len(schema.materialized),
        len(schema.indexes),
    )
    return schema


def resolve(connection: Connection, schema_name: str = "") -> Schema:
    """Describe *schema_name* using an open connection.

    All queries run on *connection*; run this inside one transaction to get a
    consistent snapshot (`describe` does that for you).
    """
    return resolve_catalog(CatalogReader(connection), schema_name)


def describe(engine: Engine, schema_name: str = "") -> Schema:
    """Describe *schema_name* inside a read-only, repeatable-read transaction.

    The transaction is always rolled back; nothing is written.
    """
    try:
        conn = engine.connect()
    except SQLAlchemyError as exc:
        raise TransactionError(f"cannot connect: {exc}") from exc

    with conn:
        try:
            conn.execution_options(isolation_level="REPEATABLE READ", postgresql_readonly=True)
            tx = conn.begin()
        except SQLAlchemyError as exc:
            raise TransactionError(f"cannot begin transaction: {exc}") from exc
        try:
            return resolve(conn, schema_name)
        finally:
            tx.rollback()


def public(target: Union[str, PgConnection]) -> Schema:
    """Describe the namespace configured on *target* ("public" for URLs)."""
    schema_name = target.schema_name if isinstance(target, PgConnection) else DEFAULT_SCHEMA
    engine = create_catalog_engine(target)
    try:
        return describe(engine, schema_name)
    finally:
        engine.dispose()
