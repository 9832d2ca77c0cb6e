"""schemaspy reads the definition of a PostgreSQL namespace.

It never changes anything; it is meant for maintenance and setup scripts
that inspect the current state of a database, draw their conclusions and
apply changes with ``ALTER`` commands themselves.

Typical use::

    import schemaspy

    schema = schemaspy.public("postgresql+psycopg2://user:pw@localhost/db")
    for name in schema.tables:
        print(name, schema.relations[name].column_names())
"""
from __future__ import annotations

from schemaspy.connection import DEFAULT_SCHEMA, PgConnection, create_catalog_engine
from schemaspy.errors import (
    NamespaceNotFoundError,
    QueryError,
    SchemaspyError,
    TransactionError,
    UnresolvedTypeError,
)
from schemaspy.loaders import load_functions, load_sequences
from schemaspy.model import (
    EXPRESSION,
    UNKNOWN_COLUMN,
    Column,
    Function,
    Index,
    Relation,
    RelationKind,
    Schema,
    Sequence,
)
from schemaspy.resolver import describe, public, resolve, resolve_catalog

__all__ = [
    "DEFAULT_SCHEMA",
    "EXPRESSION",
    "UNKNOWN_COLUMN",
    "Column",
    "Function",
    "Index",
    "NamespaceNotFoundError",
    "PgConnection",
    "QueryError",
    "Relation",
    "RelationKind",
    "Schema",
    "SchemaspyError",
    "Sequence",
    "TransactionError",
    "UnresolvedTypeError",
    "create_catalog_engine",
    "describe",
    "load_functions",
    "load_sequences",
    "public",
    "resolve",
    "resolve_catalog",
]
