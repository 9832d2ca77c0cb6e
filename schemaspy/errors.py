"""Exceptions raised while describing a PostgreSQL catalog.

Every failure aborts the whole pass; no partial `Schema` is ever returned.
"""
from __future__ import annotations


class SchemaspyError(Exception):
    """Base class for all schemaspy errors."""


class TransactionError(SchemaspyError):
    """The read transaction could not be opened."""


class NamespaceNotFoundError(SchemaspyError):
    """The requested namespace (schema) does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"namespace not found: {name!r}")
        self.name = name


class QueryError(SchemaspyError):
    """A catalog listing query failed."""

    def __init__(self, listing: str, reason: str = "") -> None:
        message = f"listing {listing} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.listing = listing


class UnresolvedTypeError(SchemaspyError):
    """A column refers to a type OID missing from pg_type."""

    def __init__(self, type_oid: int, column: str = "") -> None:
        super().__init__(f"unresolved type oid {type_oid} (column {column!r})")
        self.type_oid = type_oid
        self.column = column
