"""Flat readers for sequences and functions.

These don't take part in graph resolution; each is a single query scoped to
one namespace.
"""
from __future__ import annotations

from typing import Dict

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from schemaspy.connection import DEFAULT_SCHEMA
from schemaspy.errors import QueryError
from schemaspy.model import Function, Sequence

SEQUENCES_SQL = """
    SELECT sequencename, start_value, increment_by, min_value, max_value, cycle
    FROM pg_catalog.pg_sequences
    WHERE schemaname = :schema
"""

FUNCTIONS_SQL = """
    SELECT p.proname,
           pg_catalog.pg_get_function_arguments(p.oid),
           pg_catalog.pg_get_function_result(p.oid),
           l.lanname
    FROM pg_catalog.pg_proc p
    JOIN pg_catalog.pg_namespace n ON n.oid = p.pronamespace
    JOIN pg_catalog.pg_language l ON l.oid = p.prolang
    WHERE n.nspname = :schema
"""


def load_sequences(connection: Connection, schema_name: str = "") -> Dict[str, Sequence]:  # noqa: D401
    """Return the sequences of *schema_name*, keyed by name."""
    try:
        rows = connection.execute(text(SEQUENCES_SQL), {"schema": schema_name or DEFAULT_SCHEMA}).all()
    except SQLAlchemyError as exc:
        raise QueryError("sequences", str(exc)) from exc

    res: Dict[str, Sequence] = {}
    for name, start, increment, min_value, max_value, cycle in sorted(rows, key=lambda r: r[0]):
        res[name] = Sequence(
            start=int(start),
            increment=int(increment),
            min_value=int(min_value),
            max_value=int(max_value),
            cycle=bool(cycle),
        )
    return res


def load_functions(connection: Connection, schema_name: str = "") -> Dict[str, Function]:  # noqa: D401
    """Return the functions of *schema_name*, keyed by ``name(arguments)``.

    Overloads get one entry each since their argument lists differ.
    """
    try:
        rows = connection.execute(text(FUNCTIONS_SQL), {"schema": schema_name or DEFAULT_SCHEMA}).all()
    except SQLAlchemyError as exc:
        raise QueryError("functions", str(exc)) from exc

    functions = [
        Function(name=name, arguments=args or "", result=result or "", language=lang)
        for name, args, result, lang in rows
    ]
    return {f.signature: f for f in sorted(functions, key=lambda f: f.signature)}
