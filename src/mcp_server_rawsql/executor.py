"""
Run accepted queries against a Database and turn the outcome into text.

Read results are flattened to one line per row, each column written as
``"<column>: <value>\\t"``. Statements report a fixed confirmation.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Iterable, Sequence

from .database import Database
from .errors import ExecutionFailed, ResultReadFailed

logger = logging.getLogger("mcp_server_rawsql")

SUCCESS_MESSAGE = "Query executed successfully."
NULL_TEXT = "NULL"


def render_value(value: Any) -> str:
    """Render one column value for the tabular text output."""
    if value is None:
        return NULL_TEXT
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(value).hex()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    # DuckDB lists and structs/maps arrive as Python lists and dicts
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_value(v) for v in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{k}: {render_value(v)}" for k, v in value.items()) + "}"
    return str(value)


def format_rows(columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    parts: list[str] = []
    for row in rows:
        for column, value in zip(columns, row):
            parts.append(f"{column}: {render_value(value)}\t")
        parts.append("\n")
    return "".join(parts)


def execute_read(db: Database, query: str) -> str:
    """
    Run a read query and return its rows as tabular text.

    Returns an empty string when the query matches no rows. Raises
    ExecutionFailed if the database rejects the query and ResultReadFailed
    if the columns or rows cannot be read afterwards; no partial output is
    returned in either case.
    """
    try:
        result = db.query(query)
    except Exception as e:
        logger.error(f"Query failed: {e}")
        raise ExecutionFailed("query", e) from e

    try:
        columns = result.columns()
        return format_rows(columns, result)
    except Exception as e:
        logger.error(f"Reading query results failed: {e}")
        raise ResultReadFailed(e) from e
    finally:
        result.close()


def execute_statement(db: Database, query: str) -> str:
    """Run a DDL or DML statement for its side effect."""
    try:
        db.execute(query)
    except Exception as e:
        logger.error(f"Statement execution failed: {e}")
        raise ExecutionFailed("execution", e) from e
    return SUCCESS_MESSAGE
