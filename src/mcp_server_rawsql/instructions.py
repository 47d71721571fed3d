"""
Server instructions for the raw SQL MCP Server.

These instructions are sent to the client during initialization
to provide context about how to use the server's capabilities.
"""

from .policy import MODIFY_POLICY, READ_POLICY, SCHEMA_POLICY
from .tools import ddl_query, execute_query, modify_query

INSTRUCTIONS_BASE = f"""Execute raw SQL against a relational database through three gated tools.

## Available Tools

- `execute_query`: Run a read query. Only {READ_POLICY.describe()} queries are allowed.
- `ddl_query`: Change the schema. Only {SCHEMA_POLICY.describe()} queries are allowed.
- `modify_query`: Change data. Only {MODIFY_POLICY.describe()} queries are allowed.

Each tool takes a single `query` argument holding the raw SQL.

## How Queries Are Gated

- The query is trimmed and uppercased, then its leading keyword is compared with the tool's list.
- The check is textual: it does not parse SQL and does not inspect anything after the first keyword.
- Use the tool that matches the statement; a query sent to the wrong tool is rejected before it reaches the database.
- CTEs (`WITH ...`), `SHOW`, `DESCRIBE` and `EXPLAIN` do not start with SELECT and are rejected by `execute_query`. Rewrite them as plain SELECT statements, e.g. query `information_schema.tables` or `information_schema.columns` to explore the schema.

## Result Format

`execute_query` returns one line per row. Each column is written as `column: value` followed by a tab.
NULL values are written as `NULL`, timestamps and dates in ISO 8601, binary values as `\\x` followed by hex.
Lists render as `[a, b]` and structs or maps as `{{key: value}}`, with the same rules applied to nested values.
A query matching no rows returns an empty result.

`ddl_query` and `modify_query` return `Query executed successfully.` and do not report affected row counts.

## Errors

- A rejected query names the keywords the tool accepts.
- Database errors are returned verbatim, prefixed with `query failed:` or `execution failed:`.
- Nothing is retried and there is no timeout; keep queries selective and add LIMIT to large reads.
"""


def get_instructions(db_type: str = "duckdb", db_path: str = ":memory:") -> str:
    """
    Get server instructions with connection context.

    Args:
        db_type: Resolved database type (duckdb, motherduck or postgres)
        db_path: The database path being used

    Returns:
        Instructions string with context header
    """
    context_lines = []

    if db_type == "postgres":
        context_lines.append(
            "- **Database**: PostgreSQL, attached through DuckDB (write PostgreSQL-compatible SQL)"
        )
    elif db_type == "motherduck":
        context_lines.append("- **Database**: MotherDuck cloud database")
    elif db_path == ":memory:":
        context_lines.append("- **Database**: In-memory DuckDB (data will not persist after session ends)")
    else:
        context_lines.append(f"- **Database**: Local DuckDB file (`{db_path}`)")

    tools = [execute_query.__name__, ddl_query.__name__, modify_query.__name__]
    context_lines.append(f"- **Available tools**: {', '.join(tools)}")

    context = "## Server Configuration\n\n" + "\n".join(context_lines) + "\n\n"
    return context + INSTRUCTIONS_BASE
