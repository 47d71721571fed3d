"""
Execute Query tool - Run a raw SELECT and return its rows as tabular text.
"""

from ..database import Database
from ..executor import execute_read
from ..policy import READ_POLICY

DESCRIPTION = "Execute raw SQL SELECT"
POLICY = READ_POLICY


def execute_query(query: str, db_client: Database) -> str:
    """
    Execute a SELECT query.

    Args:
        query: Raw SQL query; must start with SELECT
        db_client: Database capability (injected by server)

    Returns:
        One line per row of ``"column: value\\t"`` tokens, empty if no rows
    """
    POLICY.check(query)
    return execute_read(db_client, query)
