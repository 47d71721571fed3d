"""
DDL Query tool - Run CREATE, DROP or ALTER statements.
"""

from ..database import Database
from ..executor import execute_statement
from ..policy import SCHEMA_POLICY

DESCRIPTION = "Run a DDL query (CREATE, DROP, ALTER)"
POLICY = SCHEMA_POLICY


def ddl_query(query: str, db_client: Database) -> str:
    """Execute a schema statement and return a confirmation."""
    POLICY.check(query)
    return execute_statement(db_client, query)
