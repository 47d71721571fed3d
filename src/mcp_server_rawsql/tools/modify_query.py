"""
Modify Query tool - Run INSERT, UPDATE or DELETE statements.
"""

from ..database import Database
from ..executor import execute_statement
from ..policy import MODIFY_POLICY

DESCRIPTION = "Run a DML query (INSERT, UPDATE, DELETE)"
POLICY = MODIFY_POLICY


def modify_query(query: str, db_client: Database) -> str:
    POLICY.check(query)
    return execute_statement(db_client, query)
