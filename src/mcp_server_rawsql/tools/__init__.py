"""
MCP Tools for the raw SQL server.

Each tool is defined in its own module and exported here.
"""

from .ddl_query import ddl_query
from .execute_query import execute_query
from .modify_query import modify_query

__all__ = [
    "execute_query",
    "ddl_query",
    "modify_query",
]
