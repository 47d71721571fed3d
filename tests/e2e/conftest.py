"""
Fixtures for E2E testing of the MCP server.

These tests treat the MCP server as a black box, spinning it up as a
subprocess over stdio and making requests via the FastMCP client.
"""

import os
import sys
from pathlib import Path
from typing import AsyncGenerator

import duckdb
import pytest

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from fastmcp import Client
from fastmcp.client.transports import StdioTransport


def get_mcp_client(*args: str, env: dict | None = None) -> Client:
    """
    Create a FastMCP Client for the MCP server with given arguments.

    Args:
        *args: Command line arguments to pass to the server
        env: Environment variables to set

    Returns:
        Client configured to launch the server via stdio
    """
    # Run the installed package with the interpreter running the tests
    server_args = ["-m", "mcp_server_rawsql"]
    server_args.extend(args)

    full_env = os.environ.copy()
    if env:
        full_env.update(env)

    # keep_alive=False ensures subprocess is terminated when connection closes
    transport = StdioTransport(
        command=sys.executable,
        args=server_args,
        env=full_env,
        keep_alive=False,
    )

    return Client(transport)


def get_result_text(result) -> str:
    """Extract text from a tool call result (CallToolResult)."""
    if result.content and len(result.content) > 0:
        return result.content[0].text
    return ""


@pytest.fixture
def seeded_db_path(tmp_path) -> Path:
    """A local DuckDB file with a small users table."""
    path = tmp_path / "e2e.duckdb"
    conn = duckdb.connect(str(path))
    try:
        conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name VARCHAR, email VARCHAR)")
        conn.execute(
            "INSERT INTO users VALUES "
            "(1, 'Alice', 'alice@example.com'), "
            "(2, 'Bob', NULL), "
            "(3, 'Carol', 'carol@example.com')"
        )
    finally:
        conn.close()
    return path


@pytest.fixture
def postgres_dsn() -> str:
    """Get a PostgreSQL DSN for integration tests from environment."""
    dsn = os.environ.get("RAWSQL_TEST_POSTGRES_DSN")
    if not dsn:
        pytest.skip("RAWSQL_TEST_POSTGRES_DSN not set")
    return dsn


@pytest.fixture
async def memory_client() -> AsyncGenerator[Client, None]:
    """Create a client connected to an in-memory DuckDB."""
    client = get_mcp_client("--db-path", ":memory:")
    async with client:
        yield client


@pytest.fixture
async def local_client(seeded_db_path: Path) -> AsyncGenerator[Client, None]:
    """Create a client connected to a local DuckDB file."""
    client = get_mcp_client("--db-path", str(seeded_db_path))
    async with client:
        yield client


@pytest.fixture
async def postgres_client(postgres_dsn: str) -> AsyncGenerator[Client, None]:
    """Create a client connected to PostgreSQL through the DuckDB postgres extension."""
    client = get_mcp_client("--db-path", postgres_dsn)
    async with client:
        yield client
