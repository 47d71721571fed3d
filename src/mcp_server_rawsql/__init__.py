"""
Raw SQL MCP Server - A FastMCP server exposing a database through gated SQL tools.

This module provides the CLI entry point for the MCP server.
"""

import logging

import click

from .configs import SERVER_LOCALHOST, SERVER_VERSION, UVICORN_LOGGING_CONFIG
from .server import create_mcp_server

__version__ = SERVER_VERSION

logger = logging.getLogger("mcp_server_rawsql")
logging.basicConfig(level=logging.INFO, format="[rawsql] %(levelname)s - %(message)s")


@click.command()
@click.option(
    "--port", default=8000, envvar="MCP_PORT", help="Port to listen on for HTTP transport"
)
@click.option(
    "--host", default=SERVER_LOCALHOST, envvar="MCP_HOST", help="Host to bind the MCP server"
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default="stdio",
    envvar="MCP_TRANSPORT",
    help="(Default: `stdio`) Transport type. Use `http` for HTTP Streamable transport.",
)
@click.option(
    "--db-path",
    default=":memory:",
    envvar="MCP_DB_PATH",
    help="(Default: `:memory:`) DuckDB file, `md:` MotherDuck database, or PostgreSQL DSN (`postgresql://...` or `postgres:host=... dbname=...`)",
)
@click.option(
    "--motherduck-token",
    default=None,
    envvar=["motherduck_token", "MOTHERDUCK_TOKEN"],
    help="(Default: env var `motherduck_token` or `MOTHERDUCK_TOKEN`) Access token to use for MotherDuck database connections",
)
@click.option(
    "--home-dir",
    default=None,
    help="Override the home directory for DuckDB (defaults to system HOME)",
)
@click.option(
    "--init-sql",
    default=None,
    envvar="MCP_INIT_SQL",
    help="SQL file path or SQL string to execute on startup for database initialization.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    envvar="MCP_LOG_LEVEL",
    help="(Default: `INFO`) Logging level",
)
def main(
    port: int,
    host: str,
    transport: str,
    db_path: str,
    motherduck_token: str | None,
    home_dir: str | None,
    init_sql: str | None,
    log_level: str,
) -> None:
    """Raw SQL MCP Server - Run SELECT, DDL and DML queries through gated tools."""
    logging.getLogger().setLevel(log_level.upper())

    logger.info("🗄️  Raw SQL MCP Server v" + SERVER_VERSION)
    if init_sql:
        logger.info("Init SQL: configured")

    try:
        mcp = create_mcp_server(
            db_path=db_path,
            motherduck_token=motherduck_token,
            home_dir=home_dir,
            init_sql=init_sql,
        )
    except Exception as e:
        logger.error(f"DB connection failed: {e}")
        raise SystemExit(1) from e

    if transport == "http":
        logger.info("MCP server initialized in \033[32mhttp\033[0m mode")
        logger.info(
            f"Connect to Raw SQL MCP Server at \033[1m\033[36mhttp://{host}:{port}/mcp\033[0m"
        )
        mcp.run(
            transport="http",
            host=host,
            port=port,
            uvicorn_config={"log_config": UVICORN_LOGGING_CONFIG},
        )
    else:
        logger.info("MCP server initialized in \033[32mstdio\033[0m mode")
        logger.info("Waiting for client connection")
        mcp.run(transport="stdio")

    logger.info("Server shutting down...")


__all__ = ["main", "__version__"]

if __name__ == "__main__":
    main()
