import logging
from typing import Annotated, Callable

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field

from .configs import SERVER_NAME
from .database import Database, DatabaseClient
from .errors import PolicyRejected, SQLToolError
from .instructions import get_instructions
from .tools import ddl_query as ddl_tool
from .tools import execute_query as execute_tool
from .tools import modify_query as modify_tool
from .tools.ddl_query import DESCRIPTION as DDL_DESCRIPTION
from .tools.execute_query import DESCRIPTION as EXECUTE_DESCRIPTION
from .tools.modify_query import DESCRIPTION as MODIFY_DESCRIPTION

logger = logging.getLogger("mcp_server_rawsql")

QueryArg = Annotated[str, Field(description="Raw SQL query to execute")]


def _run_tool(
    name: str, handler: Callable[[str, Database], str], query: str, db_client: Database
) -> str:
    """Invoke a tool handler and map its errors to MCP tool errors."""
    logger.info(f"Calling tool: {name}")
    try:
        return handler(query, db_client)
    except PolicyRejected as e:
        logger.warning(f"Tool {name} rejected query: {e}")
        raise ToolError(str(e)) from e
    except SQLToolError as e:
        raise ToolError(str(e)) from e
    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}")
        raise ToolError(f"Error executing tool {name}: {e}") from e


def register_tools(mcp: FastMCP, db_client: Database) -> None:
    """Register the three SQL tools on ``mcp``, bound to ``db_client``."""

    @mcp.tool(
        name="execute_query",
        description=EXECUTE_DESCRIPTION,
        annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False),
    )
    def execute_query(query: QueryArg) -> str:
        return _run_tool("execute_query", execute_tool, query, db_client)

    @mcp.tool(
        name="ddl_query",
        description=DDL_DESCRIPTION,
        annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True),
    )
    def ddl_query(query: QueryArg) -> str:
        return _run_tool("ddl_query", ddl_tool, query, db_client)

    @mcp.tool(
        name="modify_query",
        description=MODIFY_DESCRIPTION,
        annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True),
    )
    def modify_query(query: QueryArg) -> str:
        return _run_tool("modify_query", modify_tool, query, db_client)


def build_server(
    db_client: Database, db_type: str = "duckdb", db_path: str = ":memory:"
) -> FastMCP:
    """Create the FastMCP server around an existing database capability."""
    mcp = FastMCP(SERVER_NAME, instructions=get_instructions(db_type=db_type, db_path=db_path))
    logger.info("Registering tools")
    register_tools(mcp, db_client)
    return mcp


def create_mcp_server(
    db_path: str = ":memory:",
    motherduck_token: str | None = None,
    home_dir: str | None = None,
    init_sql: str | None = None,
) -> FastMCP:
    """Open the database described by ``db_path`` and build the server for it."""
    logger.info("Starting raw SQL MCP Server")
    db_client = DatabaseClient(
        db_path=db_path,
        motherduck_token=motherduck_token,
        home_dir=home_dir,
        init_sql=init_sql,
    )
    return build_server(db_client, db_type=db_client.db_type, db_path=db_path)
