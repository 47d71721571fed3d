import logging
import os
from typing import Any, Iterator, Literal, Protocol, Sequence

import duckdb

from .configs import SERVER_VERSION

logger = logging.getLogger("mcp_server_rawsql")

DBType = Literal["duckdb", "motherduck", "postgres"]

POSTGRES_ALIAS = "pg"
FETCH_BATCH_SIZE = 1024


class ResultRows(Protocol):
    """Rows produced by a read query, consumed once and then closed."""

    def columns(self) -> list[str]: ...

    def __iter__(self) -> Iterator[Sequence[Any]]: ...

    def close(self) -> None: ...


class Database(Protocol):
    """The two database capabilities the SQL tools rely on."""

    def query(self, sql: str) -> ResultRows: ...

    def execute(self, sql: str) -> None: ...


class DuckDBRows:
    """ResultRows over a DuckDB cursor that owns its connection."""

    def __init__(self, cursor: duckdb.DuckDBPyConnection):
        self._cursor = cursor

    def columns(self) -> list[str]:
        description = self._cursor.description
        return [d[0] for d in description] if description else []

    def __iter__(self) -> Iterator[Sequence[Any]]:
        while True:
            batch = self._cursor.fetchmany(FETCH_BATCH_SIZE)
            if not batch:
                return
            yield from batch

    def close(self) -> None:
        self._cursor.close()


class DatabaseClient:
    """
    DuckDB implementation of the Database capability.

    One long-lived connection holds the database instance (and any attached
    PostgreSQL catalog). Every query or statement runs on its own cursor so
    concurrent tool calls never share connection state.
    """

    def __init__(
        self,
        db_path: str = ":memory:",
        motherduck_token: str | None = None,
        home_dir: str | None = None,
        init_sql: str | None = None,
    ):
        self._init_sql = init_sql
        self.db_path, self.db_type = self._resolve_db_path_type(db_path, motherduck_token)
        logger.info(f"Database client initialized in `{self.db_type}` mode")

        # Set the home directory for DuckDB
        if home_dir:
            os.environ["HOME"] = home_dir

        self.conn = self._initialize_connection()

    def _initialize_connection(self) -> duckdb.DuckDBPyConnection:
        """Initialize connection to the DuckDB, MotherDuck or PostgreSQL database"""
        logger.info(f"🔌 Connecting to {self.db_type} database")

        if self.db_type == "postgres":
            # DuckDB acts as the driver, PostgreSQL is attached as a catalog
            conn = duckdb.connect(
                ":memory:",
                config={"custom_user_agent": f"mcp-server-rawsql/{SERVER_VERSION}"},
            )
            try:
                conn.execute("INSTALL postgres;")
                conn.execute("LOAD postgres;")
                conn.execute(
                    f"ATTACH '{_escape_literal(self.db_path)}' AS {POSTGRES_ALIAS} (TYPE POSTGRES);"
                )
                conn.execute(f"USE {POSTGRES_ALIAS};")
            except Exception as e:
                logger.error(f"Failed to attach PostgreSQL database: {e}")
                conn.close()
                raise ValueError(f"PostgreSQL connection failed: {e}") from e
        else:
            conn = duckdb.connect(
                self.db_path,
                config={"custom_user_agent": f"mcp-server-rawsql/{SERVER_VERSION}"},
            )

        logger.info(f"✅ Successfully connected to {self.db_type} database")

        self._execute_init_sql(conn)
        return conn

    def _execute_init_sql(self, conn: duckdb.DuckDBPyConnection) -> None:
        """Execute initialization SQL if provided."""
        if not self._init_sql:
            return

        try:
            # Check if init_sql is a file path
            if os.path.isfile(self._init_sql):
                logger.info(f"Loading init SQL from file: {self._init_sql}")
                with open(self._init_sql) as f:
                    sql_content = f.read()
            else:
                logger.info("Executing init SQL string")
                sql_content = self._init_sql

            conn.execute(sql_content)
            logger.info("Init SQL executed successfully")

        except Exception as e:
            logger.error(f"Failed to execute init SQL: {e}")
            raise ValueError(f"Init SQL execution failed: {e}") from e

    def _resolve_db_path_type(
        self, db_path: str, motherduck_token: str | None = None
    ) -> tuple[str, DBType]:
        """Resolve and validate the database path"""
        # Handle PostgreSQL DSNs, either URIs or `postgres:` + libpq key/value string
        if db_path.startswith(("postgresql://", "postgres://")):
            return db_path, "postgres"
        if db_path.startswith("postgres:"):
            return db_path[len("postgres:"):].strip(), "postgres"

        # Handle MotherDuck paths
        if db_path.startswith("md:"):
            if motherduck_token:
                logger.info("Using MotherDuck token to connect to database `md:`")
                return f"{db_path}?motherduck_token={motherduck_token}", "motherduck"
            elif os.getenv("motherduck_token"):
                logger.info("Using MotherDuck token from env to connect to database `md:`")
                return (
                    f"{db_path}?motherduck_token={os.getenv('motherduck_token')}",
                    "motherduck",
                )
            else:
                raise ValueError(
                    "Please set the `motherduck_token` as an environment variable or pass it as an argument with `--motherduck-token` when using `md:` as db_path."
                )

        return db_path, "duckdb"

    def _cursor(self) -> duckdb.DuckDBPyConnection:
        cursor = self.conn.cursor()
        if self.db_type == "postgres":
            # The default catalog is per connection, cursors start on `memory`
            try:
                cursor.execute(f"USE {POSTGRES_ALIAS};")
            except Exception:
                cursor.close()
                raise
        return cursor

    def query(self, sql: str) -> DuckDBRows:
        """Run a query and return its rows; the caller closes the result."""
        cursor = self._cursor()
        try:
            cursor.execute(sql)
        except Exception:
            cursor.close()
            raise
        return DuckDBRows(cursor)

    def execute(self, sql: str) -> None:
        """Run a statement for its side effect."""
        cursor = self._cursor()
        try:
            cursor.execute(sql)
        finally:
            cursor.close()

    def close(self) -> None:
        """Close the underlying connection"""
        try:
            self.conn.close()
            logger.info("Database connection closed")
        except Exception as e:
            logger.error(f"Error closing database connection: {e}")


def _escape_literal(value: str) -> str:
    return value.replace("'", "''")
