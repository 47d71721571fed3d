from datetime import date, datetime, time
from decimal import Decimal

import pytest

from mcp_server_rawsql.errors import ExecutionFailed, ResultReadFailed
from mcp_server_rawsql.executor import (
    SUCCESS_MESSAGE,
    execute_read,
    execute_statement,
    format_rows,
    render_value,
)


class StubRows:
    """In-memory ResultRows; ``fail_at`` raises while yielding that row index."""

    def __init__(self, columns, rows, fail_at=None, fail_columns=False):
        self._columns = columns
        self._rows = rows
        self._fail_at = fail_at
        self._fail_columns = fail_columns
        self.closed = False

    def columns(self):
        if self._fail_columns:
            raise RuntimeError("no description available")
        return list(self._columns)

    def __iter__(self):
        for i, row in enumerate(self._rows):
            if i == self._fail_at:
                raise RuntimeError("connection reset while fetching")
            yield row

    def close(self):
        self.closed = True


class StubDatabase:

    def __init__(self, rows=None, error=None):
        self.rows = rows
        self.error = error
        self.queries = []
        self.statements = []

    def query(self, sql):
        self.queries.append(sql)
        if self.error:
            raise self.error
        return self.rows

    def execute(self, sql):
        self.statements.append(sql)
        if self.error:
            raise self.error


class TestRenderValue:

    def test_null(self):
        assert render_value(None) == "NULL"

    def test_booleans(self):
        assert render_value(True) == "true"
        assert render_value(False) == "false"

    def test_binary_as_hex(self):
        assert render_value(b"\x00\xffA") == "\\x00ff41"
        assert render_value(bytearray(b"\x01")) == "\\x01"
        assert render_value(memoryview(b"\x0a")) == "\\x0a"

    def test_temporal_iso_format(self):
        assert render_value(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"
        assert render_value(date(2024, 1, 2)) == "2024-01-02"
        assert render_value(time(13, 30)) == "13:30:00"

    def test_other_values_use_str(self):
        assert render_value(1) == "1"
        assert render_value(1.5) == "1.5"
        assert render_value(Decimal("9.99")) == "9.99"
        assert render_value("text") == "text"
        assert render_value([1, 2]) == "[1, 2]"

    def test_nested_values_render_recursively(self):
        assert render_value([1, None]) == "[1, NULL]"
        assert render_value({"a": None, "b": [True, b"\x01"]}) == "{a: NULL, b: [true, \\x01]}"
        assert render_value([date(2024, 1, 2)]) == "[2024-01-02]"


class TestFormatRows:

    def test_two_rows(self):
        output = format_rows(["id", "name"], [(1, "a"), (2, "b")])
        assert output == "id: 1\tname: a\t\nid: 2\tname: b\t\n"

    def test_no_rows(self):
        assert format_rows(["id"], []) == ""

    def test_null_value_in_row(self):
        assert format_rows(["id", "note"], [(7, None)]) == "id: 7\tnote: NULL\t\n"


class TestExecuteRead:

    def test_formats_rows_in_driver_order(self):
        rows = StubRows(["id", "name"], [(2, "b"), (1, "a")])
        db = StubDatabase(rows=rows)

        output = execute_read(db, "SELECT id, name FROM t")

        assert output == "id: 2\tname: b\t\nid: 1\tname: a\t\n"
        assert db.queries == ["SELECT id, name FROM t"]
        assert rows.closed is True

    def test_query_is_forwarded_unmodified(self):
        db = StubDatabase(rows=StubRows(["x"], []))
        execute_read(db, "  select 1 as x  ")
        assert db.queries == ["  select 1 as x  "]

    def test_zero_rows_is_empty_string(self):
        rows = StubRows(["id", "name"], [])
        assert execute_read(StubDatabase(rows=rows), "SELECT * FROM t WHERE false") == ""
        assert rows.closed is True

    def test_query_error_is_wrapped(self):
        cause = RuntimeError('Catalog Error: Table with name missing does not exist!')
        db = StubDatabase(error=cause)

        with pytest.raises(ExecutionFailed) as excinfo:
            execute_read(db, "SELECT * FROM missing")

        assert str(excinfo.value) == f"query failed: {cause}"
        assert excinfo.value.phase == "query"
        assert excinfo.value.__cause__ is cause

    def test_row_failure_discards_partial_output(self):
        rows = StubRows(["id"], [(1,), (2,), (3,)], fail_at=2)

        with pytest.raises(ResultReadFailed, match="connection reset while fetching") as excinfo:
            execute_read(StubDatabase(rows=rows), "SELECT id FROM t")

        assert "id: 1" not in str(excinfo.value)
        assert rows.closed is True

    def test_column_failure(self):
        rows = StubRows(["id"], [(1,)], fail_columns=True)

        with pytest.raises(ResultReadFailed, match="reading results failed: no description available"):
            execute_read(StubDatabase(rows=rows), "SELECT id FROM t")
        assert rows.closed is True


class TestExecuteStatement:

    def test_success_marker(self):
        db = StubDatabase()
        assert execute_statement(db, "CREATE TABLE t (id INT)") == SUCCESS_MESSAGE
        assert SUCCESS_MESSAGE == "Query executed successfully."
        assert db.statements == ["CREATE TABLE t (id INT)"]

    def test_failure_preserves_driver_message(self):
        cause = RuntimeError('Constraint Error: Duplicate key "id: 1" violates primary key constraint.')
        db = StubDatabase(error=cause)

        with pytest.raises(ExecutionFailed) as excinfo:
            execute_statement(db, "INSERT INTO t VALUES (1)")

        message = str(excinfo.value)
        assert message.startswith("execution failed: ")
        assert 'Duplicate key "id: 1"' in message
        assert SUCCESS_MESSAGE not in message
        assert excinfo.value.__cause__ is cause
