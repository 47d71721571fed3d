"""
Errors raised by the SQL tools.

Every failure path of a tool call ends in one of these; the server turns
them into MCP tool errors.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .policy import QueryPolicy


class SQLToolError(ValueError):
    """Base class for errors returned to the calling agent."""


class PolicyRejected(SQLToolError):
    """The query does not start with a keyword the operation allows."""

    def __init__(self, policy: "QueryPolicy", query: str):
        self.policy = policy
        self.query = query
        super().__init__(f"only {policy.describe()} queries are allowed")


class ExecutionFailed(SQLToolError):
    """The database rejected or failed to run the statement."""

    def __init__(self, phase: str, cause: BaseException):
        self.phase = phase
        self.cause = cause
        super().__init__(f"{phase} failed: {cause}")


class ResultReadFailed(SQLToolError):
    """Column metadata or row values could not be read after a successful query."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"reading results failed: {cause}")
