"""
Keyword policies gating the SQL tools.

A policy is a plain textual check on the leading characters of a query.
It is not a SQL parser: the query is trimmed and uppercased, then tested
with ``str.startswith`` against the allowed keywords. There is no word
boundary check, so ``CREATED_AT`` passes a policy that allows ``CREATE``,
and nothing after the first keyword is inspected (``SELECT 1; DROP TABLE t``
passes the read policy).
"""

from dataclasses import dataclass
from typing import Iterable

from .errors import PolicyRejected


def normalize(query: str) -> str:
    return query.strip().upper()


def classify(query: str, allowed_prefixes: Iterable[str]) -> bool:
    """Return True if the normalized query starts with any allowed prefix."""
    normalized = normalize(query)
    return any(normalized.startswith(prefix.upper()) for prefix in allowed_prefixes)


@dataclass(frozen=True)
class QueryPolicy:
    """Named allow-list of leading keywords for one operation class."""

    name: str
    prefixes: tuple[str, ...]

    def allows(self, query: str) -> bool:
        return classify(query, self.prefixes)

    def check(self, query: str) -> None:
        """Raise PolicyRejected unless the query passes this policy."""
        if not self.allows(query):
            raise PolicyRejected(self, query)

    def describe(self) -> str:
        """Human readable keyword list, e.g. ``CREATE, DROP, or ALTER``."""
        if len(self.prefixes) == 1:
            return self.prefixes[0]
        if len(self.prefixes) == 2:
            return " or ".join(self.prefixes)
        return ", ".join(self.prefixes[:-1]) + ", or " + self.prefixes[-1]


READ_POLICY = QueryPolicy("read", ("SELECT",))
SCHEMA_POLICY = QueryPolicy("schema", ("CREATE", "DROP", "ALTER"))
MODIFY_POLICY = QueryPolicy("modify", ("INSERT", "UPDATE", "DELETE"))
