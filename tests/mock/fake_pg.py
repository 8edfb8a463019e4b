"""In-process stand-in for a psycopg2 connection.

Records every executed statement with its parameters and replays queued
result rows, so the document store can be tested without a database.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import psycopg2


class FakeCursor:
    def __init__(self, connection: "FakeConnection", name: Optional[str] = None) -> None:
        self.connection = connection
        self.name = name
        self.itersize = 2000
        self.rowcount = -1
        self.closed = False
        self._rows: List[Dict[str, Any]] = []

    def execute(self, sql: str, params: Optional[Dict[str, Any]] = None) -> None:
        self.connection.statements.append((sql, params))
        for fragment, error in self.connection.failures:
            if fragment in sql:
                raise error
        self._rows = list(self.connection.results.pop(0)) if self.connection.results else []
        self.rowcount = len(self._rows) if self._rows else self.connection.rowcount

    def fetchall(self) -> List[Dict[str, Any]]:
        rows, self._rows = self._rows, []
        return rows

    def fetchone(self) -> Optional[Dict[str, Any]]:
        return self._rows.pop(0) if self._rows else None

    def __iter__(self):
        while self._rows:
            yield self._rows.pop(0)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    """Fake psycopg2 connection.

    - `queue(rows)` sets the rows returned by the next executed statement.
    - `fail_on(fragment)` makes any statement containing `fragment` raise.
    """

    def __init__(self) -> None:
        self.statements: List[Tuple[str, Optional[Dict[str, Any]]]] = []
        self.results: List[List[Dict[str, Any]]] = []
        self.failures: List[Tuple[str, Exception]] = []
        self.cursors: List[FakeCursor] = []
        self.rowcount = 0
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self, name: Optional[str] = None, cursor_factory: Any = None) -> FakeCursor:
        cursor = FakeCursor(self, name)
        self.cursors.append(cursor)
        return cursor

    def queue(self, *rows: Dict[str, Any]) -> None:
        self.results.append(list(rows))

    def fail_on(self, fragment: str, error: Exception | None = None) -> None:
        self.failures.append((fragment, error or psycopg2.IntegrityError("duplicate key value")))

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1

    def close(self) -> None:
        self.closed = True

    @property
    def sql(self) -> List[str]:
        return [sql for sql, _ in self.statements]

    @property
    def last(self) -> Tuple[str, Optional[Dict[str, Any]]]:
        return self.statements[-1]

    @property
    def named_cursors(self) -> List[FakeCursor]:
        return [c for c in self.cursors if c.name is not None]
