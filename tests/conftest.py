"""Shared test fixtures."""

from contextlib import contextmanager
from typing import Any

import pytest

from shared.config import IngestConfig
from shared.db.connection import DatabaseError
from shared.logging_utils import StructuredLogger
from shared.storage import UpsertResult
from shared.validation import StudentRow


class RecordingLogger(StructuredLogger):
    """StructuredLogger that keeps entries in memory instead of emitting them."""

    def __init__(self):
        super().__init__()
        self.records: list[dict[str, Any]] = []

    def _emit(self, level, step, message, duration_ms=None, **kwargs):
        record = {"level": level, "step": step, "message": message, **self._context, **kwargs}
        if duration_ms is not None:
            record["duration_ms"] = duration_ms
        self.records.append(record)

    def levels(self) -> list[str]:
        return [r["level"] for r in self.records]

    def messages(self, level: str) -> list[str]:
        return [r["message"] for r in self.records if r["level"] == level]


class InMemoryStudentStore:
    """StudentStore double applying upsert-on-Name to a dict."""

    def __init__(self, columns=("Name", "roll_no"), schema_error=None, upsert_error=None):
        self.columns = set(columns)
        self.schema_error = schema_error
        self.upsert_error = upsert_error
        self.students: dict[str, int] = {}
        self.upsert_calls: list[list[StudentRow]] = []
        self.schema_checks: list[tuple[str, str]] = []

    def check_column_exists(self, table: str, column: str) -> bool:
        self.schema_checks.append((table, column))
        if self.schema_error:
            raise DatabaseError(self.schema_error)
        return table == "Students" and column in self.columns

    def upsert_batch(self, rows):
        self.upsert_calls.append(list(rows))
        if self.upsert_error:
            return UpsertResult(success=False, rows_submitted=len(rows), error_message=self.upsert_error)
        for row in rows:
            self.students[row.name] = row.roll_no
        return UpsertResult(success=True, rows_submitted=len(rows))


class FakeCursor:
    """Minimal pyodbc cursor stand-in."""

    def __init__(self, fetchone_results=None, error=None):
        self.fetchone_results = list(fetchone_results or [])
        self.error = error
        self.executed: list[tuple[str, Any]] = []
        self.fast_executemany = False

    def execute(self, sql, params=None):
        if self.error:
            raise self.error
        self.executed.append((sql, params))

    def executemany(self, sql, params):
        if self.error:
            raise self.error
        self.executed.append((sql, params))

    def fetchone(self):
        return self.fetchone_results.pop(0) if self.fetchone_results else None


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def store():
    return InMemoryStudentStore()


@pytest.fixture
def make_store():
    return InMemoryStudentStore


@pytest.fixture
def config():
    return IngestConfig(sql_connection_string="Driver={ODBC Driver 18 for SQL Server};Server=tcp:test,1433;")


@pytest.fixture
def cursor_factory():
    """Factory returning a fake cursor context manager; inspect .calls and .cursor."""

    class Factory:
        def __init__(self):
            self.cursor = FakeCursor()
            self.calls: list[dict[str, Any]] = []

        @contextmanager
        def __call__(self, connection_string, commit=True, use_managed_identity=False):
            self.calls.append(
                {
                    "connection_string": connection_string,
                    "commit": commit,
                    "use_managed_identity": use_managed_identity,
                }
            )
            try:
                yield self.cursor
            except DatabaseError:
                raise
            except Exception as e:
                raise DatabaseError(str(e)) from e

    return Factory()
