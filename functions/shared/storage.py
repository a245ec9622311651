"""Database storage for student rows.

Exposes the two operations the ingestion handler needs as a small
interface so the handler can run against an in-memory double in tests.
"""

from dataclasses import dataclass
from typing import Callable, Protocol

from .db.connection import DatabaseError, get_db_cursor
from .db.models import COLUMN_EXISTS_SQL, MERGE_STUDENT_SQL
from .validation import StudentRow


@dataclass
class UpsertResult:
    """Outcome of one batch upsert."""

    success: bool
    rows_submitted: int
    error_message: str | None = None


class StudentStore(Protocol):
    """Database capability used by the ingestion handler."""

    def check_column_exists(self, table: str, column: str) -> bool:
        """Return True if the column exists; raise DatabaseError on failure."""
        ...

    def upsert_batch(self, rows: list[StudentRow]) -> UpsertResult:
        """Upsert all rows keyed on name; report failure instead of raising."""
        ...


class SqlStudentStore:
    """StudentStore backed by Azure SQL through pyodbc."""

    def __init__(
        self,
        connection_string: str,
        use_managed_identity: bool = False,
        cursor_factory: Callable = get_db_cursor,
    ):
        self.connection_string = connection_string
        self.use_managed_identity = use_managed_identity
        self._cursor_factory = cursor_factory

    def _cursor(self, commit: bool):
        return self._cursor_factory(
            self.connection_string,
            commit=commit,
            use_managed_identity=self.use_managed_identity,
        )

    def check_column_exists(self, table: str, column: str) -> bool:
        """Look the column up in INFORMATION_SCHEMA.

        Raises:
            DatabaseError: If the lookup cannot be executed
        """
        with self._cursor(commit=False) as cursor:
            cursor.execute(COLUMN_EXISTS_SQL, (table, column))
            return cursor.fetchone() is not None

    def upsert_batch(self, rows: list[StudentRow]) -> UpsertResult:
        """Run the MERGE statement once per row in a single transaction.

        Rows are submitted in order over one cursor, so a repeated name ends
        with the roll number of its last occurrence. A failure rolls back the
        whole transaction.

        Args:
            rows: Validated rows

        Returns:
            UpsertResult describing the outcome
        """
        params = [(row.name, row.roll_no) for row in rows]
        try:
            with self._cursor(commit=True) as cursor:
                cursor.fast_executemany = True
                cursor.executemany(MERGE_STUDENT_SQL, params)
        except DatabaseError as e:
            return UpsertResult(
                success=False,
                rows_submitted=len(params),
                error_message=str(e),
            )
        return UpsertResult(success=True, rows_submitted=len(params))
