"""Row and schema validation.

Rows that cannot become a StudentRow are skipped with a warning; a missing
target column aborts the whole invocation.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .db.connection import DatabaseError
from .db.models import ROLL_NO_MAX, ROLL_NO_MIN
from .logging_utils import StructuredLogger

if TYPE_CHECKING:
    from .storage import StudentStore


class ProcessingStatus(Enum):
    """Invocation states; every failure moves to ABORTED."""

    DECODED = "DECODED"
    PARSED = "PARSED"
    VALIDATED = "VALIDATED"
    WRITTEN = "WRITTEN"
    ABORTED = "ABORTED"


# Optional sign followed by decimal digits (any script)
_INTEGER_PATTERN = re.compile(r"[+-]?\d+")

# Trimmed from both ends of a field: control characters and space only
_TRIM_CHARS = "".join(chr(c) for c in range(0x21))

MIN_FIELDS_PER_ROW = 2


@dataclass(frozen=True)
class StudentRow:
    """A CSV row that is ready to upsert."""

    name: str
    roll_no: int


@dataclass
class RowValidationResult:
    """Result of validating one CSV row."""

    row: StudentRow | None = None
    error_message: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.row is not None


def trim_field(value: str) -> str:
    """Trim control characters and spaces, leaving other whitespace such as NBSP."""
    return value.strip(_TRIM_CHARS)


def parse_roll_no(value: str) -> int:
    """Parse a roll number the way a strict 32-bit integer parser would.

    Raises:
        ValueError: If the value is not a plain integer or is out of INT range
    """
    text = trim_field(value)
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer: {value!r}")
    number = int(text)
    if not ROLL_NO_MIN <= number <= ROLL_NO_MAX:
        raise ValueError(f"integer out of range: {value!r}")
    return number


def validate_row(fields: list[str]) -> RowValidationResult:
    """Convert CSV fields to a StudentRow.

    Args:
        fields: Fields of one CSV line

    Returns:
        RowValidationResult with the row, or an error message if invalid
    """
    if len(fields) < MIN_FIELDS_PER_ROW:
        return RowValidationResult(error_message=f"Skipping invalid row: {fields}")

    try:
        roll_no = parse_roll_no(fields[1])
    except ValueError:
        return RowValidationResult(
            error_message=f"Skipping row with invalid number: {fields}",
        )

    return RowValidationResult(row=StudentRow(name=trim_field(fields[0]), roll_no=roll_no))


def build_batch(rows: list[list[str]], logger: StructuredLogger) -> list[StudentRow]:
    """Validate parsed rows, logging and skipping the invalid ones.

    Rows keep their input order, so a name that appears twice is written
    twice and the later roll number wins.

    Args:
        rows: Parsed CSV rows (header already removed)
        logger: Structured logger

    Returns:
        Valid rows in input order
    """
    batch: list[StudentRow] = []
    for index, fields in enumerate(rows, start=1):
        result = validate_row(fields)
        if result.row is None:
            logger.warning("validate", result.error_message, row_index=index, fields=fields)
            continue
        batch.append(result.row)
    return batch


def check_required_column(
    store: "StudentStore",
    table: str,
    column: str,
    logger: StructuredLogger,
) -> bool:
    """Check the target table has the column this function writes.

    A failed lookup counts as "column missing" so nothing is written.

    Args:
        store: Database capability
        table: Target table name
        column: Column that must exist
        logger: Structured logger

    Returns:
        True if the column exists
    """
    try:
        return store.check_column_exists(table, column)
    except DatabaseError as e:
        logger.error(
            "validate",
            f"Failed to validate column name: {e!s}",
            table=table,
            column=column,
        )
        return False
