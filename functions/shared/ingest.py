"""CSV blob ingestion handler.

Decode → parse → check schema → upsert. Each step either advances the
ProcessingStatus or ends the invocation in ABORTED with a log entry;
nothing is raised to the caller.
"""

from dataclasses import dataclass

from .config import IngestConfig
from .db.models import REQUIRED_COLUMN, STUDENTS_TABLE
from .logging_utils import StructuredLogger
from .parser import decode_content, parse_csv
from .storage import StudentStore
from .validation import ProcessingStatus, build_batch, check_required_column


@dataclass
class IngestResult:
    """Summary of one invocation."""

    filename: str
    status: ProcessingStatus
    rows_parsed: int = 0
    rows_skipped: int = 0
    rows_upserted: int = 0
    error_message: str | None = None


def ingest_csv_blob(
    content: bytes,
    filename: str,
    config: IngestConfig,
    store: StudentStore,
    logger: StructuredLogger,
) -> IngestResult:
    """Upsert the students listed in a CSV blob.

    Args:
        content: Raw blob payload
        filename: Blob name, used for logging
        config: Process configuration
        store: Database capability
        logger: Structured logger; tests pass a recording subclass

    Returns:
        IngestResult with the final status and row counts
    """
    with logger.invocation(file_path=filename):
        return _run(content, filename, config, store, logger)


def _abort(result: IngestResult, message: str) -> IngestResult:
    result.status = ProcessingStatus.ABORTED
    result.error_message = message
    return result


def _run(
    content: bytes,
    filename: str,
    config: IngestConfig,
    store: StudentStore,
    logger: StructuredLogger,
) -> IngestResult:
    logger.info("decode", f"Processing CSV file: {filename}", bytes_read=len(content))

    # === DECODE ===
    text = decode_content(content)
    result = IngestResult(filename=filename, status=ProcessingStatus.DECODED)

    # === PARSE ===
    rows = parse_csv(text)
    if not rows:
        message = "CSV file is empty or improperly formatted."
        logger.warning("parse", message)
        return _abort(result, message)

    result.status = ProcessingStatus.PARSED
    result.rows_parsed = len(rows)
    logger.info("parse", "CSV parsed", row_count=len(rows))

    # === VALIDATE SCHEMA ===
    with logger.timed_operation(
        "validate", "Schema check finished", table=STUDENTS_TABLE, column=REQUIRED_COLUMN
    ) as ctx:
        column_found = check_required_column(store, STUDENTS_TABLE, REQUIRED_COLUMN, logger)
        ctx["column_found"] = column_found

    if not column_found:
        message = f"Column '{REQUIRED_COLUMN}' does not exist in the database."
        logger.error("validate", message, table=STUDENTS_TABLE)
        return _abort(result, message)

    result.status = ProcessingStatus.VALIDATED

    # === WRITE ===
    if not config.has_connection_string:
        message = "AzureSQLConnectionString is missing in environment variables."
        logger.error("write", message)
        return _abort(result, message)

    batch = build_batch(rows, logger)
    result.rows_skipped = len(rows) - len(batch)
    if not batch:
        message = "No valid rows to write."
        logger.warning("write", message, rows_skipped=result.rows_skipped)
        return _abort(result, message)

    with logger.timed_operation("write", "Batch upsert finished") as ctx:
        upsert = store.upsert_batch(batch)
        ctx["rows_submitted"] = upsert.rows_submitted
        ctx["success"] = upsert.success

    if not upsert.success:
        message = f"Database connection failed: {upsert.error_message}"
        logger.error("write", message, rows_submitted=upsert.rows_submitted)
        return _abort(result, message)

    result.status = ProcessingStatus.WRITTEN
    result.rows_upserted = upsert.rows_submitted
    logger.info(
        "complete",
        "Database update successful.",
        rows_upserted=result.rows_upserted,
        rows_skipped=result.rows_skipped,
    )
    return result
