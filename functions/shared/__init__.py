"""Shared utilities for Azure Functions.

Exports:
- Config: settings read once per process
- Parser: byte decoding and CSV splitting
- Validation: row conversion, schema check and processing states
- Storage: Azure SQL upsert behind the StudentStore interface
- Ingest: the blob handler tying the steps together
- Logging: Structured JSON logging
"""

from .config import IngestConfig, get_config, get_env, load_config
from .db.connection import DatabaseError
from .ingest import IngestResult, ingest_csv_blob
from .logging_utils import StructuredLogger, structured_logger
from .parser import decode_content, parse_csv, strip_bom
from .storage import SqlStudentStore, StudentStore, UpsertResult
from .validation import (
    ProcessingStatus,
    RowValidationResult,
    StudentRow,
    build_batch,
    check_required_column,
    parse_roll_no,
    trim_field,
    validate_row,
)

__all__ = [
    # Config
    "IngestConfig",
    "get_config",
    "get_env",
    "load_config",
    # Parser
    "decode_content",
    "parse_csv",
    "strip_bom",
    # Validation
    "ProcessingStatus",
    "RowValidationResult",
    "StudentRow",
    "build_batch",
    "check_required_column",
    "parse_roll_no",
    "trim_field",
    "validate_row",
    # Storage
    "DatabaseError",
    "SqlStudentStore",
    "StudentStore",
    "UpsertResult",
    # Ingest
    "IngestResult",
    "ingest_csv_blob",
    # Logging
    "StructuredLogger",
    "structured_logger",
]
