"""Shared configuration for the student CSV ingestion function."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# App setting holding the ODBC connection string for Azure SQL
SQL_CONNECTION_STRING_SETTING = "AzureSQLConnectionString"
USE_MANAGED_IDENTITY_SETTING = "AZURE_SQL_USE_MI"


def get_env(key: str, default: str | None = None) -> str:
    """Get environment variable or raise if required and missing."""
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(f"Missing required environment variable: {key}")
    return value


@dataclass(frozen=True)
class IngestConfig:
    """Settings passed to the ingestion handler for one process."""

    sql_connection_string: str = ""
    use_managed_identity: bool = False

    @property
    def has_connection_string(self) -> bool:
        return bool(self.sql_connection_string.strip())


def load_config(environ: Mapping[str, str] | None = None) -> IngestConfig:
    """Build configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        IngestConfig populated from the mapping
    """
    env = os.environ if environ is None else environ
    return IngestConfig(
        sql_connection_string=env.get(SQL_CONNECTION_STRING_SETTING, ""),
        use_managed_identity=env.get(USE_MANAGED_IDENTITY_SETTING, "false").lower() == "true",
    )


@lru_cache(maxsize=1)
def get_config() -> IngestConfig:
    """Return the process-wide configuration, built on first use."""
    return load_config()
