"""Database connection utilities for Azure SQL."""

import struct
from contextlib import contextmanager
from typing import Any, Generator

# Connection attribute for passing an Azure AD access token to the ODBC driver
SQL_COPT_SS_ACCESS_TOKEN = 1256
DATABASE_TOKEN_SCOPE = "https://database.windows.net/.default"


class DatabaseError(Exception):
    """Raised when connecting to or querying Azure SQL fails."""

    pass


def _get_managed_identity_token() -> bytes:
    """Get Azure AD token for managed identity authentication.

    Used when running in Azure (Function App).
    Returns token in the format required by pyodbc.

    Raises:
        DatabaseError: If no credential can produce a token
    """
    from azure.core.exceptions import AzureError
    from azure.identity import DefaultAzureCredential

    try:
        credential = DefaultAzureCredential()
        token = credential.get_token(DATABASE_TOKEN_SCOPE)
    except AzureError as e:
        raise DatabaseError(f"Failed to acquire access token: {e!s}") from e

    # Convert token to bytes format required by pyodbc
    token_bytes = token.token.encode("utf-16-le")
    token_struct = struct.pack(f"<I{len(token_bytes)}s", len(token_bytes), token_bytes)
    return token_struct


def get_connection(connection_string: str, use_managed_identity: bool = False) -> Any:
    """Create a new database connection.

    pyodbc is imported here rather than at module load so that parsing and
    validation work on hosts without the ODBC driver manager.

    Args:
        connection_string: ODBC connection string for Azure SQL
        use_managed_identity: Authenticate with an Azure AD token

    Returns:
        Open pyodbc connection
    """
    import pyodbc

    if use_managed_identity:
        token = _get_managed_identity_token()
        return pyodbc.connect(
            connection_string,
            attrs_before={SQL_COPT_SS_ACCESS_TOKEN: token},
        )
    return pyodbc.connect(connection_string)


@contextmanager
def get_db_connection(
    connection_string: str,
    use_managed_identity: bool = False,
) -> Generator[Any, None, None]:
    """Context manager for database connections."""
    conn = get_connection(connection_string, use_managed_identity)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def get_db_cursor(
    connection_string: str,
    commit: bool = True,
    use_managed_identity: bool = False,
):
    """Context manager for database cursor with automatic commit.

    Any pyodbc error, whether raised while connecting or inside the block,
    is re-raised as DatabaseError after the transaction is rolled back.
    """
    import pyodbc

    try:
        with get_db_connection(connection_string, use_managed_identity) as conn:
            cursor = conn.cursor()
            try:
                yield cursor
                if commit:
                    conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()
    except pyodbc.Error as e:
        raise DatabaseError(str(e)) from e
