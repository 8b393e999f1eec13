"""
Helper package for the session connection store.
Errors, logging, database configuration, SQL loading and public ids.
"""

from .error import (
    SessionError,
    InvalidParameterError,
    RecordNotFoundError,
    AlreadyExistsError,
    is_error,
)

from .database import (
    Database,
    DatabaseConfiguration,
    new_database,
    new_database_from_env,
    new_database_with_connection,
)

from .logging import (
    SessionLogger,
    ColorFormatter,
    get_logger,
    setup_logging,
)

from .public_id import new_public_id

from .sql import SQLLoader, run_ddl

__all__ = [
    # Errors
    "SessionError",
    "InvalidParameterError",
    "RecordNotFoundError",
    "AlreadyExistsError",
    "is_error",
    # Database
    "Database",
    "DatabaseConfiguration",
    "new_database",
    "new_database_from_env",
    "new_database_with_connection",
    # Logging
    "SessionLogger",
    "ColorFormatter",
    "get_logger",
    "setup_logging",
    # Identity
    "new_public_id",
    # SQL
    "SQLLoader",
    "run_ddl",
]
