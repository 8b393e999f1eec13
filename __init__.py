"""
sessionconn - persisted connection records of access sessions

Stores which client address and port connected to which backend address
and port within a session:
- Validating construction of connection records
- Public id generation
- Create, lookup and delete by public id on PostgreSQL
- Per-instance table name override
"""

from ._version import __version__

from .helper.database import (
    Database,
    DatabaseConfiguration,
    new_database,
    new_database_from_env,
)

from .helper.error import (
    SessionError,
    InvalidParameterError,
    RecordNotFoundError,
    AlreadyExistsError,
    is_error,
)

from .helper.public_id import (
    new_public_id,
)

from .model.connection import (
    CONNECTION_PREFIX,
    DEFAULT_CONNECTION_TABLE_NAME,
    Connection,
    alloc_connection,
    new_connection,
    new_connection_id,
)

from .database.db_rw import (
    RW,
    new_rw,
)

from .database.db_connection import (
    ConnectionDBHandler,
)

__all__ = [
    "__version__",
    "Database",
    "DatabaseConfiguration",
    "new_database",
    "new_database_from_env",
    "SessionError",
    "InvalidParameterError",
    "RecordNotFoundError",
    "AlreadyExistsError",
    "is_error",
    "new_public_id",
    "CONNECTION_PREFIX",
    "DEFAULT_CONNECTION_TABLE_NAME",
    "Connection",
    "alloc_connection",
    "new_connection",
    "new_connection_id",
    "RW",
    "new_rw",
    "ConnectionDBHandler",
]
