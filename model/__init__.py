"""
Model package for the session connection store.

Contains the entity protocols and the Connection entity.
"""

from .entity import Identifiable, TableNamed, Storable
from .connection import (
    CONNECTION_PREFIX,
    DEFAULT_CONNECTION_TABLE_NAME,
    Connection,
    alloc_connection,
    new_connection,
    new_connection_id,
)

__all__ = [
    # Protocols
    "Identifiable",
    "TableNamed",
    "Storable",
    # Connection
    "CONNECTION_PREFIX",
    "DEFAULT_CONNECTION_TABLE_NAME",
    "Connection",
    "alloc_connection",
    "new_connection",
    "new_connection_id",
]
