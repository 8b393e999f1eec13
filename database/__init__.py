"""
Database package for the session connection store.
Generic reader/writer and the connection handler built on it.
"""

from .db_rw import (
    RW,
    new_rw,
)

from .db_connection import (
    ConnectionDBHandler,
)

__all__ = [
    "RW",
    "new_rw",
    "ConnectionDBHandler",
]
