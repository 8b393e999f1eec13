"""
Connection model for the session connection store.
A Connection records the client and backend addresses of one network
connection made within a session. It holds no socket.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..helper.error import InvalidParameterError
from ..helper.public_id import new_public_id

CONNECTION_PREFIX = "sc"
DEFAULT_CONNECTION_TABLE_NAME = "session_connection"

MAX_PORT = 2**32 - 1


@dataclass
class Connection:
    """
    Connection of a session, persisted in the session_connection table.
    public_id stays empty until the caller assigns one from new_connection_id().
    """

    public_id: str = ""
    session_id: str = ""
    client_address: str = ""
    client_port: int = 0
    backend_address: str = ""
    backend_port: int = 0

    # Timestamps - set by storage
    create_time: Optional[datetime] = None
    update_time: Optional[datetime] = None

    _table_name: str = field(default="", init=False, repr=False, compare=False)

    def clone(self) -> "Connection":
        """Return a deep copy sharing no state with this connection."""
        return copy.deepcopy(self)

    def table_name(self) -> str:
        if self._table_name:
            return self._table_name
        return DEFAULT_CONNECTION_TABLE_NAME

    def set_table_name(self, name: str) -> None:
        """Set the table name; an empty name resets it to the default."""
        self._table_name = name

    def to_row(self) -> Dict[str, Any]:
        """Columns written on insert, the timestamps default in storage."""
        return {
            "public_id": self.public_id,
            "session_id": self.session_id,
            "client_address": self.client_address,
            "client_port": self.client_port,
            "backend_address": self.backend_address,
            "backend_port": self.backend_port,
        }

    def populate(self, row: Dict[str, Any]) -> None:
        """Assign every column from a database row."""
        self.public_id = row["public_id"]
        self.session_id = row["session_id"]
        self.client_address = row["client_address"]
        self.client_port = row["client_port"]
        self.backend_address = row["backend_address"]
        self.backend_port = row["backend_port"]
        self.create_time = row.get("create_time")
        self.update_time = row.get("update_time")

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Connection":
        """Create connection from database row."""
        connection = cls()
        connection.populate(row)
        return connection


def _valid_port(port: int) -> bool:
    return isinstance(port, int) and 0 < port <= MAX_PORT


def new_connection(
    session_id: str,
    client_address: str,
    client_port: int,
    backend_address: str,
    backend_port: int,
) -> Connection:
    """
    Create a new connection for a session.
    Fields are checked in argument order and the first invalid one is reported.

    :param session_id: Public id of the session the connection belongs to.
    :param client_address: Address of the client.
    :param client_port: Port of the client, nonzero.
    :param backend_address: Address of the backend.
    :param backend_port: Port of the backend, nonzero.
    :returns: The connection, without a public id.
    :raises InvalidParameterError: If a field is empty or zero.
    """
    if not session_id:
        raise InvalidParameterError("new connection", ValueError("missing session id"))
    if not client_address:
        raise InvalidParameterError(
            "new connection", ValueError("missing client address")
        )
    if not _valid_port(client_port):
        raise InvalidParameterError(
            "new connection", ValueError(f"invalid client port: {client_port}")
        )
    if not backend_address:
        raise InvalidParameterError(
            "new connection", ValueError("missing backend address")
        )
    if not _valid_port(backend_port):
        raise InvalidParameterError(
            "new connection", ValueError(f"invalid backend port: {backend_port}")
        )

    return Connection(
        session_id=session_id,
        client_address=client_address,
        client_port=client_port,
        backend_address=backend_address,
        backend_port=backend_port,
    )


def alloc_connection() -> Connection:
    """
    Allocate an empty connection to carry a public id into lookups and deletes.
    """
    return Connection()


def new_connection_id() -> str:
    """Generate a public id for a connection."""
    return new_public_id(CONNECTION_PREFIX)
