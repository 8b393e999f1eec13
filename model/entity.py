"""
Protocols for entities the generic reader/writer can persist.
"""

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class Identifiable(Protocol):
    """An entity addressed by its public id."""

    public_id: str


@runtime_checkable
class TableNamed(Protocol):
    """An entity naming the relation it is stored in."""

    def table_name(self) -> str:
        """Return the override if set, else the entity's default table."""
        ...

    def set_table_name(self, name: str) -> None:
        """Override the table; an empty name resets to the default."""
        ...


@runtime_checkable
class Storable(Identifiable, TableNamed, Protocol):
    """An entity that maps to and from a table row."""

    def to_row(self) -> Dict[str, Any]:
        """Return the columns written on insert."""
        ...

    def populate(self, row: Dict[str, Any]) -> None:
        """Assign every persisted column from a complete row."""
        ...
