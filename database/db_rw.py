"""
Generic reader/writer for storable entities.
Rows are addressed by public id in the table the entity names, so one
implementation serves every entity satisfying the Storable protocol.
"""

from datetime import timedelta
from typing import Any, Dict, Optional

from psycopg import Cursor, errors, sql
from psycopg.rows import dict_row

from ..helper.database import Database
from ..helper.error import (
    AlreadyExistsError,
    InvalidParameterError,
    RecordNotFoundError,
    SessionError,
)
from ..model.entity import Storable

# Constraint violations raised for rows the schema rejects
_INVALID_ROW_ERRORS = (
    errors.NotNullViolation,
    errors.CheckViolation,
    errors.ForeignKeyViolation,
)


class RW:
    """
    Reader/writer over one database connection.
    Every call runs in its own transaction, committed on success and
    rolled back on failure.
    """

    def __init__(self, db_connection: Database):
        self.db: Database = db_connection
        self.logger = db_connection.logger

        if self.db.instance is None:
            raise ValueError("Database connection is not established")

    def create(self, entity: Storable, timeout: Optional[timedelta] = None) -> None:
        """
        Insert an entity and populate it from the stored row.

        :param entity: Entity with its public id assigned.
        :param timeout: Optional statement timeout for this call.
        :raises InvalidParameterError: If the public id is missing or the row violates a constraint.
        :raises AlreadyExistsError: If the public id is already stored.
        """
        if not entity.public_id:
            raise InvalidParameterError("create", ValueError("missing public id"))

        row: Dict[str, Any] = entity.to_row()
        query = sql.SQL(
            "INSERT INTO {table} ({fields}) VALUES ({values}) RETURNING *"
        ).format(
            table=sql.Identifier(entity.table_name()),
            fields=sql.SQL(", ").join(map(sql.Identifier, row.keys())),
            values=sql.SQL(", ").join(sql.Placeholder() * len(row)),
        )

        stored = self._execute(
            "create", query, list(row.values()), timeout, fetch=True
        )
        if stored is None:
            raise SessionError("create", RuntimeError("insert returned no row"))
        entity.populate(stored)

        self.logger.debug(
            "Created record", table=entity.table_name(), public_id=entity.public_id
        )

    def delete(self, entity: Storable, timeout: Optional[timedelta] = None) -> int:
        """
        Delete the row with the entity's public id, other fields are ignored.
        A public id with no row deletes nothing and is not an error.

        :param entity: Entity carrying the public id.
        :param timeout: Optional statement timeout for this call.
        :returns: Number of rows deleted, 0 or 1.
        :raises InvalidParameterError: If the public id is missing.
        """
        if not entity.public_id:
            raise InvalidParameterError("delete", ValueError("missing public id"))

        query = sql.SQL("DELETE FROM {table} WHERE public_id = %s").format(
            table=sql.Identifier(entity.table_name()),
        )

        rows_deleted = self._execute(
            "delete", query, [entity.public_id], timeout, max_rows=1
        )

        self.logger.debug(
            "Deleted record",
            table=entity.table_name(),
            public_id=entity.public_id,
            rows=rows_deleted,
        )
        return rows_deleted

    def lookup_by_id(
        self, entity: Storable, timeout: Optional[timedelta] = None
    ) -> None:
        """
        Populate an entity from the row with its public id.
        The entity is left untouched when no row matches.

        :param entity: Entity carrying the public id.
        :param timeout: Optional statement timeout for this call.
        :raises InvalidParameterError: If the public id is missing.
        :raises RecordNotFoundError: If no row matches.
        """
        if not entity.public_id:
            raise InvalidParameterError(
                "lookup by id", ValueError("missing public id")
            )

        query = sql.SQL("SELECT * FROM {table} WHERE public_id = %s").format(
            table=sql.Identifier(entity.table_name()),
        )

        row = self._execute(
            "lookup by id", query, [entity.public_id], timeout, fetch=True
        )
        if row is None:
            raise RecordNotFoundError(
                "lookup by id",
                ValueError(
                    f"record not found: {entity.public_id} in {entity.table_name()}"
                ),
            )
        entity.populate(row)

    def _execute(
        self,
        operation: str,
        query: sql.Composed,
        params: list,
        timeout: Optional[timedelta],
        fetch: bool = False,
        max_rows: Optional[int] = None,
    ) -> Any:
        """
        Run one statement in its own transaction.
        Returns the first row when fetch is set, else the affected row count.
        """
        conn = self.db.instance
        if conn is None:
            raise ValueError("Database connection is not established")

        try:
            with conn.cursor(row_factory=dict_row) as cur:
                _set_statement_timeout(cur, timeout)
                cur.execute(query, params)
                result: Any = cur.fetchone() if fetch else cur.rowcount
            if max_rows is not None and result > max_rows:
                conn.rollback()
                raise SessionError(
                    operation,
                    RuntimeError(
                        f"{result} rows would have been affected, limit is {max_rows}"
                    ),
                )
            conn.commit()
            return result
        except errors.UniqueViolation as e:
            conn.rollback()
            raise AlreadyExistsError(operation, e)
        except _INVALID_ROW_ERRORS as e:
            conn.rollback()
            raise InvalidParameterError(operation, e)
        except SessionError:
            raise
        except Exception as e:
            conn.rollback()
            self.logger.error(f"Failed to {operation}", error=e)
            raise SessionError(f"failed to {operation}", e)


def _set_statement_timeout(cur: Cursor, timeout: Optional[timedelta]) -> None:
    if timeout is None:
        return
    milliseconds = max(int(timeout.total_seconds() * 1000), 1)
    cur.execute(
        "SELECT set_config('statement_timeout', %s, true)", (str(milliseconds),)
    )


def new_rw(db_connection: Database) -> RW:
    """Create a reader/writer over an established database connection."""
    return RW(db_connection)
