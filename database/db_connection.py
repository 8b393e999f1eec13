"""
Connection database handler for the session connection store.
Owns the session_connection schema and maps connection operations onto
the generic reader/writer.
"""

from datetime import timedelta
from typing import List, Optional

from psycopg import sql
from psycopg.rows import dict_row

from ..helper.database import Database
from ..helper.error import InvalidParameterError
from ..helper.sql import SQLLoader, run_ddl
from ..model.connection import (
    DEFAULT_CONNECTION_TABLE_NAME,
    Connection,
    alloc_connection,
)
from .db_rw import RW


class ConnectionDBHandler:
    """
    Connection database handler.
    Errors raised by the reader/writer reach the caller unchanged.
    """

    def __init__(self, db_connection: Database, with_table_drop: bool = False):
        """
        Initialize connection database handler.
        Loads the init function, optionally drops the tables, then creates them.
        """
        self.db: Database = db_connection

        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        self.rw = RW(self.db)

        sql_loader: SQLLoader = SQLLoader()
        sql_loader.load_connection_sql(self.db.instance, force=with_table_drop)

        if with_table_drop:
            self.drop_table()

        self.create_table()

    def check_table_existance(
        self, table_name: str = DEFAULT_CONNECTION_TABLE_NAME
    ) -> bool:
        """Check if the connection table, or the named one, exists."""
        return self.db.check_table_existence(table_name)

    def create_table(self) -> None:
        """Create session and connection tables using the SQL init function."""
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        run_ddl(self.db.instance, "SELECT init_session_connection();")

    def drop_table(self) -> None:
        """Drop connection and session tables with DDL deadlock protection."""
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        run_ddl(
            self.db.instance,
            f"DROP TABLE IF EXISTS {DEFAULT_CONNECTION_TABLE_NAME} CASCADE;",
        )
        run_ddl(self.db.instance, "DROP TABLE IF EXISTS session CASCADE;")

    def create_alternate_table(self, table_name: str) -> None:
        """
        Create a table shaped like the connection table.
        Connections with set_table_name(table_name) are stored there.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")
        if not table_name:
            raise InvalidParameterError(
                "create alternate table", ValueError("missing table name")
            )

        create_sql = sql.SQL(
            "CREATE TABLE IF NOT EXISTS {} (LIKE {} INCLUDING ALL)"
        ).format(
            sql.Identifier(table_name),
            sql.Identifier(DEFAULT_CONNECTION_TABLE_NAME),
        )
        run_ddl(self.db.instance, create_sql.as_string(self.db.instance))
        self.db.logger.info(f"Created alternate connection table {table_name}")

    def drop_alternate_table(self, table_name: str) -> None:
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        drop_sql = sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(table_name))
        run_ddl(self.db.instance, drop_sql.as_string(self.db.instance))

    def create_connection(
        self, connection: Connection, timeout: Optional[timedelta] = None
    ) -> Connection:
        """
        Insert a connection whose public id is already assigned.
        The same object is returned, with its timestamps set by storage.
        """
        self.rw.create(connection, timeout=timeout)
        return connection

    def delete_connection(
        self, connection: Connection, timeout: Optional[timedelta] = None
    ) -> int:
        """
        Delete a connection by public id.
        Returns 0 when no connection has that public id.
        """
        return self.rw.delete(connection, timeout=timeout)

    def lookup_connection(
        self, connection: Connection, timeout: Optional[timedelta] = None
    ) -> None:
        """
        Populate a connection from storage by its public id.
        Raises RecordNotFoundError and leaves the connection untouched if absent.
        """
        self.rw.lookup_by_id(connection, timeout=timeout)

    def select_connection(
        self, public_id: str, timeout: Optional[timedelta] = None
    ) -> Connection:
        """Select a connection by public id from the default table."""
        connection = alloc_connection()
        connection.public_id = public_id
        self.rw.lookup_by_id(connection, timeout=timeout)
        return connection

    def select_all_connections_by_session(self, session_id: str) -> List[Connection]:
        """
        Select all connections of a session, oldest first.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")
        if not session_id:
            raise InvalidParameterError(
                "select all connections by session", ValueError("missing session id")
            )

        with self.db.instance.cursor(row_factory=dict_row) as cur:
            cur.execute(
                sql.SQL(
                    "SELECT * FROM {} WHERE session_id = %s "
                    "ORDER BY create_time, public_id"
                ).format(sql.Identifier(DEFAULT_CONNECTION_TABLE_NAME)),
                (session_id,),
            )

            connections: List[Connection] = []
            for row in cur.fetchall():
                connections.append(Connection.from_row(row))
        self.db.instance.commit()

        return connections
