"""
Database helper functions for the session connection store.
Configuration from the environment and a psycopg connection wrapper.
"""

import os
from typing import Optional, Dict
from dataclasses import dataclass
import psycopg
from psycopg import Connection, ConnectionInfo

from .logging import SessionLogger, get_logger
from .error import SessionError


@dataclass
class DatabaseConfiguration:
    """
    Database configuration class.
    """

    host: str
    port: int
    database: str
    username: str
    password: str
    schema: str = "public"
    sslmode: str = "require"
    with_table_drop: bool = False

    @classmethod
    def from_env(cls) -> "DatabaseConfiguration":
        """Create configuration from SESSIONCONN_DB_* environment variables."""
        host = os.getenv("SESSIONCONN_DB_HOST", "localhost")
        port = int(os.getenv("SESSIONCONN_DB_PORT", "5432"))
        database = os.getenv("SESSIONCONN_DB_DATABASE", "sessionconn")
        username = os.getenv("SESSIONCONN_DB_USERNAME", "postgres")
        password = os.getenv("SESSIONCONN_DB_PASSWORD", "")
        schema = os.getenv("SESSIONCONN_DB_SCHEMA", "public")
        sslmode = os.getenv("SESSIONCONN_DB_SSLMODE", "require")
        with_table_drop = (
            os.getenv("SESSIONCONN_DB_WITH_TABLE_DROP", "false").lower() == "true"
        )

        if not all([host.strip(), database.strip(), username.strip(), schema.strip()]):
            raise ValueError(
                "Required environment variables missing: "
                "SESSIONCONN_DB_HOST, SESSIONCONN_DB_DATABASE, "
                "SESSIONCONN_DB_USERNAME, SESSIONCONN_DB_SCHEMA must be set"
            )

        return cls(
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            schema=schema,
            sslmode=sslmode,
            with_table_drop=with_table_drop,
        )

    def connection_string(self) -> str:
        """Get connection string for psycopg3."""
        return (
            f"host={self.host} "
            f"port={self.port} "
            f"dbname={self.database} "
            f"user={self.username} "
            f"password={self.password} "
            f"sslmode={self.sslmode} "
            f"application_name=sessionconn "
            f"options='-c search_path={self.schema}'"
        )


class Database:
    """
    Database service wrapper holding one psycopg connection.
    Transactions are committed or rolled back explicitly by the handlers.
    """

    def __init__(
        self,
        name: str,
        config: Optional[DatabaseConfiguration] = None,
        logger: Optional[SessionLogger] = None,
        auto_connect: bool = True,
    ):
        """Initialize database service."""
        self.name = name
        self.config = config
        self.logger = logger or get_logger("sessionconn.database")
        self.instance: Optional[Connection] = None

        if config and auto_connect:
            self.connect_to_database()

    def connect_to_database(self) -> None:
        """
        Connect to the database using the configuration.
        """
        if not self.config:
            raise SessionError(
                "Database configuration is required for connection",
                ValueError("No config provided"),
            )

        try:
            self.instance = psycopg.connect(
                self.config.connection_string(), autocommit=False
            )
            self.instance.execute("SELECT 1")
            self.instance.commit()
            self.logger.info(f"Connected to database: {self.config.database}")

        except Exception as e:
            self.instance = None
            raise SessionError("Failed to connect to database", e)

    def check_table_existence(self, table_name: str) -> bool:
        """
        Check if a table exists in the current schema.
        """
        if not self.instance:
            raise SessionError(
                "Database connection not established", ValueError("no instance")
            )

        try:
            with self.instance.cursor() as cur:
                cur.execute(
                    """
                    SELECT EXISTS (
                        SELECT 1
                        FROM information_schema.tables
                        WHERE table_schema = current_schema()
                        AND table_name = %s
                    );
                """,
                    (table_name,),
                )

                result = cur.fetchone()
            self.instance.commit()
            return result[0] if result else False

        except Exception as e:
            self.instance.rollback()
            raise SessionError(f"Failed to check table existence for {table_name}", e)

    def health(self) -> Dict[str, str]:
        """
        Check the health of the database connection.
        """
        stats: Dict[str, str] = {}

        if not self.instance:
            stats["status"] = "down"
            stats["error"] = "No database connection"
            return stats

        try:
            with self.instance.cursor() as cur:
                cur.execute("SELECT 1")
                cur.fetchone()
            self.instance.commit()

            stats["status"] = "up"
            stats["message"] = "It's healthy"

            info: ConnectionInfo = self.instance.info
            stats["server_version"] = str(info.server_version)
            stats["backend_pid"] = str(info.backend_pid)

        except Exception as e:
            stats["status"] = "down"
            stats["error"] = f"Database health check failed: {str(e)}"
            self.logger.error("Database health check failed", error=e)

        return stats

    def close(self) -> None:
        """Close the database connection."""
        if self.instance:
            self.instance.close()
            self.instance = None
            self.logger.info("Database connection closed")


def new_database(
    name: str,
    config: DatabaseConfiguration,
    logger: Optional[SessionLogger] = None,
    auto_connect: bool = True,
) -> Database:
    """
    Create a new Database instance.
    """
    return Database(name, config, logger, auto_connect)


def new_database_from_env(
    name: str = "sessionconn",
    logger: Optional[SessionLogger] = None,
    auto_connect: bool = False,
) -> Database:
    """
    Create a new Database instance from environment variables.
    """
    config = DatabaseConfiguration.from_env()
    return Database(name, config, logger, auto_connect)


def new_database_with_connection(
    name: str, connection: Connection, logger: Optional[SessionLogger] = None
) -> Database:
    """
    Create a new Database instance with an existing connection.
    """
    db = Database(name, None, logger)
    db.instance = connection
    return db
