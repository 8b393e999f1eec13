"""
DDL execution and SQL file loading for the session connection store.
The schema lives in PL/pgSQL init functions under the sql/ directory.
"""

import os
import time
import threading
from typing import List, Optional
from psycopg import Connection, errors
from pathlib import Path

from .logging import get_logger

logger = get_logger("sessionconn.sql")

# Global lock for DDL operations to prevent concurrent DDL deadlocks
_DDL_LOCK = threading.RLock()


def run_ddl(conn: Connection, sql_statement: str, max_retries: int = 3) -> None:
    """
    Executes DDL under a process lock, retrying on deadlocks or serialization errors.

    :param conn: The Psycopg 3 connection object.
    :param sql_statement: The DDL to execute (e.g., CREATE TABLE, SELECT init_session_connection()).
    :param max_retries: Attempts before the last deadlock is raised.
    """

    with _DDL_LOCK:
        for attempt in range(max_retries):
            try:
                conn.rollback()
                with conn.cursor() as cur:
                    cur.execute(sql_statement.encode("utf-8"))
                conn.commit()
                return
            except (errors.DeadlockDetected, errors.SerializationFailure) as e:
                conn.rollback()
                if attempt < max_retries - 1:
                    logger.warning(f"ddl lock, attempt {attempt + 1}/{max_retries}")
                    time.sleep(0.5)
                else:
                    logger.error(f"ddl failed after {max_retries} retries", error=e)
                    raise
            except Exception:
                conn.rollback()
                raise


class SQLLoader:
    """
    SQL file loader for the init functions the handlers call.
    """

    CONNECTION_FUNCTIONS: List[str] = [
        "init_session_connection",
    ]

    def __init__(self, sql_base_path: Optional[str] = None):
        """
        Initialize with path to SQL files.

        :param sql_base_path: Base path to SQL files. If None, defaults to the package sql directory.
        """
        if sql_base_path is None:
            current_dir = Path(__file__).parent.parent
            sql_base_path = str(current_dir / "sql")
        self.sql_base_path = sql_base_path

    def load_sql_file(self, file_path: str) -> str:
        """
        Load SQL content from file.

        :param file_path: Path to the SQL file.
        :returns: The content of the SQL file as a string.
        :raises ValueError: If the file does not exist.
        """
        try:
            with open(file_path, "r") as f:
                return f.read()
        except FileNotFoundError:
            raise ValueError(f"SQL file not found: {file_path}")

    def execute_sql_file(self, connection: Connection, file_path: str) -> None:
        sql_content: str = self.load_sql_file(file_path)
        run_ddl(connection, sql_content)

    def check_functions(self, connection: Connection, sql_functions: List[str]) -> bool:
        """
        Check if all SQL functions exist.

        :param connection: The Psycopg 3 connection object.
        :param sql_functions: List of SQL function names to check.
        :returns: True if all functions exist, False otherwise.
        """
        for func_name in sql_functions:
            with connection.cursor() as cur:
                cur.execute(
                    "SELECT EXISTS(SELECT 1 FROM pg_proc WHERE proname = %s);",
                    (func_name,),
                )
                one = cur.fetchone()
                if one is None or not one[0]:
                    return False
        return True

    def load_connection_sql(self, connection: Connection, force: bool = False) -> None:
        """
        Load the session connection init function.

        :param connection: The Psycopg 3 connection object.
        :param force: If True, forces reloading even if functions exist.
        :raises RuntimeError: If not all required connection SQL functions were created.
        """
        if not force:
            if self.check_functions(connection, self.CONNECTION_FUNCTIONS):
                return

        connection_sql_path = os.path.join(self.sql_base_path, "connection.sql")
        self.execute_sql_file(connection, connection_sql_path)

        if not self.check_functions(connection, self.CONNECTION_FUNCTIONS):
            raise RuntimeError(
                "Not all required connection SQL functions were created"
            )
