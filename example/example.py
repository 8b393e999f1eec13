"""
Example storing, reading and deleting a connection record.

Prerequisites:
1. Install the package: pip install sessionconn
2. Set up a PostgreSQL database
3. Export SESSIONCONN_DB_HOST, SESSIONCONN_DB_PORT, SESSIONCONN_DB_DATABASE,
   SESSIONCONN_DB_USERNAME, SESSIONCONN_DB_PASSWORD and SESSIONCONN_DB_SSLMODE

Usage:
    python example.py
"""

import logging

from sessionconn import (
    ConnectionDBHandler,
    RecordNotFoundError,
    alloc_connection,
    new_connection,
    new_connection_id,
    new_database_from_env,
    new_public_id,
)
from sessionconn.helper.logging import setup_logging


def main() -> None:
    logger = setup_logging(level=logging.DEBUG, name="sessionconn.example")

    db = new_database_from_env(logger=logger, auto_connect=True)
    handler = ConnectionDBHandler(db)

    if db.instance is None:
        raise RuntimeError("Database connection is not established")

    # Sessions belong to another subsystem, insert a row to reference
    session_id = new_public_id("s")
    with db.instance.cursor() as cur:
        cur.execute("INSERT INTO session (public_id) VALUES (%s);", (session_id,))
    db.instance.commit()

    connection = new_connection(session_id, "127.0.0.1", 22, "127.0.0.1", 2222)
    connection.public_id = new_connection_id()
    handler.create_connection(connection)
    logger.info("Stored connection", public_id=connection.public_id)

    found = handler.select_connection(connection.public_id)
    logger.info(
        "Found connection",
        client=f"{found.client_address}:{found.client_port}",
        backend=f"{found.backend_address}:{found.backend_port}",
    )

    carrier = alloc_connection()
    carrier.public_id = connection.public_id
    logger.info("Deleted connection", rows=handler.delete_connection(carrier))

    try:
        handler.lookup_connection(carrier)
    except RecordNotFoundError as e:
        logger.info("Connection is gone", error=e.original)

    db.close()


if __name__ == "__main__":
    main()
