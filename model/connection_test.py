"""
Tests for Connection model.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List
import unittest

from .connection import (
    CONNECTION_PREFIX,
    DEFAULT_CONNECTION_TABLE_NAME,
    Connection,
    alloc_connection,
    new_connection,
    new_connection_id,
)
from .entity import Identifiable, Storable, TableNamed
from ..helper.error import InvalidParameterError, is_error


class TestNewConnection(unittest.TestCase):
    """Test cases for new_connection."""

    def test_new_connection(self):
        """Test new_connection with valid and invalid parameters."""

        test_cases: List[Dict[str, Any]] = [
            {
                "name": "valid",
                "args": ("s_1234567890", "127.0.0.1", 22, "127.0.0.1", 2222),
                "want_err": False,
            },
            {
                "name": "empty-session-id",
                "args": ("", "127.0.0.1", 22, "127.0.0.1", 2222),
                "want_err": True,
                "want_msg": "missing session id",
            },
            {
                "name": "empty-client-address",
                "args": ("s_1234567890", "", 22, "127.0.0.1", 2222),
                "want_err": True,
                "want_msg": "missing client address",
            },
            {
                "name": "empty-client-port",
                "args": ("s_1234567890", "localhost", 0, "127.0.0.1", 2222),
                "want_err": True,
                "want_msg": "invalid client port",
            },
            {
                "name": "empty-backend-address",
                "args": ("s_1234567890", "localhost", 22, "", 2222),
                "want_err": True,
                "want_msg": "missing backend address",
            },
            {
                "name": "empty-backend-port",
                "args": ("s_1234567890", "localhost", 22, "127.0.0.1", 0),
                "want_err": True,
                "want_msg": "invalid backend port",
            },
            {
                "name": "negative-client-port",
                "args": ("s_1234567890", "localhost", -1, "127.0.0.1", 2222),
                "want_err": True,
                "want_msg": "invalid client port",
            },
            {
                "name": "backend-port-above-uint32",
                "args": ("s_1234567890", "localhost", 22, "127.0.0.1", 2**32),
                "want_err": True,
                "want_msg": "invalid backend port",
            },
        ]

        for test_case in test_cases:
            with self.subTest(name=test_case["name"]):
                if test_case["want_err"]:
                    with self.assertRaises(InvalidParameterError) as cm:
                        new_connection(*test_case["args"])
                    self.assertIn(test_case["want_msg"], str(cm.exception))
                    self.assertTrue(is_error(cm.exception, InvalidParameterError))
                    continue

                got = new_connection(*test_case["args"])
                self.assertEqual(
                    Connection(
                        session_id="s_1234567890",
                        client_address="127.0.0.1",
                        client_port=22,
                        backend_address="127.0.0.1",
                        backend_port=2222,
                    ),
                    got,
                )
                self.assertEqual("", got.public_id)
                self.assertIsNone(got.create_time)

    def test_first_invalid_field_is_reported(self):
        """With several invalid fields the first in argument order is reported."""
        test_cases: List[Dict[str, Any]] = [
            {"args": ("", "", 0, "", 0), "want_msg": "missing session id"},
            {"args": ("s_1", "", 0, "", 0), "want_msg": "missing client address"},
            {"args": ("s_1", "a", 0, "", 0), "want_msg": "invalid client port"},
            {"args": ("s_1", "a", 1, "", 0), "want_msg": "missing backend address"},
        ]

        for test_case in test_cases:
            with self.subTest(want=test_case["want_msg"]):
                with self.assertRaises(InvalidParameterError) as cm:
                    new_connection(*test_case["args"])
                self.assertIn(test_case["want_msg"], str(cm.exception.original))

    def test_invalid_parameter_is_value_error(self):
        """Callers catching ValueError also catch validation failures."""
        with self.assertRaises(ValueError):
            new_connection("", "127.0.0.1", 22, "127.0.0.1", 2222)


class TestConnectionClone(unittest.TestCase):
    """Test cases for Connection.clone."""

    def setUp(self):
        self.connection = new_connection("s_1", "127.0.0.1", 22, "127.0.0.1", 2222)
        self.connection.public_id = new_connection_id()
        self.connection.create_time = datetime.now(timezone.utc)
        self.connection.update_time = self.connection.create_time

    def test_clone_equal(self):
        """A clone equals its source and other clones."""
        cp = self.connection.clone()

        self.assertEqual(cp, self.connection)
        self.assertEqual(cp, self.connection.clone())
        self.assertEqual(cp.public_id, self.connection.public_id)
        self.assertIsNot(cp, self.connection)

    def test_clone_not_equal(self):
        """A clone differs from a connection with other values."""
        other = new_connection("s_1", "127.0.0.1", 80, "127.0.0.1", 8080)
        other.public_id = new_connection_id()

        self.assertNotEqual(self.connection.clone(), other)

    def test_clone_independent(self):
        """Changing the clone leaves the source untouched."""
        cp = self.connection.clone()
        cp.client_port = 80
        cp.public_id = "sc_other"
        cp.set_table_name("other_table")

        self.assertEqual(22, self.connection.client_port)
        self.assertNotEqual("sc_other", self.connection.public_id)
        self.assertEqual(DEFAULT_CONNECTION_TABLE_NAME, self.connection.table_name())

    def test_clone_keeps_table_name(self):
        """The table override is copied with the fields."""
        self.connection.set_table_name("alt_connection")

        self.assertEqual("alt_connection", self.connection.clone().table_name())


class TestConnectionTableName(unittest.TestCase):
    """Test cases for the table name override."""

    def test_set_table_name(self):
        test_cases: List[Dict[str, Any]] = [
            {"name": "new-name", "set_name_to": "new-name", "want": "new-name"},
            {
                "name": "reset to default",
                "set_name_to": "",
                "want": DEFAULT_CONNECTION_TABLE_NAME,
            },
        ]

        for test_case in test_cases:
            with self.subTest(name=test_case["name"]):
                default = alloc_connection()
                self.assertEqual(DEFAULT_CONNECTION_TABLE_NAME, default.table_name())

                c = alloc_connection()
                c.set_table_name(test_case["set_name_to"])
                self.assertEqual(test_case["want"], c.table_name())

    def test_reset_after_override(self):
        c = alloc_connection()
        c.set_table_name("custom")
        self.assertEqual("custom", c.table_name())

        c.set_table_name("")
        self.assertEqual(DEFAULT_CONNECTION_TABLE_NAME, c.table_name())

    def test_override_is_per_instance(self):
        c1 = alloc_connection()
        c2 = alloc_connection()
        c1.set_table_name("custom")

        self.assertEqual(DEFAULT_CONNECTION_TABLE_NAME, c2.table_name())

    def test_override_not_compared(self):
        """Equality covers the stored fields only."""
        c1 = alloc_connection()
        c2 = alloc_connection()
        c1.set_table_name("custom")

        self.assertEqual(c1, c2)


class TestConnectionRow(unittest.TestCase):
    """Test cases for row mapping and helpers."""

    def test_alloc_connection(self):
        """An allocated connection is zero valued."""
        c = alloc_connection()
        self.assertEqual(Connection(), c)
        self.assertEqual("", c.public_id)
        self.assertEqual(0, c.client_port)

    def test_to_row(self):
        c = new_connection("s_1", "10.0.0.1", 5000, "10.0.0.2", 22)
        c.public_id = "sc_1"

        self.assertEqual(
            {
                "public_id": "sc_1",
                "session_id": "s_1",
                "client_address": "10.0.0.1",
                "client_port": 5000,
                "backend_address": "10.0.0.2",
                "backend_port": 22,
            },
            c.to_row(),
        )

    def test_from_row(self):
        now = datetime.now(timezone.utc)
        row = {
            "public_id": "sc_1",
            "session_id": "s_1",
            "client_address": "10.0.0.1",
            "client_port": 5000,
            "backend_address": "10.0.0.2",
            "backend_port": 22,
            "create_time": now,
            "update_time": now,
        }

        c = Connection.from_row(row)
        self.assertEqual("sc_1", c.public_id)
        self.assertEqual(5000, c.client_port)
        self.assertEqual(now, c.create_time)

    def test_populate_keeps_table_name(self):
        c = alloc_connection()
        c.set_table_name("custom")
        c.populate(
            {
                "public_id": "sc_1",
                "session_id": "s_1",
                "client_address": "a",
                "client_port": 1,
                "backend_address": "b",
                "backend_port": 2,
            }
        )

        self.assertEqual("custom", c.table_name())
        self.assertIsNone(c.create_time)

    def test_protocols(self):
        """Connection satisfies the storage protocols."""
        c = alloc_connection()
        self.assertIsInstance(c, Identifiable)
        self.assertIsInstance(c, TableNamed)
        self.assertIsInstance(c, Storable)

    def test_new_connection_id(self):
        public_id = new_connection_id()
        self.assertTrue(public_id.startswith(f"{CONNECTION_PREFIX}_"))
        self.assertNotEqual(public_id, new_connection_id())


if __name__ == "__main__":
    unittest.main()
