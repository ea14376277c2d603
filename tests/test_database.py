"""Tests for filmbox.core.database.PersistenceGateway against in-memory SQLite."""

import unittest
from decimal import Decimal
from unittest.mock import MagicMock

from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from filmbox.core.database import (
    DuplicateEmailError,
    PersistenceError,
    PersistenceGateway,
    _is_email_conflict,
)
from filmbox.models import Order, User

# SQLite cannot open a file in a missing directory, so every connect fails.
UNREACHABLE_URL = "sqlite:////nonexistent-dir/filmbox.db"


def _gateway() -> PersistenceGateway:
    """Gateway over a single shared in-memory SQLite connection, schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    gateway = PersistenceGateway(engine)
    gateway.initialize()
    return gateway


def _order_kwargs(**overrides: object) -> dict:
    kwargs = {
        "film_title": "Dune: Part Two",
        "film_id": 693134,
        "format": "IMAX",
        "quantity": 2,
        "price": Decimal("9.50"),
        "total": Decimal("19.00"),
    }
    kwargs.update(overrides)
    return kwargs


class TestInitialize(unittest.TestCase):
    """initialize creates both tables and is safe to call again on existing data."""

    def test_creates_tables(self) -> None:
        gateway = _gateway()
        tables = set(inspect(gateway.engine).get_table_names())
        self.assertTrue({"users", "orders"} <= tables)

    def test_idempotent_with_existing_rows(self) -> None:
        gateway = _gateway()
        gateway.insert_user("Anna", "anna@example.com", "hash")
        gateway.initialize()
        self.assertIsNotNone(gateway.find_user_by_email("anna@example.com"))

    def test_models_are_flat_tables(self) -> None:
        # Orders are always read by user_id, never through an ORM link.
        self.assertEqual(list(inspect(User).relationships.keys()), [])
        self.assertEqual(list(inspect(Order).relationships.keys()), [])

    def test_failure_wrapped(self) -> None:
        gateway = PersistenceGateway(create_engine(UNREACHABLE_URL))
        with self.assertRaises(PersistenceError):
            gateway.initialize()


class TestUsers(unittest.TestCase):

    def setUp(self) -> None:
        self.gateway = _gateway()

    def test_insert_returns_public_fields_only(self) -> None:
        user = self.gateway.insert_user("Anna", "anna@example.com", "secret-hash")
        self.assertEqual(user.name, "Anna")
        self.assertEqual(user.email, "anna@example.com")
        self.assertIsInstance(user.id, int)
        self.assertNotIn("password_hash", user.model_dump())

    def test_find_by_email(self) -> None:
        self.gateway.insert_user("Anna", "anna@example.com", "secret-hash")
        found = self.gateway.find_user_by_email("anna@example.com")
        self.assertIsInstance(found, User)
        self.assertEqual(found.password_hash, "secret-hash")
        self.assertIsNotNone(found.created_at)

    def test_find_missing(self) -> None:
        self.assertIsNone(self.gateway.find_user_by_email("nobody@example.com"))

    def test_unique_violation_is_duplicate_error(self) -> None:
        self.gateway.insert_user("Anna", "anna@example.com", "h1")
        with self.assertRaises(DuplicateEmailError):
            self.gateway.insert_user("Other Anna", "anna@example.com", "h2")
        # Gateway stays usable after the rollback.
        self.assertEqual(self.gateway.find_user_by_email("anna@example.com").name, "Anna")

    def test_other_integrity_error_not_duplicate(self) -> None:
        with self.assertRaises(PersistenceError) as ctx:
            # NOT NULL violation on name
            self.gateway.insert_user(None, "anna@example.com", "hash")
        self.assertNotIsInstance(ctx.exception, DuplicateEmailError)
        self.assertIsNone(self.gateway.find_user_by_email("anna@example.com"))

    def test_lookup_failure_wrapped(self) -> None:
        broken = PersistenceGateway(create_engine(UNREACHABLE_URL))
        with self.assertRaises(PersistenceError) as ctx:
            broken.find_user_by_email("anna@example.com")
        self.assertNotIsInstance(ctx.exception, DuplicateEmailError)
        self.assertIsNotNone(ctx.exception.cause)


class TestEmailConflictDetection(unittest.TestCase):
    """_is_email_conflict trusts the reported constraint name when the driver gives one."""

    def _error(self, constraint: str | None, message: str) -> IntegrityError:
        orig = MagicMock()
        orig.diag.constraint_name = constraint
        orig.__str__.return_value = message
        return IntegrityError("INSERT INTO users ...", {}, orig)

    def test_email_constraint(self) -> None:
        self.assertTrue(_is_email_conflict(self._error("uq_users_email", "duplicate key")))

    def test_other_constraint(self) -> None:
        error = self._error("pk_users", "duplicate key value violates users.email-like text")
        self.assertFalse(_is_email_conflict(error))

    def test_sqlite_message_fallback(self) -> None:
        self.assertTrue(
            _is_email_conflict(self._error(None, "UNIQUE constraint failed: users.email"))
        )
        self.assertFalse(
            _is_email_conflict(self._error(None, "NOT NULL constraint failed: users.name"))
        )


class TestOrders(unittest.TestCase):

    def setUp(self) -> None:
        self.gateway = _gateway()
        self.user = self.gateway.insert_user("Anna", "anna@example.com", "hash")

    def test_insert_returns_full_row(self) -> None:
        order = self.gateway.insert_order(user_id=self.user.id, **_order_kwargs())
        self.assertEqual(order.user_id, self.user.id)
        self.assertEqual(order.film_title, "Dune: Part Two")
        self.assertEqual(order.film_id, 693134)
        self.assertEqual(order.format, "IMAX")
        self.assertEqual(order.quantity, 2)
        self.assertEqual(order.price, Decimal("9.50"))
        self.assertEqual(order.total, Decimal("19.00"))
        self.assertIsNotNone(order.created_at)

    def test_total_stored_verbatim(self) -> None:
        order = self.gateway.insert_order(
            user_id=self.user.id, **_order_kwargs(quantity=3, total=Decimal("5.00"))
        )
        self.assertEqual(order.total, Decimal("5.00"))

    def test_film_id_optional(self) -> None:
        order = self.gateway.insert_order(user_id=self.user.id, **_order_kwargs(film_id=None))
        self.assertIsNone(order.film_id)

    def test_list_newest_first(self) -> None:
        first = self.gateway.insert_order(user_id=self.user.id, **_order_kwargs(film_title="First"))
        second = self.gateway.insert_order(user_id=self.user.id, **_order_kwargs(film_title="Second"))
        orders = self.gateway.list_orders_for_user(self.user.id)
        self.assertEqual([o.id for o in orders], [second.id, first.id])

    def test_list_scoped_to_owner(self) -> None:
        other = self.gateway.insert_user("Boris", "boris@example.com", "hash")
        self.gateway.insert_order(user_id=other.id, **_order_kwargs())
        self.assertEqual(self.gateway.list_orders_for_user(self.user.id), [])
        self.assertEqual(len(self.gateway.list_orders_for_user(other.id)), 1)

    def test_list_unknown_user_is_empty(self) -> None:
        self.assertEqual(self.gateway.list_orders_for_user(9999), [])

    def test_insert_failure_wrapped(self) -> None:
        with self.assertRaises(PersistenceError):
            # NOT NULL violation on film_title
            self.gateway.insert_order(user_id=self.user.id, **_order_kwargs(film_title=None))


if __name__ == "__main__":
    unittest.main()
