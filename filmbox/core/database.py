"""PostgreSQL connection pool, schema bootstrap and the queries the API runs."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from filmbox.models import Base, Order, User
from filmbox.schemas.auth import UserPublic
from filmbox.schemas.order import OrderRead

if TYPE_CHECKING:
    from filmbox.core.config import Settings

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when a query or insert fails; the original error is kept as cause."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class DuplicateEmailError(PersistenceError):
    """Raised when inserting a user whose email is already taken."""


# Postgres reports the constraint name; SQLite only names the column.
EMAIL_UNIQUE_CONSTRAINT = "uq_users_email"
EMAIL_UNIQUE_COLUMN = "users.email"


def _is_email_conflict(error: IntegrityError) -> bool:
    diag = getattr(error.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == EMAIL_UNIQUE_CONSTRAINT
    message = str(error.orig)
    return EMAIL_UNIQUE_CONSTRAINT in message or EMAIL_UNIQUE_COLUMN in message


def create_db_engine(settings: "Settings") -> Engine:
    """Build the pooled engine from DATABASE_URL and DATABASE_SSL."""
    connect_args: dict[str, str] = {}
    if settings.DATABASE_SSL:
        connect_args["sslmode"] = "require"
    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        echo=settings.DEBUG,
        connect_args=connect_args,
    )


class PersistenceGateway:
    """
    Owns the connection pool and runs every database operation of the API.

    Built once at startup and handed to request handlers through
    get_gateway. Each method checks a session out of the pool and returns it
    before exiting, whether the work succeeded or not.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=engine,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "PersistenceGateway":
        return cls(create_db_engine(settings))

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session and close it when done."""
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    def initialize(self) -> None:
        """Create the users and orders tables if they do not exist yet."""
        try:
            Base.metadata.create_all(bind=self.engine, checkfirst=True)
        except SQLAlchemyError as e:
            raise PersistenceError("Database initialization failed", cause=e) from e
        logger.info("Database tables initialized")

    def check_connection(self) -> bool:
        """Run a trivial query to verify the database is reachable."""
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()

    def find_user_by_email(self, email: str) -> User | None:
        """Return the user with this (already lower-cased) email, or None."""
        try:
            with self.session() as db:
                return db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            raise PersistenceError("User lookup failed", cause=e) from e

    def insert_user(self, name: str, email: str, password_hash: str) -> UserPublic:
        """
        Insert a user and return its public fields.

        Raises DuplicateEmailError when the unique constraint on email rejects
        the row; this is the authoritative conflict signal under concurrent
        registrations.
        """
        user = User(name=name, email=email, password_hash=password_hash)
        try:
            with self.session() as db:
                db.add(user)
                try:
                    db.commit()
                except IntegrityError as e:
                    db.rollback()
                    if _is_email_conflict(e):
                        raise DuplicateEmailError("Email already registered", cause=e) from e
                    raise
                db.refresh(user)
                return UserPublic.model_validate(user)
        except SQLAlchemyError as e:
            raise PersistenceError("User insert failed", cause=e) from e

    def list_orders_for_user(self, user_id: int) -> list[OrderRead]:
        """Return all orders owned by user_id, newest first."""
        try:
            with self.session() as db:
                rows = (
                    db.query(Order)
                    .filter(Order.user_id == user_id)
                    .order_by(Order.created_at.desc(), Order.id.desc())
                    .all()
                )
                return [OrderRead.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError("Order lookup failed", cause=e) from e

    def insert_order(
        self,
        user_id: int,
        film_title: str,
        film_id: int | None,
        format: str,
        quantity: int,
        price: Decimal,
        total: Decimal,
    ) -> OrderRead:
        """Insert an order as given (total is not recomputed) and return the stored row."""
        order = Order(
            user_id=user_id,
            film_title=film_title,
            film_id=film_id,
            format=format,
            quantity=quantity,
            price=price,
            total=total,
        )
        try:
            with self.session() as db:
                db.add(order)
                try:
                    db.commit()
                except SQLAlchemyError:
                    db.rollback()
                    raise
                db.refresh(order)
                return OrderRead.model_validate(order)
        except SQLAlchemyError as e:
            raise PersistenceError("Order insert failed", cause=e) from e


def get_gateway(request: Request) -> PersistenceGateway:
    """Dependency that returns the gateway built by the application lifespan."""
    return request.app.state.gateway
