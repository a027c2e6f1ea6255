"""Mini README: Relational transaction store built on SQLAlchemy Core.

Structure:
    * METADATA / USERS / TRANSACTIONS - table definitions.
    * SqlTransactionStore - backend issuing one statement per operation.

PostgreSQL is the production target (``postgresql+psycopg2://...``); any
SQLAlchemy URL works, and the tests run against SQLite files. Each
operation runs in its own short transaction, so the database's own
statement atomicity is the only consistency guarantee. The ``seq`` column
records insertion order independently of the opaque string identifiers.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import List, Optional

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    insert,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..finance import Transaction, transaction_from_record
from ..logging_utils import get_logger
from .base import DuplicateUserError, StorageError, TransactionNotFoundError, TransactionStore, User

LOGGER = get_logger(__name__)

METADATA = MetaData()

USERS = Table(
    "users",
    METADATA,
    Column("id", String(32), primary_key=True),
    Column("email", String(320), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
)

TRANSACTIONS = Table(
    "transactions",
    METADATA,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(32), nullable=False, unique=True),
    Column("user_id", String(32), ForeignKey("users.id"), nullable=True, index=True),
    Column("type", String(16), nullable=False),
    Column("category", String(255), nullable=False),
    Column("amount_cents", BigInteger, nullable=False),
    Column("note", Text, nullable=False, default=""),
    Column("date", String(32), nullable=False),
)


class SqlTransactionStore(TransactionStore):
    """Persist transactions and users in two relational tables."""

    backend_name = "sql"

    def __init__(self, database_url: Optional[str] = None, *, engine: Optional[Engine] = None) -> None:
        if engine is None:
            if not database_url:
                raise ValueError("A database URL is required for the SQL backend.")
            connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
            engine = create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)
        self.engine = engine
        LOGGER.debug("SQL store bound to %s", self.engine.url.render_as_string(hide_password=True))

    def initialise_schema(self) -> None:
        """Create the ``users`` and ``transactions`` tables when missing."""

        try:
            METADATA.create_all(self.engine)
        except SQLAlchemyError as error:
            raise StorageError(f"Unable to create tables: {error}") from error
        LOGGER.info("Database schema ready")

    def list_transactions(self, owner: Optional[str] = None) -> List[Transaction]:
        statement = select(TRANSACTIONS).order_by(TRANSACTIONS.c.seq)
        if owner is not None:
            statement = statement.where(TRANSACTIONS.c.user_id == owner)
        try:
            with self.engine.connect() as connection:
                rows = connection.execute(statement).mappings().all()
        except SQLAlchemyError as error:
            raise StorageError(f"Failed to fetch transactions: {error}") from error

        transactions: List[Transaction] = []
        for row in rows:
            try:
                transactions.append(transaction_from_record(row))
            except (KeyError, TypeError, ValueError) as error:
                LOGGER.warning("Skipping unreadable row %r: %s", row.get("id"), error)
        return transactions

    def create_transaction(self, transaction: Transaction) -> Transaction:
        stored = replace(transaction, transaction_id=uuid.uuid4().hex)
        statement = insert(TRANSACTIONS).values(
            id=stored.transaction_id,
            user_id=stored.owner,
            type=stored.transaction_type.value,
            category=stored.category,
            amount_cents=stored.amount_cents,
            note=stored.note,
            date=stored.date,
        )
        try:
            with self.engine.begin() as connection:
                connection.execute(statement)
        except SQLAlchemyError as error:
            raise StorageError(f"Failed to add transaction: {error}") from error
        LOGGER.info("Recorded %s transaction %s", stored.transaction_type.value, stored.transaction_id)
        return stored

    def delete_transaction(self, transaction_id: str, owner: Optional[str] = None) -> None:
        statement = delete(TRANSACTIONS).where(TRANSACTIONS.c.id == transaction_id)
        if owner is not None:
            statement = statement.where(TRANSACTIONS.c.user_id == owner)
        try:
            with self.engine.begin() as connection:
                result = connection.execute(statement)
        except SQLAlchemyError as error:
            raise StorageError(f"Failed to delete transaction: {error}") from error
        if result.rowcount == 0:
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        LOGGER.info("Deleted transaction %s", transaction_id)

    def create_user(self, email: str, password_hash: str) -> User:
        user = User(user_id=uuid.uuid4().hex, email=email, password_hash=password_hash)
        statement = insert(USERS).values(id=user.user_id, email=email, password=password_hash)
        try:
            with self.engine.begin() as connection:
                connection.execute(statement)
        except IntegrityError as error:
            raise DuplicateUserError(f"Email {email} is already registered") from error
        except SQLAlchemyError as error:
            raise StorageError(f"Registration failed: {error}") from error
        LOGGER.info("Registered user %s", user.user_id)
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        statement = select(USERS).where(USERS.c.email == email)
        try:
            with self.engine.connect() as connection:
                row = connection.execute(statement).mappings().first()
        except SQLAlchemyError as error:
            raise StorageError(f"Failed to look up user: {error}") from error
        if row is None:
            return None
        return User(user_id=row["id"], email=row["email"], password_hash=row["password"])

    def close(self) -> None:
        super().close()
        self.engine.dispose()
