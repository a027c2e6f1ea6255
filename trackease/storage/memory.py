"""Mini README: In-memory transaction store.

Keeps transactions and users in dictionaries for the lifetime of the
process. Useful for demos and tests where durability does not matter; it
honours the same owner scoping and not-found semantics as the durable
backends.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from ..finance import Transaction
from ..logging_utils import get_logger
from .base import DuplicateUserError, TransactionNotFoundError, TransactionStore, User

LOGGER = get_logger(__name__)


class MemoryTransactionStore(TransactionStore):
    """Manage a process-local collection of transactions."""

    backend_name = "memory"

    def __init__(self, transactions: Optional[Iterable[Transaction]] = None) -> None:
        self._transactions: Dict[str, Transaction] = {}
        self._users: Dict[str, User] = {}
        for transaction in transactions or []:
            self._register(transaction)
        LOGGER.debug("Memory store initialised with %s transactions", len(self._transactions))

    def _register(self, transaction: Transaction) -> None:
        """Store a transaction ensuring identifiers remain unique."""

        if transaction.transaction_id in self._transactions:
            raise ValueError(f"Transaction {transaction.transaction_id} already exists.")
        self._transactions[transaction.transaction_id] = transaction

    def list_transactions(self, owner: Optional[str] = None) -> List[Transaction]:
        return [
            transaction
            for transaction in self._transactions.values()
            if owner is None or transaction.owner == owner
        ]

    def create_transaction(self, transaction: Transaction) -> Transaction:
        stored = replace(transaction, transaction_id=uuid.uuid4().hex)
        self._register(stored)
        LOGGER.info("Recorded %s transaction %s", stored.transaction_type.value, stored.transaction_id)
        return stored

    def delete_transaction(self, transaction_id: str, owner: Optional[str] = None) -> None:
        transaction = self._transactions.get(transaction_id)
        if transaction is None or (owner is not None and transaction.owner != owner):
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        del self._transactions[transaction_id]
        LOGGER.info("Deleted transaction %s", transaction_id)

    def create_user(self, email: str, password_hash: str) -> User:
        if email in self._users:
            raise DuplicateUserError(f"Email {email} is already registered")
        user = User(user_id=uuid.uuid4().hex, email=email, password_hash=password_hash)
        self._users[email] = user
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._users.get(email)
