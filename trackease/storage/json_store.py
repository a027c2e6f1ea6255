"""Mini README: JSON document transaction store.

Structure:
    * JsonFileStore - persists ``{"transactions": [...], "users": [...]}`` to one file.

Every mutation re-reads the document and rewrites it in full, which gives
read-after-write consistency within a process. The store assumes a single
writer: there is no locking, so concurrent writers race and the last one
wins, and a crash mid-write can leave a truncated file. Records that cannot
be loaded (unsupported type, missing id) are skipped with a warning rather
than failing the whole listing.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..finance import Transaction, transaction_from_record
from ..logging_utils import get_logger
from .base import DuplicateUserError, StorageError, TransactionNotFoundError, TransactionStore, User

LOGGER = get_logger(__name__)


class JsonFileStore(TransactionStore):
    """Persist transactions and users to a single JSON file."""

    backend_name = "file"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        LOGGER.debug("JSON store bound to %s", self.path)

    def _read(self) -> Dict[str, List[Dict[str, Any]]]:
        """Load the document, treating a missing file as an empty store."""

        if not self.path.exists():
            return {"transactions": [], "users": []}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                document = json.load(handle)
        except (OSError, json.JSONDecodeError) as error:
            raise StorageError(f"Unable to read transaction file {self.path}: {error}") from error
        if not isinstance(document, dict):
            raise StorageError(f"Transaction file {self.path} does not contain a JSON object")
        for key in ("transactions", "users"):
            document.setdefault(key, [])
            if not isinstance(document[key], list):
                raise StorageError(f"Transaction file {self.path} has a non-list '{key}' entry")
        return document

    def _write(self, document: Dict[str, List[Dict[str, Any]]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2, ensure_ascii=False)
        except OSError as error:
            raise StorageError(f"Unable to write transaction file {self.path}: {error}") from error

    def list_transactions(self, owner: Optional[str] = None) -> List[Transaction]:
        transactions: List[Transaction] = []
        for record in self._read()["transactions"]:
            if not isinstance(record, dict):
                LOGGER.warning("Skipping non-object transaction entry %r", record)
                continue
            try:
                transaction = transaction_from_record(record)
            except (KeyError, TypeError, ValueError) as error:
                LOGGER.warning("Skipping unreadable record %r: %s", record.get("id"), error)
                continue
            if owner is None or transaction.owner == owner:
                transactions.append(transaction)
        return transactions

    def create_transaction(self, transaction: Transaction) -> Transaction:
        document = self._read()
        stored = replace(transaction, transaction_id=uuid.uuid4().hex)
        document["transactions"].append(stored.as_record())
        self._write(document)
        LOGGER.info("Recorded %s transaction %s", stored.transaction_type.value, stored.transaction_id)
        return stored

    def delete_transaction(self, transaction_id: str, owner: Optional[str] = None) -> None:
        document = self._read()
        records = document["transactions"]
        for index, record in enumerate(records):
            if not isinstance(record, dict) or str(record.get("id")) != transaction_id:
                continue
            record_owner = record.get("owner")
            if owner is not None and record_owner != owner:
                continue
            del records[index]
            self._write(document)
            LOGGER.info("Deleted transaction %s", transaction_id)
            return
        raise TransactionNotFoundError(f"Transaction {transaction_id} not found")

    def create_user(self, email: str, password_hash: str) -> User:
        document = self._read()
        if any(isinstance(record, dict) and record.get("email") == email for record in document["users"]):
            raise DuplicateUserError(f"Email {email} is already registered")
        user = User(user_id=uuid.uuid4().hex, email=email, password_hash=password_hash)
        document["users"].append(
            {"id": user.user_id, "email": user.email, "password": user.password_hash}
        )
        self._write(document)
        LOGGER.info("Registered user %s", user.user_id)
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        for record in self._read()["users"]:
            if isinstance(record, dict) and record.get("email") == email:
                return User(
                    user_id=str(record["id"]),
                    email=record["email"],
                    password_hash=record["password"],
                )
        return None
