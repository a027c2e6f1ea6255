"""Mini README: Abstract storage interface shared by every TrackEase backend.

Structure:
    * User - stored account with its password hash.
    * StorageError / TransactionNotFoundError / DuplicateUserError - failures.
    * TransactionStore - abstract interface implemented by each backend.

Stores are the sole source of truth. A successful ``create_transaction`` or
``delete_transaction`` is visible to the next ``list_transactions`` call in
the same process. ``owner=None`` means the caller is not scoped to a user
(the unauthenticated deployment); any other value restricts both reads and
deletes to that user's records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..finance import Transaction
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class StorageError(RuntimeError):
    """Raised when the backing medium cannot be read or written."""


class TransactionNotFoundError(KeyError):
    """Raised when a delete matches no record in the caller's scope."""


class DuplicateUserError(ValueError):
    """Raised when registering an email that already exists."""


@dataclass(slots=True, frozen=True)
class User:
    """Registered account; ``password_hash`` never leaves the server."""

    user_id: str
    email: str
    password_hash: str

    def public_dict(self) -> Dict[str, str]:
        return {"id": self.user_id, "email": self.email}


class TransactionStore(ABC):
    """Base interface for transaction and user persistence."""

    backend_name: str = "generic"

    @abstractmethod
    def list_transactions(self, owner: Optional[str] = None) -> List[Transaction]:
        """Return every transaction in scope, in insertion order."""

    @abstractmethod
    def create_transaction(self, transaction: Transaction) -> Transaction:
        """Persist a validated transaction and return it with its assigned id."""

    @abstractmethod
    def delete_transaction(self, transaction_id: str, owner: Optional[str] = None) -> None:
        """Remove exactly one record or raise ``TransactionNotFoundError``."""

    @abstractmethod
    def create_user(self, email: str, password_hash: str) -> User:
        """Store a new account or raise ``DuplicateUserError``."""

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Return the account for ``email`` if registered."""

    def initialise_schema(self) -> None:
        """Prepare the backing medium; backends without a schema do nothing."""

    def close(self) -> None:
        """Release held resources."""

        LOGGER.debug("Closing %s store", self.backend_name)
