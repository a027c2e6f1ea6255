"""Mini README: Persistence backends for TrackEase.

Re-exports the abstract ``TransactionStore`` contract, its error types and
the built-in implementations: an in-memory store, a JSON document store and
a relational store. ``create_store`` picks one from configuration.
"""

from .base import DuplicateUserError, StorageError, TransactionNotFoundError, TransactionStore, User
from .json_store import JsonFileStore
from .memory import MemoryTransactionStore
from .registry import REGISTRY, StoreRegistry, create_store
from .sql_store import SqlTransactionStore

__all__ = [
    "DuplicateUserError",
    "JsonFileStore",
    "MemoryTransactionStore",
    "REGISTRY",
    "SqlTransactionStore",
    "StorageError",
    "StoreRegistry",
    "TransactionNotFoundError",
    "TransactionStore",
    "User",
    "create_store",
]
