"""Mini README: Backend registry mapping configuration names to stores.

Structure:
    * StoreRegistry - manages registration and instantiation of
      ``TransactionStore`` implementations.
    * REGISTRY - shared registry with the built-in backends.
    * create_store - builds the store selected by ``TrackEaseSettings``.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable

from ..configuration import TrackEaseSettings
from ..logging_utils import get_logger
from .base import TransactionStore
from .json_store import JsonFileStore
from .memory import MemoryTransactionStore
from .sql_store import SqlTransactionStore

LOGGER = get_logger(__name__)

StoreFactory = Callable[[TrackEaseSettings], TransactionStore]


class StoreRegistry:
    """Simple registry for mapping backend identifiers to store factories."""

    def __init__(self) -> None:
        self._factories: Dict[str, StoreFactory] = {}

    def register(self, identifier: str, factory: StoreFactory) -> None:
        """Register a factory under a case-insensitive backend name."""

        LOGGER.debug("Registering storage backend '%s'", identifier.lower())
        self._factories[identifier.lower()] = factory

    def available_backends(self) -> Iterable[str]:
        """Return backend identifiers for display."""

        return sorted(self._factories.keys())

    def create(self, identifier: str, settings: TrackEaseSettings) -> TransactionStore:
        """Instantiate the backend matching the identifier."""

        factory = self._factories.get(identifier.lower())
        if not factory:
            raise KeyError(f"Unknown storage backend '{identifier}'")
        LOGGER.info("Creating storage backend '%s'", identifier)
        return factory(settings)


def _sql_store(settings: TrackEaseSettings) -> TransactionStore:
    store = SqlTransactionStore(settings.database_url)
    store.initialise_schema()
    return store


REGISTRY = StoreRegistry()
REGISTRY.register("file", lambda settings: JsonFileStore(settings.resolved_transactions_file()))
REGISTRY.register("memory", lambda settings: MemoryTransactionStore())
REGISTRY.register("sql", _sql_store)
REGISTRY.register("postgres", _sql_store)


def create_store(settings: TrackEaseSettings) -> TransactionStore:
    """Build the store selected by ``settings.storage_backend``."""

    return REGISTRY.create(settings.storage_backend, settings)
