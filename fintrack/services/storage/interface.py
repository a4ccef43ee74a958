"""
Abstract Persistence Interface

DESIGN DECISION: The ledger is persisted as ONE blob holding both record
collections. It is loaded once at startup and overwritten wholesale on
every change. There are no partial or delta writes and no queries.

This allows us to:
1. Swap the local file for another key-value store later
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from storage

CONCURRENCY: A single session is the only writer. If two sessions share
one store, the last whole-blob write wins; nothing is merged.

Failures never reach the caller: load() falls back to an empty ledger and
save() reports False. The in-memory collections stay authoritative for
the rest of the session either way.
"""

from abc import ABC, abstractmethod

from fintrack.models.records import AppData


class PersistenceGateway(ABC):
    """
    Abstract interface for ledger persistence.

    Any storage implementation must honor the no-raise contract.
    """

    @abstractmethod
    def load(self) -> AppData:
        """
        Load the previously saved ledger.

        Returns:
            The stored collections, or an empty AppData if nothing is
            stored or the stored value is unreadable
        """
        pass

    @abstractmethod
    def save(self, data: AppData) -> bool:
        """
        Overwrite the stored ledger with data.

        Args:
            data: The full ledger to store

        Returns:
            True if saved, False if the write failed (already logged)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored blob exists but cannot be decoded."""
    pass


class WriteFailedError(StorageError):
    """Stored blob could not be written."""
    pass
