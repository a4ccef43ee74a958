"""
Storage Services Package

Provides the persistence interface and its implementations.
The ledger is stored as one JSON blob in a local file by default.
"""

from fintrack.services.storage.interface import (
    CorruptDataError,
    PersistenceGateway,
    StorageError,
    WriteFailedError,
)
from fintrack.services.storage.json_file import JsonFileGateway
from fintrack.services.storage.memory import InMemoryGateway

__all__ = [
    # Interface
    "PersistenceGateway",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    "WriteFailedError",
    # Implementations
    "InMemoryGateway",
    "JsonFileGateway",
]
