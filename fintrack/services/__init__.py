"""Services package."""

from fintrack.services.storage import (
    CorruptDataError,
    InMemoryGateway,
    JsonFileGateway,
    PersistenceGateway,
    StorageError,
    WriteFailedError,
)

__all__ = [
    "CorruptDataError",
    "InMemoryGateway",
    "JsonFileGateway",
    "PersistenceGateway",
    "StorageError",
    "WriteFailedError",
]
