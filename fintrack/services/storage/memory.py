"""In-memory storage, used by tests and when no data directory is usable."""

from typing import Optional

import structlog

from fintrack.models.records import AppData
from fintrack.services.storage.interface import PersistenceGateway


logger = structlog.get_logger(__name__)


class InMemoryGateway(PersistenceGateway):
    """
    Keeps the serialized blob in a string.

    The blob round-trips through JSON exactly like the file store does,
    so tests exercise the same encoding.
    """

    def __init__(self, blob: Optional[str] = None, fail_saves: bool = False):
        self.blob = blob
        self.fail_saves = fail_saves
        self.save_count = 0

    def load(self) -> AppData:
        if not self.blob:
            return AppData()
        try:
            return AppData.model_validate_json(self.blob)
        except ValueError as e:
            logger.error("ledger_load_failed", error=str(e))
            return AppData()

    def save(self, data: AppData) -> bool:
        if self.fail_saves:
            logger.error("ledger_save_failed", error="storage quota exceeded")
            return False
        self.blob = data.model_dump_json(by_alias=True)
        self.save_count += 1
        return True
