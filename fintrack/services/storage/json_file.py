"""
Local JSON File Storage

DESIGN DECISION: A single JSON file per storage key is the local
key-value store. The file name is the storage key, the content is the
whole ledger.

TRADEOFFS:
- Every save rewrites the whole file (fine for a personal ledger)
- Writes go to a temp file first and are swapped in with os.replace,
  so a crash mid-write leaves the previous blob intact
- No locking; see the last-write-wins note in interface.py
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from fintrack.config import get_settings
from fintrack.models.records import AppData
from fintrack.services.storage.interface import (
    CorruptDataError,
    PersistenceGateway,
    StorageError,
    WriteFailedError,
)


logger = structlog.get_logger(__name__)


class JsonFileGateway(PersistenceGateway):
    """Stores the ledger blob as <data_dir>/<storage_key>.json."""

    def __init__(self, path: Optional[Path] = None):
        """
        Args:
            path: Blob file location. Defaults to the configured
                  data directory and storage key.
        """
        self._path = Path(path) if path else get_settings().storage.blob_path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AppData:
        if not self._path.exists():
            logger.info("ledger_blob_missing", path=str(self._path))
            return AppData()

        try:
            return self._read_blob()
        except StorageError as e:
            logger.error("ledger_load_failed", path=str(self._path), error=str(e))
            return AppData()

    def save(self, data: AppData) -> bool:
        try:
            self._write_blob(data.model_dump_json(by_alias=True, indent=2))
            return True
        except StorageError as e:
            logger.error("ledger_save_failed", path=str(self._path), error=str(e))
            return False

    def _read_blob(self) -> AppData:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CorruptDataError(f"Cannot read ledger blob: {e}") from e

        if not raw.strip():
            return AppData()

        try:
            return AppData.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptDataError(
                f"Stored ledger is invalid: {e.error_count()} error(s)"
            ) from e

    def _write_blob(self, content: str) -> None:
        try:
            self._atomic_write(content)
        except OSError as e:
            raise WriteFailedError(f"Cannot write ledger blob: {e}") from e

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, max=0.5),
        reraise=True,
    )
    def _atomic_write(self, content: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
