"""
JSON file record store for lightweight persistence.

This module extends the in-memory store with a JSON file on disk: rows are
loaded when the store connects and written back on every commit. Ideal for
development, testing and small single-user deployments.
"""

import json
import os
from pathlib import Path

from content_core.storage.backends.memory.memory_store import MemoryRecordStore


class JsonFileRecordStore(MemoryRecordStore):
    """
    JSON file-based implementation of the RecordStoreInterface.

    The file is replaced atomically on commit, so a failed or rolled back
    transaction never reaches the disk.
    """

    def __init__(self, path: str = "./data/records.json", pretty_print: bool = True):
        """
        Initialize JsonFileRecordStore with a file path and formatting options.

        Args:
            path: Path of the JSON file holding the records
            pretty_print: Whether to format the JSON file for readability
        """
        super().__init__()
        self.path = Path(path)
        self.pretty_print = pretty_print

    def _open(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if self.path.exists():
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._rows = {int(record_id): row for record_id, row in data.get("records", {}).items()}
            self._next_id = data.get("next_id", max(self._rows, default=0) + 1)

        self.logger.info(f"Connected to JSON file record store at {self.path} ({len(self._rows)} records)")

    def close(self) -> None:
        if self._connected and not self.in_transaction:
            self._save_data()
        super().close()
        self.logger.info("Disconnected from JSON file record store")

    def is_available(self) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            return os.access(self.path.parent, os.W_OK)
        except OSError as e:
            self.logger.error(f"JSON file record store is not available: {e}")
            return False

    def _commit(self) -> None:
        self._save_data()
        super()._commit()

    def _save_data(self):
        data = {
            "next_id": self._next_id,
            "records": {str(record_id): row for record_id, row in self._rows.items()},
        }
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            if self.pretty_print:
                json.dump(data, f, indent=2, sort_keys=True)
            else:
                json.dump(data, f)
        os.replace(temp_path, self.path)
