"""
In-memory record store.

Keeps record rows in a dictionary. Transactions snapshot the rows when they
begin and restore the snapshot on rollback. Ideal for tests and for
embedding the version manager without a database.
"""

import copy
from typing import Any, Dict, List, Optional

from content_core.query.evaluation import execute_query
from content_core.query.query_types import QuerySpec
from content_core.storage.unit_of_work import UnitOfWorkStore


class MemoryRecordStore(UnitOfWorkStore):
    """Dictionary-backed implementation of the RecordStoreInterface."""

    def __init__(self):
        super().__init__()
        self._rows: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1
        self._backup: Optional[Dict[int, Dict[str, Any]]] = None

    def _open(self) -> None:
        self.logger.info("Opened in-memory record store")

    def close(self) -> None:
        self._connected = False

    def is_available(self) -> bool:
        return True

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def _insert_row(self, row: Dict[str, Any]) -> int:
        record_id = self._next_id
        self._next_id += 1
        self._rows[record_id] = {**copy.deepcopy(row), "record_id": record_id}
        return record_id

    def _update_row(self, row: Dict[str, Any]) -> None:
        self._rows[row["record_id"]] = copy.deepcopy(row)

    def _delete_row(self, record_id: int) -> None:
        self._rows.pop(record_id, None)

    def _load_row(self, record_id: int) -> Optional[Dict[str, Any]]:
        row = self._rows.get(record_id)
        return copy.deepcopy(row) if row is not None else None

    def _query_rows(self, query_spec: QuerySpec) -> List[Dict[str, Any]]:
        return [copy.deepcopy(row) for row in execute_query(list(self._rows.values()), query_spec)]

    def _begin(self) -> None:
        self._backup = copy.deepcopy(self._rows)

    def _commit(self) -> None:
        self._backup = None

    def _rollback(self) -> None:
        # Ids handed out inside the transaction are not reused
        if self._backup is not None:
            self._rows = self._backup
        self._backup = None
