"""
Shared unit-of-work behaviour for record store backends.

Backends only implement row-level hooks; this base class provides the
identity map, buffering of updates and deletes until flush, implicit
transactions for writes issued outside a transaction, nested transaction
joining and rollback that resynchronizes tracked records with the store.
"""

import logging
from abc import abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from content_core.exceptions import RecordNotFoundError, TransactionError
from content_core.model.content_record import ContentRecord
from content_core.query.query_types import QuerySpec, QueryValidator
from content_core.storage.interfaces.record_store_interface import (
    RecordStoreInterface,
    Transaction,
)

_UPDATE = "update"
_DELETE = "delete"


class UnitOfWorkStore(RecordStoreInterface):
    """
    Record store base class implementing the unit-of-work pattern.

    Inserts are written immediately so new records get their id at once;
    updates and deletes are queued until ``flush()``, which also runs
    before every query and on commit.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__)
        self.validator = QueryValidator()

        self._identity_map: Dict[int, ContentRecord] = {}
        self._pending: List[Tuple[str, ContentRecord]] = []
        self._inserted: List[ContentRecord] = []
        self._transaction_depth = 0
        self._rollback_only = False
        self._connected = False

    # Row-level hooks
    @abstractmethod
    def _open(self) -> None:
        pass

    @abstractmethod
    def _insert_row(self, row: Dict[str, Any]) -> int:
        """Insert a row and return the id assigned to it."""
        pass

    @abstractmethod
    def _update_row(self, row: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def _delete_row(self, record_id: int) -> None:
        pass

    @abstractmethod
    def _load_row(self, record_id: int) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def _query_rows(self, query_spec: QuerySpec) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def _begin(self) -> None:
        pass

    @abstractmethod
    def _commit(self) -> None:
        pass

    @abstractmethod
    def _rollback(self) -> None:
        pass

    # Connection Management
    def connect(self) -> None:
        if self._connected:
            return
        self._open()
        self._connected = True

    @property
    def in_transaction(self) -> bool:
        return self._transaction_depth > 0

    @property
    def has_pending_changes(self) -> bool:
        return bool(self._pending)

    # Record Operations
    def get(self, record_id: int) -> Optional[ContentRecord]:
        if record_id is None:
            return None
        self.connect()

        if record_id in self._identity_map:
            return self._identity_map[record_id]

        row = self._load_row(record_id)
        if row is None:
            return None
        return self._materialize(row)

    def save_or_update(self, record: ContentRecord) -> ContentRecord:
        if record.record_id is None:
            self._in_transaction(lambda: self._insert(record))
        else:
            self._in_transaction(lambda: self._enqueue(_UPDATE, record))
        return record

    def update(self, record: ContentRecord) -> ContentRecord:
        self._require_persisted(record)
        self._in_transaction(lambda: self._enqueue(_UPDATE, record))
        return record

    def delete(self, record: ContentRecord) -> None:
        self._require_persisted(record)
        self._in_transaction(lambda: self._enqueue(_DELETE, record))

    def flush(self) -> None:
        self.connect()
        pending, self._pending = self._pending, []
        for operation, record in pending:
            if operation == _UPDATE:
                self._update_row(record.to_dict())
            else:
                self._delete_row(record.record_id)
                self._identity_map.pop(record.record_id, None)
        if pending:
            self.logger.debug(f"Flushed {len(pending)} pending change(s)")

    def find(self, query_spec: QuerySpec) -> List[ContentRecord]:
        self.connect()
        self.validator.check(query_spec)
        self.flush()
        return [self._materialize(row) for row in self._query_rows(query_spec)]

    # Transactions
    def begin_transaction(self) -> Transaction:
        self.connect()
        nested = self._transaction_depth > 0
        if not nested:
            self._begin()
            self._rollback_only = False
            self._inserted = []
        self._transaction_depth += 1
        return Transaction(self, nested=nested)

    def _commit_transaction(self) -> None:
        if self._transaction_depth > 1:
            self._rollback_transaction()
            raise TransactionError("Transaction committed while a joined scope is still open")
        if self._rollback_only:
            self._rollback_transaction()
            raise TransactionError("Transaction was marked rollback-only by a nested scope")

        self.flush()
        self._commit()
        self._transaction_depth = 0
        self._inserted = []
        self.logger.debug("Transaction committed")

    def _rollback_transaction(self) -> None:
        if self._transaction_depth == 0:
            return

        self._pending = []
        self._rollback()
        self._transaction_depth = 0
        self._rollback_only = False

        for record in self._inserted:
            self._identity_map.pop(record.record_id, None)
            record.record_id = None
        self._inserted = []

        # Tracked records may hold changes that no longer exist in the store
        for record_id, record in list(self._identity_map.items()):
            row = self._load_row(record_id)
            if row is None:
                del self._identity_map[record_id]
            else:
                self._refresh(record, row)

        self.logger.info("Transaction rolled back")

    def _end_nested_transaction(self, rollback: bool) -> None:
        # Outer scope already ended
        if self._transaction_depth == 0:
            return
        self._transaction_depth -= 1
        if rollback:
            self._rollback_only = True

    # Helpers
    def _in_transaction(self, action):
        """Run a write inside the current transaction or a new implicit one."""
        if self._transaction_depth:
            action()
            return
        with self.begin_transaction() as transaction:
            action()
            transaction.commit()

    def _insert(self, record: ContentRecord):
        record.record_id = self._insert_row(record.to_dict())
        self._identity_map[record.record_id] = record
        self._inserted.append(record)

    def _enqueue(self, operation: str, record: ContentRecord):
        if operation == _DELETE:
            self._pending = [(op, r) for op, r in self._pending if r is not record]
        elif any(op == _UPDATE and r is record for op, r in self._pending):
            return
        self._pending.append((operation, record))
        self._identity_map.setdefault(record.record_id, record)

    def _require_persisted(self, record: ContentRecord):
        self.connect()
        if record.record_id is None:
            raise RecordNotFoundError(None)
        if record.record_id not in self._identity_map and self._load_row(record.record_id) is None:
            raise RecordNotFoundError(record.record_id)

    def _materialize(self, row: Dict[str, Any]) -> ContentRecord:
        record_id = row["record_id"]
        if record_id in self._identity_map:
            return self._identity_map[record_id]

        record = ContentRecord.from_dict(row)
        self._identity_map[record_id] = record
        self._resolve_references(record, row)
        return record

    def _refresh(self, record: ContentRecord, row: Dict[str, Any]):
        record.load_row(row)
        self._resolve_references(record, row)

    def _resolve_references(self, record: ContentRecord, row: Dict[str, Any]):
        version_of_id = row.get("version_of_id")
        record.version_of = self.get(version_of_id) if version_of_id is not None else None
        parent_id = row.get("parent_id")
        record.parent = self.get(parent_id) if parent_id is not None else None
