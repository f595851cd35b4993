"""
Abstract interface for record store backends.

This module defines the contract the version manager relies on: CRUD on
content records, an explicit flush of pending writes, transactions that
roll back on every exit path that does not commit, and execution of query
specifications.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from content_core.exceptions import TransactionError
from content_core.model.content_record import ContentRecord
from content_core.query.query_types import QuerySpec


class Transaction:
    """
    A transaction scope acquired from a record store.

    Use it as a context manager and call ``commit()`` once all steps have
    succeeded; leaving the block without committing, or through an
    exception, rolls the work back. Transactions begun while another one is
    open on the same store join it: committing a joined transaction only
    ends the inner scope, rolling it back dooms the outer one.
    """

    def __init__(self, store: "RecordStoreInterface", nested: bool = False):
        self.store = store
        self.nested = nested
        self._active = True

    @property
    def is_active(self) -> bool:
        return self._active

    def commit(self):
        """Commit the transaction (outermost scope) or close the joined scope."""
        if not self._active:
            raise TransactionError("Transaction is no longer active")
        if not self.nested:
            self.store._commit_transaction()
        else:
            self.store._end_nested_transaction(rollback=False)
        self._active = False

    def rollback(self):
        """Roll back the transaction, or mark the enclosing one rollback-only."""
        if not self._active:
            return
        self._active = False
        if not self.nested:
            self.store._rollback_transaction()
        else:
            self.store._end_nested_transaction(rollback=True)

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._active:
            self.rollback()
        return False


class RecordStoreInterface(ABC):
    """
    Abstract base class for record store backends.

    Implementations persist ContentRecord rows and keep one in-memory
    instance per stored record, so repeated lookups of the same id return
    the same object.
    """

    # Connection Management
    @abstractmethod
    def connect(self) -> None:
        """Open the backend. Calling it again is a no-op."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the backend."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the backend can be used."""
        pass

    # Record Operations
    @abstractmethod
    def get(self, record_id: int) -> Optional[ContentRecord]:
        """
        Retrieve a record by its ID.

        Args:
            record_id: The ID of the record to retrieve

        Returns:
            The record, or None if not found
        """
        pass

    @abstractmethod
    def save_or_update(self, record: ContentRecord) -> ContentRecord:
        """
        Insert a new record (assigning its record_id) or update an existing one.

        Args:
            record: The record to persist

        Returns:
            The persisted record
        """
        pass

    @abstractmethod
    def update(self, record: ContentRecord) -> ContentRecord:
        """
        Update an already persisted record.

        Raises:
            RecordNotFoundError: If the record has never been persisted
        """
        pass

    @abstractmethod
    def delete(self, record: ContentRecord) -> None:
        """
        Delete a persisted record.

        Raises:
            RecordNotFoundError: If the record is not in the store
        """
        pass

    @abstractmethod
    def flush(self) -> None:
        """Write all pending changes of the current unit of work to the backend."""
        pass

    # Transactions
    @abstractmethod
    def begin_transaction(self) -> Transaction:
        """Open a transaction scope, joining the current one if already open."""
        pass

    @abstractmethod
    def _commit_transaction(self) -> None:
        pass

    @abstractmethod
    def _rollback_transaction(self) -> None:
        pass

    @abstractmethod
    def _end_nested_transaction(self, rollback: bool) -> None:
        pass

    # Queries
    @abstractmethod
    def find(self, query_spec: QuerySpec) -> List[ContentRecord]:
        """
        Execute a query specification.

        Args:
            query_spec: Filters, sort order and bounds of the query

        Returns:
            Matching records in query order
        """
        pass
