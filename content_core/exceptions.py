"""
Exception hierarchy for the content versioning engine.

Cancellation of a versioning operation by a subscriber is not an error and
has no exception here; it is reported through the operation's return value.
"""


class ContentCoreError(Exception):
    """Base class for all content_core errors."""

    pass


class InvalidArgumentError(ContentCoreError, ValueError):
    """Raised when an operation receives an argument outside its domain."""

    pass


class StorageError(ContentCoreError):
    """Raised when a record store operation fails."""

    pass


class RecordNotFoundError(StorageError):
    """Raised when a record expected to be persisted does not exist in the store."""

    def __init__(self, record_id):
        self.record_id = record_id
        super().__init__(f"Record with ID {record_id} not found")


class TransactionError(StorageError):
    """Raised when a transaction is used outside its valid lifecycle."""

    pass
