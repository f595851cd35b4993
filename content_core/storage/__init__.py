"""
Storage layer for the versioning engine.

This module provides the abstract record store interface, the shared
unit-of-work base class and concrete in-memory, JSON file and SQLite
backends.
"""

from .interfaces.record_store_interface import RecordStoreInterface, Transaction
from .unit_of_work import UnitOfWorkStore
from .factory import create_store, list_available_backends, is_backend_available

__all__ = [
    "RecordStoreInterface",
    "Transaction",
    "UnitOfWorkStore",
    "create_store",
    "list_available_backends",
    "is_backend_available",
]
