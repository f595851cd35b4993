"""
Storage interfaces for the versioning engine.

This module defines the abstract record store contract and the transaction
scope every backend hands out.
"""

from .record_store_interface import RecordStoreInterface, Transaction

__all__ = ["RecordStoreInterface", "Transaction"]
