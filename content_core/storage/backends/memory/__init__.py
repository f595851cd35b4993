"""
In-memory record store backend.

This module provides a dictionary-backed implementation of the record
store interface for tests and embedded use.
"""

from .memory_store import MemoryRecordStore

__all__ = ["MemoryRecordStore"]
