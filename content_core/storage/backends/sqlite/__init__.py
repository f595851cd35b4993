"""
SQLite record store backend implementation.

This module provides a SQLite-based implementation of the record store
interface for single-process deployments that need durable history.
"""

from .sqlite_store import SqliteRecordStore

__all__ = ["SqliteRecordStore"]
