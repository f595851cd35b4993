"""
JSON file record store backend.
"""

from .json_file_store import JsonFileRecordStore

__all__ = ["JsonFileRecordStore"]
