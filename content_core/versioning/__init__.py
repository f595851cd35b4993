"""
Versioning for content records: snapshots, replacement, history and retention.
"""

from .version_manager import VersionManager, create_version_manager

__all__ = ["VersionManager", "create_version_manager"]
