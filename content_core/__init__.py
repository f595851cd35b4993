"""
Content versioning engine.

Keeps the history of content records: snapshots of previous content,
in-place replacement of live content, history queries and retention
trimming, on top of pluggable record stores.
"""

from .model import ContentRecord, ContentState, DetailCollection
from .versioning import VersionManager, create_version_manager

__version__ = "0.1.0"

__all__ = [
    "ContentRecord",
    "ContentState",
    "DetailCollection",
    "VersionManager",
    "create_version_manager",
]
