"""
Data model for versionable content records.
"""

from .content_record import ContentRecord, ContentState, DetailCollection, PARENT_ID_DETAIL

__all__ = ["ContentRecord", "ContentState", "DetailCollection", "PARENT_ID_DETAIL"]
