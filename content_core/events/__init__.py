"""
Event notifications for content versioning.
"""

from .event_system import (
    VersionEventType,
    EventMetadata,
    ItemEvent,
    CancellableItemEvent,
    CancellableDestinationEvent,
    EventChannel,
    EventHandler,
)

__all__ = [
    "VersionEventType",
    "EventMetadata",
    "ItemEvent",
    "CancellableItemEvent",
    "CancellableDestinationEvent",
    "EventChannel",
    "EventHandler",
]
