"""
Synchronous event channel for versioning notifications.

Handlers are invoked in-line, in registration order, before the publishing
operation continues. Cancellable events let handlers veto an operation or
substitute the records it acts on. Errors raised by handlers propagate to
the publisher.
"""

import time
import uuid
from collections import defaultdict
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from content_core.model.content_record import ContentRecord
from content_core.monitoring.structured_logger import get_logger, CorrelationIdManager


logger = get_logger(__name__, "EventChannel")


class VersionEventType(Enum):
    """Types of events emitted while versioning content."""

    ITEM_SAVING_VERSION = "item.saving_version"
    ITEM_SAVED_VERSION = "item.saved_version"
    ITEM_REPLACING_VERSION = "item.replacing_version"
    ITEM_REPLACED_VERSION = "item.replaced_version"
    STATE_CHANGED = "item.state_changed"


@dataclass
class EventMetadata:
    """Metadata for events."""

    correlation_id: Optional[str] = None
    request_id: Optional[str] = None
    user_id: Optional[str] = None
    source_component: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ItemEvent:
    """
    Event carrying the record an operation produced or acted on.

    Correlation and request IDs are taken from the logging context active
    when the event is created.
    """

    event_type: VersionEventType
    item: Optional[ContentRecord]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: float = field(default_factory=time.time)
    metadata: EventMetadata = field(default_factory=EventMetadata)

    def __post_init__(self):
        if not self.metadata.correlation_id:
            self.metadata.correlation_id = CorrelationIdManager.get_correlation_id()
        if not self.metadata.request_id:
            self.metadata.request_id = CorrelationIdManager.get_request_id()
        if not self.metadata.user_id:
            self.metadata.user_id = CorrelationIdManager.get_user_id()

    def describe(self) -> Dict[str, Any]:
        """Summarize the event for logging."""
        return {
            "event_id": self.id,
            "event_type": self.event_type.value,
            "record_id": self.item.record_id if self.item is not None else None,
        }


@dataclass
class CancellableItemEvent(ItemEvent):
    """
    Event a handler may cancel, or use to substitute the affected record.

    ``affected_item`` starts out as ``item``; the publisher reads it back
    after all handlers ran.
    """

    cancel: bool = False
    affected_item: Optional[ContentRecord] = None

    def __post_init__(self):
        super().__post_init__()
        if self.affected_item is None:
            self.affected_item = self.item


@dataclass
class CancellableDestinationEvent(CancellableItemEvent):
    """Cancellable event acting on a record and a destination record, both substitutable."""

    destination: Optional[ContentRecord] = None


EventHandler = Callable[[ItemEvent], None]


class EventChannel:
    """
    Synchronous publish/subscribe channel.

    ``publish`` returns the event after every handler ran, so callers can
    inspect cancellation and substitutions.
    """

    def __init__(self, channel_id: str = "versioning"):
        self.channel_id = channel_id
        self.handlers: Dict[VersionEventType, List[EventHandler]] = defaultdict(list)
        self.published_count = 0

    def subscribe(self, event_type: VersionEventType, handler: EventHandler):
        """Subscribe a handler to an event type."""
        self.handlers[event_type].append(handler)
        logger.debug(f"Channel {self.channel_id} subscribed handler to {event_type.value}")

    def unsubscribe(self, event_type: VersionEventType, handler: EventHandler):
        """Unsubscribe a handler from an event type."""
        self.handlers[event_type] = [h for h in self.handlers[event_type] if h != handler]

        if not self.handlers[event_type]:
            del self.handlers[event_type]

        logger.debug(f"Channel {self.channel_id} unsubscribed handler from {event_type.value}")

    def has_subscribers(self, event_type: VersionEventType) -> bool:
        return bool(self.handlers.get(event_type))

    def publish(self, event: ItemEvent) -> ItemEvent:
        """
        Invoke every handler registered for the event's type.

        Args:
            event: The event to deliver

        Returns:
            The same event, as left by the handlers
        """
        self.published_count += 1
        for handler in list(self.handlers.get(event.event_type, ())):
            handler(event)
        return event

    def get_subscriptions(self) -> Dict[str, int]:
        """Get current subscriptions."""
        return {event_type.value: len(handlers) for event_type, handlers in self.handlers.items()}
