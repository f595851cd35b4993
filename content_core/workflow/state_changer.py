"""
State policy for content records.

All lifecycle state assignments go through the StateChanger so that state
transitions are logged and observable on the event channel.
"""

from typing import Optional

from content_core.events.event_system import EventChannel, ItemEvent, VersionEventType
from content_core.model.content_record import ContentRecord, ContentState
from content_core.monitoring.structured_logger import get_logger


class StateChanger:
    """Assigns lifecycle states to records."""

    def __init__(self, event_channel: Optional[EventChannel] = None):
        self.event_channel = event_channel
        self.logger = get_logger(__name__, "StateChanger")

    def change_to(self, record: ContentRecord, target_state: ContentState) -> ContentRecord:
        """
        Set the record's lifecycle state.

        Args:
            record: Record whose state changes
            target_state: New lifecycle state

        Returns:
            The same record
        """
        previous_state = record.state
        record.state = target_state

        self.logger.debug(
            "Record state changed",
            record_id=record.record_id,
            from_state=previous_state.value,
            to_state=target_state.value,
        )

        if self.event_channel is not None:
            self.event_channel.publish(ItemEvent(VersionEventType.STATE_CHANGED, record))

        return record
