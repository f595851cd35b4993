"""
Unit tests for the StateChanger state policy.
"""

from unittest.mock import MagicMock

from content_core.events import EventChannel, ItemEvent, VersionEventType
from content_core.model.content_record import ContentRecord, ContentState
from content_core.workflow import StateChanger


class TestStateChanger:
    """Test state assignment."""

    def test_change_to_sets_state(self):
        record = ContentRecord(title="Page")

        result = StateChanger().change_to(record, ContentState.PUBLISHED)

        assert result is record
        assert record.state == ContentState.PUBLISHED

    def test_change_to_publishes_state_changed(self):
        channel = EventChannel()
        handler = MagicMock()
        channel.subscribe(VersionEventType.STATE_CHANGED, handler)
        record = ContentRecord(title="Page", state=ContentState.DRAFT)

        StateChanger(channel).change_to(record, ContentState.UNPUBLISHED)

        handler.assert_called_once()
        event = handler.call_args[0][0]
        assert isinstance(event, ItemEvent)
        assert event.item is record
        assert event.item.state == ContentState.UNPUBLISHED

    def test_change_to_same_state(self):
        channel = MagicMock()
        record = ContentRecord(title="Page", state=ContentState.DRAFT)

        StateChanger(channel).change_to(record, ContentState.DRAFT)

        assert record.state == ContentState.DRAFT
        channel.publish.assert_called_once()
