"""
VersionManager for keeping the history of content records.

This module provides functionality for:
1. Saving a detached snapshot of a live record before it is modified
2. Replacing a live record's content with another record's content, optionally
   preserving the previous content as a snapshot
3. Listing a record's history, newest first
4. Trimming a record's history to a maximum number of versions
"""

import time
from typing import Callable, List, Optional

from content_core.config import get_config
from content_core.events.event_system import (
    CancellableDestinationEvent,
    CancellableItemEvent,
    EventChannel,
    ItemEvent,
    VersionEventType,
)
from content_core.exceptions import InvalidArgumentError, RecordNotFoundError
from content_core.model.content_record import PARENT_ID_DETAIL, ContentRecord, ContentState
from content_core.monitoring.structured_logger import get_logger
from content_core.query.item_finder import ItemFinder
from content_core.storage.factory import create_store
from content_core.storage.interfaces.record_store_interface import RecordStoreInterface
from content_core.workflow.state_changer import StateChanger


class VersionManager:
    """
    Handles saving, replacing, listing and trimming versions of content records.

    A version is a snapshot of a live record: a copy detached from the
    hierarchy that points back to the live record through ``version_of``.
    Subscribers on ``events`` are notified before and after snapshots are
    saved and content is replaced, and may cancel or substitute records in
    the "before" notifications.
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        finder: Optional[ItemFinder] = None,
        state_changer: Optional[StateChanger] = None,
        events: Optional[EventChannel] = None,
        snapshot_offset_seconds: Optional[float] = None,
        maximum_versions: Optional[int] = None,
    ):
        """
        Initialize the VersionManager.

        Args:
            store: Record store holding live records and their snapshots
            finder: Finder used to query history (defaults to one bound to ``store``)
            state_changer: State policy for snapshots (defaults to one on ``events``)
            events: Notification channel (a private channel is created when omitted)
            snapshot_offset_seconds: How far in the past snapshots expire,
                defaults to ``versioning.snapshot_offset_seconds``
            maximum_versions: Retention cap used by ``trim_version_count_to(item)``,
                defaults to ``versioning.maximum_versions_per_record``
        """
        versioning_config = get_config().config.versioning

        self.store = store
        self.events = events if events is not None else EventChannel()
        self.finder = finder if finder is not None else ItemFinder(store)
        self.state_changer = (
            state_changer if state_changer is not None else StateChanger(self.events)
        )
        self.snapshot_offset_seconds = (
            snapshot_offset_seconds
            if snapshot_offset_seconds is not None
            else versioning_config.snapshot_offset_seconds
        )
        self.maximum_versions = (
            maximum_versions
            if maximum_versions is not None
            else versioning_config.maximum_versions_per_record
        )
        self.logger = get_logger(__name__, "VersionManager")

    # Subscriptions

    def on_saving_version(self, handler: Callable[[CancellableItemEvent], None]):
        self.events.subscribe(VersionEventType.ITEM_SAVING_VERSION, handler)

    def on_saved_version(self, handler: Callable[[ItemEvent], None]):
        self.events.subscribe(VersionEventType.ITEM_SAVED_VERSION, handler)

    def on_replacing_version(self, handler: Callable[[CancellableDestinationEvent], None]):
        self.events.subscribe(VersionEventType.ITEM_REPLACING_VERSION, handler)

    def on_replaced_version(self, handler: Callable[[ItemEvent], None]):
        self.events.subscribe(VersionEventType.ITEM_REPLACED_VERSION, handler)

    # Operations

    def save_version(self, item: ContentRecord) -> Optional[ContentRecord]:
        """
        Persist a snapshot of the item's current content.

        Call this before modifying the live record. Subscribers of
        ITEM_SAVING_VERSION may substitute the record to snapshot or cancel.

        Args:
            item: The live record to snapshot

        Returns:
            The persisted snapshot, or None if a subscriber cancelled

        Raises:
            RecordNotFoundError: If the record to snapshot was never persisted
        """
        saving = self.events.publish(
            CancellableItemEvent(VersionEventType.ITEM_SAVING_VERSION, item)
        )
        if saving.cancel:
            self.logger.info("Saving version cancelled", record_id=item.record_id)
            return None

        source = saving.affected_item
        if source.record_id is None:
            raise RecordNotFoundError(None)

        old_version = source.clone(include_children=False)

        if source.state == ContentState.PUBLISHED:
            self.state_changer.change_to(old_version, ContentState.UNPUBLISHED)
        else:
            self.state_changer.change_to(old_version, ContentState.DRAFT)

        superseded_at = time.time() - self.snapshot_offset_seconds
        old_version.expires = superseded_at
        old_version.updated = superseded_at

        old_version.parent = None
        if source.parent is not None:
            old_version[PARENT_ID_DETAIL] = source.parent.record_id

        old_version.version_of = source

        self.store.save_or_update(old_version)

        self.events.publish(ItemEvent(VersionEventType.ITEM_SAVED_VERSION, old_version))

        self.logger.info(
            "Saved version",
            record_id=source.record_id,
            version_id=old_version.record_id,
            version_index=old_version.version_index,
        )
        return old_version

    def replace_version(
        self,
        current_item: ContentRecord,
        replacement_item: ContentRecord,
        store_current_version: bool = True,
    ) -> Optional[ContentRecord]:
        """
        Make the replacement's content the live content of the current item.

        The current item keeps its identity, hierarchy position and history
        link; its details and detail collections are cleared before the
        replacement's content is copied, so nothing of the previous content
        survives. The replacement itself is neither modified nor saved.
        Snapshot and overwrite are written in one transaction.

        Args:
            current_item: The live record to overwrite
            replacement_item: Record whose content becomes the live content
            store_current_version: Whether to snapshot the current content first

        Returns:
            The snapshot of the previous content when ``store_current_version``
            is set, otherwise the current item. If a subscriber cancels the
            replacement, the (possibly substituted) current item is returned
            unchanged.
        """
        replacing = self.events.publish(
            CancellableDestinationEvent(
                VersionEventType.ITEM_REPLACING_VERSION,
                current_item,
                destination=replacement_item,
            )
        )
        current_item = replacing.affected_item
        replacement_item = replacing.destination
        if replacing.cancel:
            self.logger.info("Replacing version cancelled", record_id=current_item.record_id)
            return current_item

        with self.store.begin_transaction() as transaction:
            prior_version = None
            if store_current_version:
                prior_version = self.save_version(current_item)

            self._replace(current_item, replacement_item, prior_version)

            transaction.commit()

        self.logger.info(
            "Replaced version",
            record_id=current_item.record_id,
            version_id=prior_version.record_id if prior_version is not None else None,
            version_index=current_item.version_index,
        )

        if store_current_version:
            return prior_version
        return current_item

    def _replace(
        self,
        current_item: ContentRecord,
        replacement_item: ContentRecord,
        prior_version: Optional[ContentRecord],
    ):
        current_item.details.clear()
        for collection in current_item.detail_collections.values():
            collection.clear()
        current_item.detail_collections.clear()

        current_item.update_from(replacement_item)
        current_item.updated = time.time()

        # Live record sorts ahead of its newest snapshot
        if prior_version is not None and current_item.version_index <= prior_version.version_index:
            current_item.version_index = prior_version.version_index + 1

        self.store.update(current_item)

        self.events.publish(ItemEvent(VersionEventType.ITEM_REPLACED_VERSION, replacement_item))

        self.store.flush()

    def get_versions_of(self, item: ContentRecord, count: Optional[int] = None) -> List[ContentRecord]:
        """
        Retrieve a record and its snapshots, newest first.

        Args:
            item: The live record
            count: Maximum number of records to return, or None for all

        Returns:
            Records ordered by version_index descending, the live record ahead of
            snapshots with the same index, remaining ties broken by newest id
        """
        if item.record_id is None:
            return []

        query = (
            self.finder.where("version_of_id", item.record_id)
            .or_where("record_id", item.record_id)
            .order_by("version_index", ascending=False)
            # Live record has no version_of_id and sorts ahead of snapshots sharing its index
            .order_by("version_of_id")
            .order_by("record_id", ascending=False)
        )
        if count is not None:
            query.limit(count)
        return query.select()

    def trim_version_count_to(
        self, item: ContentRecord, maximum_number_of_versions: Optional[int] = None
    ) -> List[ContentRecord]:
        """
        Delete the oldest snapshots of a record beyond a retention cap.

        The cap counts the live record, so a cap of 3 keeps the live record
        and its two newest snapshots. A cap of 0 disables trimming.

        Args:
            item: The live record whose history is trimmed
            maximum_number_of_versions: Retention cap, or None to use the
                configured ``maximum_versions_per_record``

        Returns:
            The deleted snapshots, oldest last

        Raises:
            InvalidArgumentError: If the cap is negative
        """
        if maximum_number_of_versions is None:
            maximum_number_of_versions = self.maximum_versions
        if maximum_number_of_versions < 0:
            raise InvalidArgumentError(
                f"maximum_number_of_versions must be zero or positive, got {maximum_number_of_versions}"
            )
        if maximum_number_of_versions == 0:
            return []

        versions = [version for version in self.get_versions_of(item) if version != item]
        maximum = maximum_number_of_versions - 1
        if len(versions) <= maximum:
            return []

        excess = versions[maximum:]
        with self.store.begin_transaction() as transaction:
            for version in excess:
                self.store.delete(version)
            self.store.flush()
            transaction.commit()

        self.logger.info(
            "Trimmed versions",
            record_id=item.record_id,
            deleted=len(excess),
            kept=len(versions) - len(excess) + 1,
        )
        return excess


def create_version_manager(
    store: Optional[RecordStoreInterface] = None, event_channel: Optional[EventChannel] = None
) -> VersionManager:
    """
    Create a VersionManager wired from configuration.

    Args:
        store: Record store to use (created with the configured backend when omitted)
        event_channel: Notification channel shared with the state policy

    Returns:
        Configured VersionManager
    """
    if store is None:
        store = create_store()
    events = event_channel if event_channel is not None else EventChannel()

    return VersionManager(store, state_changer=StateChanger(events), events=events)
