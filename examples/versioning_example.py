#!/usr/bin/env python3
"""
Versioning Example for Content Versioning

This example demonstrates:
- Saving snapshots before editing a live record
- Replacing live content and keeping the previous content
- Vetoing snapshots through notifications
- Listing and trimming a record's history
"""

import tempfile
from pathlib import Path

from content_core import ContentRecord, ContentState
from content_core.monitoring import LoggingContext, configure_logging
from content_core.storage.backends.sqlite import SqliteRecordStore
from content_core.versioning import VersionManager


def print_history(manager: VersionManager, page: ContentRecord):
    for record in manager.get_versions_of(page):
        kind = "live" if not record.is_version else "version"
        print(f"  [{kind:7}] #{record.record_id} index={record.version_index} "
              f"state={record.state.value} text={record['Text']!r}")


def main():
    configure_logging("INFO")

    with tempfile.TemporaryDirectory() as temp_dir:
        store = SqliteRecordStore(database_path=str(Path(temp_dir) / "content.db"))
        manager = VersionManager(store)

        manager.on_saved_version(
            lambda event: print(f"📸 Saved version #{event.item.record_id} of #{event.item.version_of_id}")
        )

        root = ContentRecord(title="Start")
        store.save_or_update(root)

        page = ContentRecord(title="About us", parent=root, state=ContentState.PUBLISHED)
        page["Text"] = "We make things."
        store.save_or_update(page)

        with LoggingContext(user_id="editor"):
            for text in ("We make better things.", "We make the best things.", "We make everything."):
                draft = ContentRecord(title="About us", state=ContentState.PUBLISHED)
                draft["Text"] = text
                manager.replace_version(page, draft)

        print("\n📚 History after three edits:")
        print_history(manager, page)

        def skip_unpublished(event):
            if event.affected_item.state != ContentState.PUBLISHED:
                event.cancel = True

        manager.on_saving_version(skip_unpublished)
        page.state = ContentState.DRAFT
        store.update(page)
        result = manager.save_version(page)
        print(f"\n🚫 Snapshot of a draft was {'cancelled' if result is None else 'saved'}")

        deleted = manager.trim_version_count_to(page, 2)
        print(f"\n✂️  Trimmed {len(deleted)} old versions:")
        print_history(manager, page)

        store.close()


if __name__ == "__main__":
    main()
