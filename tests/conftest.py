"""
Shared fixtures for the content versioning tests.
"""

import pytest

from content_core.model.content_record import ContentRecord, ContentState
from content_core.storage.backends.json_file import JsonFileRecordStore
from content_core.storage.backends.memory import MemoryRecordStore
from content_core.storage.backends.sqlite import SqliteRecordStore
from content_core.versioning import VersionManager


@pytest.fixture
def memory_store():
    store = MemoryRecordStore()
    yield store
    store.close()


@pytest.fixture
def sqlite_store(tmp_path):
    store = SqliteRecordStore(database_path=str(tmp_path / "records.db"))
    yield store
    store.close()


@pytest.fixture
def json_store(tmp_path):
    store = JsonFileRecordStore(path=str(tmp_path / "records.json"))
    yield store
    store.close()


@pytest.fixture(params=["memory", "json_file", "sqlite"])
def any_store(request, tmp_path):
    """Each record store backend in turn."""
    if request.param == "memory":
        store = MemoryRecordStore()
    elif request.param == "json_file":
        store = JsonFileRecordStore(path=str(tmp_path / "records.json"))
    else:
        store = SqliteRecordStore(database_path=str(tmp_path / "records.db"))
    yield store
    store.close()


@pytest.fixture
def version_manager(any_store):
    return VersionManager(any_store)


@pytest.fixture
def published_page(any_store):
    """A persisted, published record with a detail and a detail collection."""
    page = ContentRecord(title="About us", name="about", state=ContentState.PUBLISHED)
    page["Text"] = "We make things."
    page.get_detail_collection("Tags").append("company")
    any_store.save_or_update(page)
    return page
