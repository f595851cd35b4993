"""
Unit tests for the ContentRecord model.
"""

import pytest

from content_core.model.content_record import ContentRecord, ContentState, DetailCollection


class TestDetails:
    """Test detail and detail collection access."""

    def test_item_access_delegates_to_details(self):
        record = ContentRecord(title="Page")
        record["Text"] = "Hello"

        assert record["Text"] == "Hello"
        assert record.details == {"Text": "Hello"}
        assert record["Missing"] is None

    def test_setting_none_removes_detail(self):
        record = ContentRecord(title="Page")
        record["Text"] = "Hello"
        record["Text"] = None

        assert "Text" not in record.details

    def test_detail_collection_created_on_demand(self):
        record = ContentRecord(title="Page")

        assert record.get_detail_collection("Tags", create=False) is None

        tags = record.get_detail_collection("Tags")
        tags.append("news")
        tags.append("company")

        assert record.get_detail_collection("Tags") is tags
        assert list(tags) == ["news", "company"]
        assert len(tags) == 2

        tags.clear()
        assert len(tags) == 0

    def test_detail_collection_equality(self):
        assert DetailCollection("Tags", ["a"]) == DetailCollection("Tags", ["a"])
        assert DetailCollection("Tags", ["a"]) != DetailCollection("Links", ["a"])
        assert DetailCollection("Tags", ["a"]) != ["a"]


class TestHierarchy:
    """Test parent and children handling."""

    def test_constructor_parent_registers_child(self):
        root = ContentRecord(title="Root")
        page = ContentRecord(title="Page", parent=root)

        assert page.parent is root
        assert root.children == [page]

    def test_add_to_moves_record(self):
        first = ContentRecord(title="First")
        second = ContentRecord(title="Second")
        page = ContentRecord(title="Page", parent=first)

        page.add_to(second)

        assert first.children == []
        assert second.children == [page]

        page.add_to(None)
        assert page.parent is None
        assert second.children == []

    def test_reference_ids(self):
        root = ContentRecord(title="Root", record_id=1)
        page = ContentRecord(title="Page", parent=root, record_id=2)
        version = ContentRecord(title="Page", version_of=page)

        assert page.parent_id == 1
        assert version.version_of_id == 2
        assert version.is_version
        assert not page.is_version
        assert root.parent_id is None


class TestClone:
    """Test the explicit copy policy."""

    def setup_method(self):
        self.root = ContentRecord(title="Root", record_id=1)
        self.record = ContentRecord(
            title="Page",
            name="page",
            state=ContentState.PUBLISHED,
            version_index=4,
            created=100.0,
            updated=200.0,
            published=150.0,
            expires=900.0,
            sort_order=2,
            visible=False,
            saved_by="editor",
            parent=self.root,
            record_id=5,
        )
        self.record["Text"] = {"body": "Hello"}
        self.record.get_detail_collection("Tags").append("news")
        self.child = ContentRecord(title="Child", parent=self.record, record_id=6)

    def test_clone_copies_fields_and_resets_identity(self):
        cloned = self.record.clone()

        assert cloned.record_id is None
        assert cloned.title == "Page"
        assert cloned.name == "page"
        assert cloned.state == ContentState.PUBLISHED
        assert cloned.version_index == 4
        assert (cloned.created, cloned.updated, cloned.published, cloned.expires) == (
            100.0,
            200.0,
            150.0,
            900.0,
        )
        assert cloned.sort_order == 2
        assert cloned.visible is False
        assert cloned.saved_by == "editor"

    def test_clone_keeps_parent_reference_without_joining_hierarchy(self):
        cloned = self.record.clone()

        assert cloned.parent is self.root
        assert self.root.children == [self.record]

    def test_clone_deep_copies_details(self):
        cloned = self.record.clone()

        cloned["Text"]["body"] = "Changed"
        cloned.get_detail_collection("Tags").append("other")

        assert self.record["Text"] == {"body": "Hello"}
        assert list(self.record.get_detail_collection("Tags")) == ["news"]

    def test_clone_excludes_children_by_default(self):
        assert self.record.clone().children == []

    def test_clone_with_children(self):
        cloned = self.record.clone(include_children=True)

        assert len(cloned.children) == 1
        child_clone = cloned.children[0]
        assert child_clone is not self.child
        assert child_clone.record_id is None
        assert child_clone.parent is cloned
        assert child_clone.title == "Child"
        assert self.record.children == [self.child]


class TestUpdateFrom:
    """Test the update-from contract."""

    def test_update_from_preserves_identity(self):
        parent = ContentRecord(title="Root", record_id=1)
        master = ContentRecord(title="Master", record_id=2)
        target = ContentRecord(title="Target", parent=parent, version_of=master, version_index=3, record_id=10)
        child = ContentRecord(title="Child", parent=target)

        source = ContentRecord(title="Source", state=ContentState.WAITING, version_index=9, record_id=20)
        source["Text"] = "From source"
        source.get_detail_collection("Tags").append("copied")

        target.update_from(source)

        assert target.record_id == 10
        assert target.parent is parent
        assert target.version_of is master
        assert target.version_index == 3
        assert target.children == [child]
        assert target.title == "Source"
        assert target.state == ContentState.WAITING
        assert target["Text"] == "From source"
        assert list(target.get_detail_collection("Tags")) == ["copied"]

    def test_update_from_copies_collections(self):
        source = ContentRecord(title="Source")
        source.get_detail_collection("Tags").append("a")
        target = ContentRecord(title="Target")

        target.update_from(source)
        source.get_detail_collection("Tags").append("b")

        assert list(target.get_detail_collection("Tags")) == ["a"]

    def test_update_from_rejects_other_types(self):
        with pytest.raises(TypeError):
            ContentRecord(title="Target").update_from({"title": "Source"})


class TestSerialization:
    """Test row conversion."""

    def test_to_dict_uses_reference_ids(self):
        root = ContentRecord(title="Root", record_id=1)
        master = ContentRecord(title="Master", record_id=2)
        record = ContentRecord(title="Version", parent=root, version_of=master, record_id=3)
        record.get_detail_collection("Tags").append("a")

        row = record.to_dict()

        assert row["parent_id"] == 1
        assert row["version_of_id"] == 2
        assert row["state"] == "new"
        assert row["detail_collections"] == {"Tags": ["a"]}

    def test_from_dict_restores_fields(self):
        record = ContentRecord(title="Page", state=ContentState.DRAFT, record_id=7, sort_order=1)
        record["Text"] = "Hello"
        record.get_detail_collection("Tags").append("a")

        restored = ContentRecord.from_dict(record.to_dict())

        assert restored.record_id == 7
        assert restored.title == "Page"
        assert restored.state == ContentState.DRAFT
        assert restored.sort_order == 1
        assert restored["Text"] == "Hello"
        assert restored.get_detail_collection("Tags") == DetailCollection("Tags", ["a"])
        assert restored.parent is None
        assert restored.version_of is None


class TestIdentity:
    """Test equality and hashing."""

    def test_saved_records_compare_by_id(self):
        assert ContentRecord(title="A", record_id=1) == ContentRecord(title="B", record_id=1)
        assert ContentRecord(title="A", record_id=1) != ContentRecord(title="A", record_id=2)
        assert hash(ContentRecord(record_id=1)) == hash(ContentRecord(record_id=1))

    def test_unsaved_records_compare_by_identity(self):
        record = ContentRecord(title="A")

        assert record == record
        assert record != ContentRecord(title="A")
        assert record != ContentRecord(title="A", record_id=1)
