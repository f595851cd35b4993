"""
Content record module for versionable content.

This module defines the structure of the records managed by the version
manager: the live record, its historical snapshots, and the named details
and detail collections they carry.
"""

import copy
import time
from enum import Enum
from typing import Optional, Dict, Any, List, Iterator

# Detail key under which a snapshot keeps the identity of its former parent
PARENT_ID_DETAIL = "ParentID"


class ContentState(Enum):
    """Lifecycle states a content record can carry."""

    NEW = "new"
    DRAFT = "draft"
    WAITING = "waiting"
    PUBLISHED = "published"
    UNPUBLISHED = "unpublished"
    DELETED = "deleted"


class DetailCollection:
    """An ordered sequence of detail values grouped under a name."""

    def __init__(self, name: str, details: Optional[List[Any]] = None):
        self.name = name
        self.details: List[Any] = list(details) if details else []

    def append(self, value: Any):
        self.details.append(value)

    def clear(self):
        self.details.clear()

    def __iter__(self) -> Iterator[Any]:
        return iter(self.details)

    def __len__(self) -> int:
        return len(self.details)

    def __eq__(self, other):
        if not isinstance(other, DetailCollection):
            return False
        return self.name == other.name and self.details == other.details

    def __repr__(self):
        return f"DetailCollection(name='{self.name}', details={self.details!r})"


class ContentRecord:
    """
    Represents a versionable content record.

    A record is either the live record for its identity or a historical
    snapshot of it (``version_of`` is set). Records form a containment
    hierarchy through ``parent`` and ``children``; snapshots are always
    detached from it.
    """

    def __init__(
        self,
        title: str = "",
        name: Optional[str] = None,
        state: ContentState = ContentState.NEW,
        version_index: int = 0,
        created: Optional[float] = None,
        updated: Optional[float] = None,
        published: Optional[float] = None,
        expires: Optional[float] = None,
        sort_order: int = 0,
        visible: bool = True,
        saved_by: Optional[str] = None,
        parent: Optional["ContentRecord"] = None,
        version_of: Optional["ContentRecord"] = None,
        record_id: Optional[int] = None,
    ):
        """
        Initialize a ContentRecord with the provided attributes.

        Args:
            title: Human readable title
            name: URL segment name of the record
            state: Lifecycle state (assigned through the state policy)
            version_index: Ordinal used to order a record's history, higher is newer
            created: Creation timestamp (defaults to current time)
            updated: Last update timestamp (defaults to creation time)
            published: Publication timestamp, if any
            expires: Expiry timestamp, if any
            sort_order: Position among siblings
            visible: Whether the record is shown in navigation
            saved_by: Name of the user who last saved the record
            parent: Containing record in the hierarchy
            version_of: Live record this record is a snapshot of
            record_id: Identifier assigned by the store (None if not yet saved)
        """
        now = time.time()
        self.record_id = record_id
        self.title = title
        self.name = name
        self.state = state
        self.version_index = version_index
        self.created = created if created is not None else now
        self.updated = updated if updated is not None else self.created
        self.published = published
        self.expires = expires
        self.sort_order = sort_order
        self.visible = visible
        self.saved_by = saved_by
        self.version_of = version_of
        self.details: Dict[str, Any] = {}
        self.detail_collections: Dict[str, DetailCollection] = {}
        self.children: List["ContentRecord"] = []
        self.parent = None
        if parent is not None:
            self.add_to(parent)

    # Hierarchy

    def add_to(self, parent: Optional["ContentRecord"]):
        """Move this record under ``parent`` (or out of the hierarchy when None)."""
        if self.parent is not None and self in self.parent.children:
            self.parent.children.remove(self)
        self.parent = parent
        if parent is not None and self not in parent.children:
            parent.children.append(self)

    @property
    def parent_id(self) -> Optional[int]:
        return self.parent.record_id if self.parent is not None else None

    @property
    def version_of_id(self) -> Optional[int]:
        return self.version_of.record_id if self.version_of is not None else None

    @property
    def is_version(self) -> bool:
        """True when this record is a historical snapshot rather than the live record."""
        return self.version_of is not None

    # Details

    def __getitem__(self, key: str) -> Any:
        return self.details.get(key)

    def __setitem__(self, key: str, value: Any):
        if value is None:
            self.details.pop(key, None)
        else:
            self.details[key] = value

    def get_detail_collection(self, name: str, create: bool = True) -> Optional[DetailCollection]:
        """Get the named detail collection, creating it when missing and ``create`` is set."""
        collection = self.detail_collections.get(name)
        if collection is None and create:
            collection = DetailCollection(name)
            self.detail_collections[name] = collection
        return collection

    # Copying

    def clone(self, include_children: bool = False) -> "ContentRecord":
        """
        Create an unsaved copy of this record.

        Content fields and the version_of and parent references are copied,
        details and detail collections are deep-copied and the identity is
        reset. Children are only cloned when ``include_children`` is set, in
        which case each child clone is placed under the new record.

        Args:
            include_children: Whether to clone the record's children recursively

        Returns:
            A new ContentRecord without a record_id
        """
        cloned = ContentRecord(
            title=self.title,
            name=self.name,
            state=self.state,
            version_index=self.version_index,
            created=self.created,
            updated=self.updated,
            published=self.published,
            expires=self.expires,
            sort_order=self.sort_order,
            visible=self.visible,
            saved_by=self.saved_by,
            version_of=self.version_of,
        )
        # Plain reference, the clone is not added to the parent's children
        cloned.parent = self.parent
        cloned.details = copy.deepcopy(self.details)
        cloned.detail_collections = copy.deepcopy(self.detail_collections)

        if include_children:
            for child in self.children:
                child.clone(include_children=True).add_to(cloned)

        return cloned

    def update_from(self, source: "ContentRecord"):
        """
        Overwrite this record's content from another record, preserving identity.

        record_id, version_of, parent, children and version_index are never
        overwritten.

        Args:
            source: Record to copy content from

        Raises:
            TypeError: If source is not a ContentRecord
        """
        if not isinstance(source, ContentRecord):
            raise TypeError(f"Cannot update a ContentRecord from {type(source).__name__}")

        self.title = source.title
        self.name = source.name
        self.state = source.state
        self.created = source.created
        self.updated = source.updated
        self.published = source.published
        self.expires = source.expires
        self.sort_order = source.sort_order
        self.visible = source.visible
        self.saved_by = source.saved_by
        self.details.update(copy.deepcopy(source.details))
        for name, collection in source.detail_collections.items():
            self.detail_collections[name] = copy.deepcopy(collection)

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the ContentRecord to a flat row.

        References are stored as ids so the row can be persisted as is.

        Returns:
            Dictionary containing all persisted attributes
        """
        return {
            "record_id": self.record_id,
            "title": self.title,
            "name": self.name,
            "state": self.state.value,
            "version_of_id": self.version_of_id,
            "version_index": self.version_index,
            "parent_id": self.parent_id,
            "created": self.created,
            "updated": self.updated,
            "published": self.published,
            "expires": self.expires,
            "sort_order": self.sort_order,
            "visible": self.visible,
            "saved_by": self.saved_by,
            "details": copy.deepcopy(self.details),
            "detail_collections": {
                name: list(collection.details)
                for name, collection in self.detail_collections.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentRecord":
        """
        Create a ContentRecord from a row produced by ``to_dict``.

        ``version_of`` and ``parent`` are left unset; resolving ids into
        references is the store's job.

        Args:
            data: Dictionary containing record attributes

        Returns:
            A new ContentRecord instance
        """
        record = cls(record_id=data.get("record_id"))
        record.load_row(data)
        return record

    def load_row(self, data: Dict[str, Any]):
        """Reset this record's scalar fields, details and collections from a row."""
        self.title = data.get("title", "")
        self.name = data.get("name")
        self.state = ContentState(data.get("state", ContentState.NEW.value))
        self.version_index = data.get("version_index", 0)
        self.created = data["created"]
        self.updated = data["updated"]
        self.published = data.get("published")
        self.expires = data.get("expires")
        self.sort_order = data.get("sort_order", 0)
        self.visible = bool(data.get("visible", True))
        self.saved_by = data.get("saved_by")
        self.details = copy.deepcopy(data.get("details") or {})
        self.detail_collections = {
            name: DetailCollection(name, values)
            for name, values in (data.get("detail_collections") or {}).items()
        }

    # Identity

    def __eq__(self, other):
        """
        Records with assigned ids are equal when their ids match; unsaved
        records are only equal to themselves.
        """
        if not isinstance(other, ContentRecord):
            return False
        if self.record_id is None or other.record_id is None:
            return self is other
        return self.record_id == other.record_id

    def __hash__(self):
        return id(self) if self.record_id is None else hash(("ContentRecord", self.record_id))

    def __repr__(self):
        record_id_str = str(self.record_id) if self.record_id is not None else "None"
        return (
            f"ContentRecord(record_id={record_id_str}, "
            f"title='{self.title[:30]}{'...' if len(self.title) > 30 else ''}', "
            f"state={self.state.name}, "
            f"version_index={self.version_index}, "
            f"version_of={self.version_of_id})"
        )
