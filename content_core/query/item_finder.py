"""
Finder that builds and runs record queries against a record store.
"""

from typing import List, TYPE_CHECKING

from content_core.model.content_record import ContentRecord
from content_core.query.query_types import QueryBuilder, QueryValidator

if TYPE_CHECKING:
    from content_core.storage.interfaces.record_store_interface import RecordStoreInterface


class BoundQuery(QueryBuilder):
    """A query builder that can execute itself against the store it came from."""

    def __init__(self, store: "RecordStoreInterface", validator: QueryValidator):
        super().__init__()
        self._store = store
        self._validator = validator

    def select(self) -> List[ContentRecord]:
        """Execute the query and return the matching records."""
        return self._store.find(self._validator.check(self.build()))

    def first(self):
        """Execute the query and return the first match or None."""
        previous_limit = self._limit
        self._limit = 1
        try:
            results = self.select()
        finally:
            self._limit = previous_limit
        return results[0] if results else None

    def count(self) -> int:
        return len(self.select())


class ItemFinder:
    """
    Entry point for querying a record store.

    Every call to ``query`` or ``where`` returns a fresh builder, e.g.::

        finder.where("version_of_id", item).or_where("record_id", item.record_id)
              .order_by("version_index", ascending=False).select()
    """

    def __init__(self, store: "RecordStoreInterface"):
        self.store = store
        self.validator = QueryValidator()

    def query(self) -> BoundQuery:
        return BoundQuery(self.store, self.validator)

    def where(self, field: str, value) -> BoundQuery:
        return self.query().where(field, value)

    def all(self) -> List[ContentRecord]:
        return self.query().select()
