"""Unit tests for the record query builder and in-memory evaluation."""

import pytest
from unittest.mock import MagicMock

from content_core.exceptions import InvalidArgumentError
from content_core.model.content_record import ContentRecord, ContentState
from content_core.query import (
    FilterCondition,
    FilterOperator,
    ItemFinder,
    QueryBuilder,
    QuerySort,
    QueryValidator,
    execute_query,
    row_matches,
)


class TestQueryBuilder:
    """Test the query builder functionality."""

    def test_simple_query(self):
        """Test building a single equality filter."""
        query = QueryBuilder().where("title", "Home").limit(10).build()

        assert query.criteria == [[FilterCondition("title", FilterOperator.EQ, "Home")]]
        assert query.limit == 10
        assert query.offset is None
        assert query.sorts == []

    def test_conditions_in_one_group_are_combined(self):
        query = (QueryBuilder()
                 .where("state", "draft")
                 .filter("version_index", FilterOperator.GTE, 2)
                 .build())

        assert len(query.criteria) == 1
        assert [c.field for c in query.criteria[0]] == ["state", "version_index"]

    def test_or_where_starts_new_group(self):
        query = QueryBuilder().where("version_of_id", 4).or_where("record_id", 4).build()

        assert query.criteria == [
            [FilterCondition("version_of_id", FilterOperator.EQ, 4)],
            [FilterCondition("record_id", FilterOperator.EQ, 4)],
        ]

    def test_empty_or_group_is_ignored(self):
        query = QueryBuilder().or_().where("title", "Home").or_().build()

        assert query.criteria == [[FilterCondition("title", FilterOperator.EQ, "Home")]]

    def test_values_are_normalized(self):
        record = ContentRecord(title="Master", record_id=12)
        query = (QueryBuilder()
                 .where("version_of_id", record)
                 .where("state", ContentState.PUBLISHED)
                 .where_in("parent_id", [record, 3])
                 .build())

        assert [c.value for c in query.criteria[0]] == [12, "published", [12, 3]]

    def test_sorting_and_paging(self):
        query = (QueryBuilder()
                 .order_by("version_index", ascending=False)
                 .order_by("record_id", ascending=False)
                 .limit(5)
                 .offset(10)
                 .build())

        assert query.sorts == [QuerySort("version_index", False), QuerySort("record_id", False)]
        assert query.to_dict()["limit"] == 5
        assert query.to_dict()["offset"] == 10

    def test_reset(self):
        builder = QueryBuilder().where("title", "Home").limit(1)
        query = builder.reset().build()

        assert query.criteria == []
        assert query.limit is None


class TestQueryValidator:
    """Test query validation."""

    def setup_method(self):
        self.validator = QueryValidator()

    def test_valid_query(self):
        query = QueryBuilder().where("title", "Home").order_by("updated").build()

        assert self.validator.validate_query(query) == []
        assert self.validator.check(query) is query

    def test_unknown_fields(self):
        query = QueryBuilder().where("colour", "red").order_by("size").build()

        errors = self.validator.validate_query(query)

        assert len(errors) == 2
        with pytest.raises(InvalidArgumentError):
            self.validator.check(query)

    def test_negative_bounds(self):
        query = QueryBuilder().limit(-1).offset(-2).build()

        assert len(self.validator.validate_query(query)) == 2

    def test_invalid_query_is_a_value_error(self):
        with pytest.raises(ValueError):
            self.validator.check(QueryBuilder().limit(-1).build())


class TestEvaluation:
    """Test evaluation of query specifications against rows."""

    def setup_method(self):
        self.rows = [
            {"record_id": 1, "title": "Home", "version_index": 2, "parent_id": None},
            {"record_id": 2, "title": "About", "version_index": 1, "parent_id": 1},
            {"record_id": 3, "title": "Contact", "version_index": 2, "parent_id": 1},
            {"record_id": 4, "title": "Jobs", "version_index": None, "parent_id": 1},
        ]

    def test_row_matches_any_group(self):
        criteria = QueryBuilder().where("record_id", 1).or_where("title", "About").build().criteria

        assert [row["record_id"] for row in self.rows if row_matches(row, criteria)] == [1, 2]

    def test_no_criteria_matches_everything(self):
        assert all(row_matches(row, []) for row in self.rows)

    def test_multi_key_sort(self):
        query = (QueryBuilder()
                 .order_by("version_index", ascending=False)
                 .order_by("record_id", ascending=False)
                 .build())

        result = execute_query(self.rows, query)

        assert [row["record_id"] for row in result] == [3, 1, 2, 4]

    def test_none_sorts_first_ascending(self):
        result = execute_query(self.rows, QueryBuilder().order_by("version_index").build())

        assert result[0]["record_id"] == 4

    def test_comparisons_skip_missing_values(self):
        query = QueryBuilder().filter("version_index", FilterOperator.LT, 5).build()

        assert [row["record_id"] for row in execute_query(self.rows, query)] == [1, 2, 3]

    def test_pagination(self):
        query = QueryBuilder().order_by("record_id").offset(1).limit(2).build()

        assert [row["record_id"] for row in execute_query(self.rows, query)] == [2, 3]


class TestItemFinder:
    """Test the finder binding queries to a store."""

    def setup_method(self):
        self.store = MagicMock()
        self.finder = ItemFinder(self.store)

    def test_select_executes_against_store(self):
        page = ContentRecord(title="Home", record_id=1)
        self.store.find.return_value = [page]

        result = self.finder.where("title", "Home").order_by("title").select()

        assert result == [page]
        spec = self.store.find.call_args[0][0]
        assert spec.criteria == [[FilterCondition("title", FilterOperator.EQ, "Home")]]
        assert spec.sorts == [QuerySort("title", True)]

    def test_select_validates_before_querying(self):
        with pytest.raises(InvalidArgumentError):
            self.finder.where("colour", "red").select()

        self.store.find.assert_not_called()

    def test_first_uses_limit_one(self):
        self.store.find.return_value = []

        assert self.finder.query().first() is None
        assert self.store.find.call_args[0][0].limit == 1

    def test_count_and_all(self):
        self.store.find.return_value = [ContentRecord(record_id=1), ContentRecord(record_id=2)]

        assert self.finder.query().count() == 2
        assert len(self.finder.all()) == 2
