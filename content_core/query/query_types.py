"""
Query specification types for finding content records.

A query is a disjunction of filter groups; every condition inside a group
must match. Sorting, limit and offset apply to the combined result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from content_core.exceptions import InvalidArgumentError
from content_core.model.content_record import ContentRecord


# Columns of a persisted record row that queries may filter and sort on
QUERYABLE_FIELDS = (
    "record_id",
    "title",
    "name",
    "state",
    "version_of_id",
    "version_index",
    "parent_id",
    "created",
    "updated",
    "published",
    "expires",
    "sort_order",
    "visible",
    "saved_by",
)


class FilterOperator(Enum):
    """Filter operators for query conditions."""

    EQ = "eq"  # equals
    NE = "ne"  # not equals
    GT = "gt"  # greater than
    GTE = "gte"  # greater than or equal
    LT = "lt"  # less than
    LTE = "lte"  # less than or equal
    IN = "in"  # in list
    NULL = "null"  # field is null


@dataclass
class FilterCondition:
    """Filter condition for queries."""

    field: str
    operator: FilterOperator
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "operator": self.operator.value, "value": self.value}


@dataclass
class QuerySort:
    """Sort specification for queries."""

    field: str
    ascending: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "ascending": self.ascending}


@dataclass
class QuerySpec:
    """Complete query specification."""

    criteria: List[List[FilterCondition]] = field(default_factory=list)
    sorts: List[QuerySort] = field(default_factory=list)
    limit: Optional[int] = None
    offset: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "criteria": [[f.to_dict() for f in group] for group in self.criteria],
            "sorts": [s.to_dict() for s in self.sorts],
            "limit": self.limit,
            "offset": self.offset,
        }


class QueryValidator:
    """Validates query specifications."""

    def __init__(self, supported_fields=QUERYABLE_FIELDS):
        self.supported_fields = set(supported_fields)

    def validate_query(self, query_spec: QuerySpec) -> List[str]:
        """Validate query specification and return list of errors."""
        errors = []

        for group in query_spec.criteria:
            for condition in group:
                if condition.field not in self.supported_fields:
                    errors.append(f"Invalid filter field '{condition.field}'")
                if condition.operator == FilterOperator.IN and not isinstance(
                    condition.value, (list, tuple, set)
                ):
                    errors.append(f"Operator 'in' on '{condition.field}' requires a list value")

        for sort in query_spec.sorts:
            if sort.field not in self.supported_fields:
                errors.append(f"Invalid sort field '{sort.field}'")

        if query_spec.limit is not None and query_spec.limit < 0:
            errors.append("Limit must be non-negative")

        if query_spec.offset is not None and query_spec.offset < 0:
            errors.append("Offset must be non-negative")

        return errors

    def check(self, query_spec: QuerySpec) -> QuerySpec:
        """Return the spec unchanged or raise InvalidArgumentError listing its problems."""
        errors = self.validate_query(query_spec)
        if errors:
            raise InvalidArgumentError(f"Invalid query: {'; '.join(errors)}")
        return query_spec


def _normalize_value(value: Any) -> Any:
    """Reduce records and enums to the scalar stored in a row."""
    if isinstance(value, ContentRecord):
        return value.record_id
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple, set)):
        return [_normalize_value(v) for v in value]
    return value


class QueryBuilder:
    """Builder for constructing query specifications."""

    def __init__(self):
        self.reset()

    def reset(self) -> "QueryBuilder":
        """Reset builder to initial state."""
        self._criteria: List[List[FilterCondition]] = [[]]
        self._sorts: List[QuerySort] = []
        self._limit = None
        self._offset = None
        return self

    def filter(self, field: str, operator: FilterOperator, value: Any = None) -> "QueryBuilder":
        """Add filter condition to the current group."""
        self._criteria[-1].append(FilterCondition(field, operator, _normalize_value(value)))
        return self

    def where(self, field: str, value: Any) -> "QueryBuilder":
        """Add equality filter (convenience method)."""
        return self.filter(field, FilterOperator.EQ, value)

    def where_in(self, field: str, values: List[Any]) -> "QueryBuilder":
        """Add 'in' filter (convenience method)."""
        return self.filter(field, FilterOperator.IN, values)

    def where_null(self, field: str) -> "QueryBuilder":
        """Add 'is null' filter (convenience method)."""
        return self.filter(field, FilterOperator.NULL)

    def or_(self) -> "QueryBuilder":
        """Start a new alternative filter group."""
        if self._criteria[-1]:
            self._criteria.append([])
        return self

    def or_where(self, field: str, value: Any) -> "QueryBuilder":
        """Start a new alternative group with an equality filter."""
        return self.or_().where(field, value)

    def order_by(self, field: str, ascending: bool = True) -> "QueryBuilder":
        """Add sort order."""
        self._sorts.append(QuerySort(field, ascending))
        return self

    def limit(self, limit: Optional[int]) -> "QueryBuilder":
        """Set result limit."""
        self._limit = limit
        return self

    def offset(self, offset: Optional[int]) -> "QueryBuilder":
        """Set result offset."""
        self._offset = offset
        return self

    def build(self) -> QuerySpec:
        """Build query specification."""
        return QuerySpec(
            criteria=[list(group) for group in self._criteria if group],
            sorts=self._sorts.copy(),
            limit=self._limit,
            offset=self._offset,
        )
