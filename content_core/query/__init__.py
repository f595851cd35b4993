"""
Query facility for content records.

This package provides a small builder-style query language over persisted
record rows and a finder that executes it against a record store.
"""

from .query_types import (
    QUERYABLE_FIELDS,
    FilterOperator,
    FilterCondition,
    QuerySort,
    QuerySpec,
    QueryValidator,
    QueryBuilder,
)
from .evaluation import execute_query, row_matches
from .item_finder import ItemFinder, BoundQuery

__all__ = [
    "QUERYABLE_FIELDS",
    "FilterOperator",
    "FilterCondition",
    "QuerySort",
    "QuerySpec",
    "QueryValidator",
    "QueryBuilder",
    "execute_query",
    "row_matches",
    "ItemFinder",
    "BoundQuery",
]
