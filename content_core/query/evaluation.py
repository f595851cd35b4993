"""
In-process evaluation of query specifications against record rows.

Used by stores that keep their rows in memory.
"""

from typing import Any, Dict, List, Optional

from content_core.query.query_types import FilterCondition, FilterOperator, QuerySort, QuerySpec


def evaluate_filter(row: Dict[str, Any], condition: FilterCondition) -> bool:
    """Evaluate single filter condition against a row."""
    field_value = row.get(condition.field)
    filter_value = condition.value

    if condition.operator == FilterOperator.EQ:
        return field_value == filter_value
    elif condition.operator == FilterOperator.NE:
        return field_value != filter_value
    elif condition.operator == FilterOperator.GT:
        return field_value is not None and field_value > filter_value
    elif condition.operator == FilterOperator.GTE:
        return field_value is not None and field_value >= filter_value
    elif condition.operator == FilterOperator.LT:
        return field_value is not None and field_value < filter_value
    elif condition.operator == FilterOperator.LTE:
        return field_value is not None and field_value <= filter_value
    elif condition.operator == FilterOperator.IN:
        return field_value in filter_value
    elif condition.operator == FilterOperator.NULL:
        return field_value is None

    return False


def row_matches(row: Dict[str, Any], criteria: List[List[FilterCondition]]) -> bool:
    """True when the row satisfies every condition of at least one group."""
    if not criteria:
        return True
    return any(all(evaluate_filter(row, condition) for condition in group) for group in criteria)


def apply_sorting(rows: List[Dict[str, Any]], sorts: List[QuerySort]) -> List[Dict[str, Any]]:
    """Sort rows by every sort key, the first key being the most significant."""
    result = list(rows)
    # Stable sorts applied least significant key first
    for sort in reversed(sorts):
        result.sort(
            key=lambda row: (row.get(sort.field) is not None, row.get(sort.field)),
            reverse=not sort.ascending,
        )
    return result


def apply_pagination(
    rows: List[Dict[str, Any]], limit: Optional[int], offset: Optional[int]
) -> List[Dict[str, Any]]:
    start = offset or 0
    end = start + limit if limit is not None else None
    return rows[start:end]


def execute_query(rows: List[Dict[str, Any]], query_spec: QuerySpec) -> List[Dict[str, Any]]:
    """Filter, sort and paginate rows according to the query specification."""
    matched = [row for row in rows if row_matches(row, query_spec.criteria)]
    ordered = apply_sorting(matched, query_spec.sorts)
    return apply_pagination(ordered, query_spec.limit, query_spec.offset)
