"""
Filter system for the floatdash API.

This module provides filter models, request parsing, and the translation of
request parameters into predicate trees.
"""

from .models import (
    Operator,
    LogicalOperator,
    FilterExpression,
    FilterCollection,
    all_of,
    any_of,
)
from .request import (
    FilterRequest,
    parse_filter_request,
    MAX_PAGE_SIZE,
    SORT_FIELDS,
    SORT_ORDERS,
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
)
from .conditions import (
    QUALITY_FILTERS,
    RAW_QC_CODES,
    build_conditions,
    date_predicates,
    quality_predicate,
    search_predicate,
)

__all__ = [
    "Operator",
    "LogicalOperator",
    "FilterExpression",
    "FilterCollection",
    "all_of",
    "any_of",
    "FilterRequest",
    "parse_filter_request",
    "MAX_PAGE_SIZE",
    "SORT_FIELDS",
    "SORT_ORDERS",
    "DEFAULT_SORT_FIELD",
    "DEFAULT_SORT_ORDER",
    "QUALITY_FILTERS",
    "RAW_QC_CODES",
    "build_conditions",
    "date_predicates",
    "quality_predicate",
    "search_predicate",
]
