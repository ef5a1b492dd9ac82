"""
Query building module for the floatdash API.

This module renders predicate trees into parameterized SQL.
"""

from .builder import (
    SqlLiteral,
    Query,
    ProfileQueries,
    PROFILE_COLUMNS,
    build_where_clause_and_params,
    build_profile_queries,
    build_select,
)

__all__ = [
    "SqlLiteral",
    "Query",
    "ProfileQueries",
    "PROFILE_COLUMNS",
    "build_where_clause_and_params",
    "build_profile_queries",
    "build_select",
]
