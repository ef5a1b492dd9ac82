"""
Database operations for the floatdash API.

This module handles Snowflake connections and query execution.
"""

import typing as t

from .snowflake import (
    SnowflakeWarehouse,
    _sf_connect_for,
    _split_db_path,
)


class Warehouse(t.Protocol):
    def execute(self, sql: str, params: t.Any = None) -> list[dict[str, t.Any]]:
        ...


__all__ = [
    "Warehouse",
    "SnowflakeWarehouse",
    "_sf_connect_for",
    "_split_db_path",
]
