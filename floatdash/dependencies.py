import os

from fastapi import Depends

from .database import SnowflakeWarehouse, Warehouse
from .registry import Registry

REG = Registry()


def get_registry() -> Registry:
    return REG


def get_warehouse(reg: Registry = Depends(get_registry)) -> Warehouse:
    return SnowflakeWarehouse(reg.view("profiles"), role=os.getenv("SNOWFLAKE_DEFAULT_ROLE"))
