from typing import Optional

from fastapi import APIRouter, Depends

from ..database import Warehouse
from ..dependencies import get_registry, get_warehouse
from ..registry import Registry
from ..services import float_profile, float_timeseries, float_trajectory

router = APIRouter(prefix="/api/floats", tags=["floats"])


@router.get("/{platform_number}/trajectory")
async def get_trajectory(
    platform_number: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    warehouse: Warehouse = Depends(get_warehouse),
    registry: Registry = Depends(get_registry),
):
    return await float_trajectory(warehouse, registry, platform_number, start, end)


@router.get("/{platform_number}/timeseries")
async def get_timeseries(
    platform_number: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    warehouse: Warehouse = Depends(get_warehouse),
    registry: Registry = Depends(get_registry),
):
    return await float_timeseries(warehouse, registry, platform_number, start, end)


@router.get("/{platform_number}/profile")
async def get_latest_profile(
    platform_number: str,
    warehouse: Warehouse = Depends(get_warehouse),
    registry: Registry = Depends(get_registry),
):
    return await float_profile(warehouse, registry, platform_number)
