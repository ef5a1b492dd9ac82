from fastapi import APIRouter, Depends, Request

from ..database import Warehouse
from ..dependencies import get_registry, get_warehouse
from ..registry import Registry
from ..services import filter_options, profile_measurements, search_profiles

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


@router.get("")
@router.get("/enhanced")
async def list_profiles(
    request: Request,
    warehouse: Warehouse = Depends(get_warehouse),
    registry: Registry = Depends(get_registry),
):
    """
    Paginated profile search.

    Query parameters are read loosely: anything unrecognised falls back to
    its default. Only a malformed start_date/end_date range is rejected.
    """
    return await search_profiles(warehouse, registry, dict(request.query_params))


@router.get("/filters/options")
async def get_filter_options(
    warehouse: Warehouse = Depends(get_warehouse),
    registry: Registry = Depends(get_registry),
):
    """Distinct values and labels for the dashboard's filter dropdowns."""
    return await filter_options(warehouse, registry)


@router.get("/{profile_id}/measurements")
async def get_measurements(
    profile_id: str,
    warehouse: Warehouse = Depends(get_warehouse),
    registry: Registry = Depends(get_registry),
):
    return await profile_measurements(warehouse, registry, profile_id)
