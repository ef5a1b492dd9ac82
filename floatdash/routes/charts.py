from typing import Optional

from fastapi import APIRouter, Depends

from ..database import Warehouse
from ..dependencies import get_registry, get_warehouse
from ..registry import Registry
from ..services import chart_data

router = APIRouter(prefix="/api/charts", tags=["charts"])


@router.get("")
async def get_chart(
    type: Optional[str] = None,
    warehouse: Warehouse = Depends(get_warehouse),
    registry: Registry = Depends(get_registry),
):
    """Data for one dashboard chart, selected with ?type=<chart-name>."""
    return await chart_data(warehouse, registry, type)
