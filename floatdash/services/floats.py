import logging
from typing import Any, Dict, List, Optional

from ..database import Warehouse
from ..dates import julian_day_to_datetime, to_timestamp_literal
from ..errors import InvalidInput, NotFound
from ..filters import FilterCollection, FilterExpression, Operator, all_of, date_predicates
from ..query import SqlLiteral, build_select
from ..registry import Registry
from .common import run_query, utc_now_iso
from .profiles import PROFILE_SUMMARY_COLUMNS, fetch_measurements

log = logging.getLogger("floats")

MAX_TRAJECTORY_POINTS = 5000

TRAJECTORY_COLUMNS = ["profile_id", "cycle_number", "latitude", "longitude", "juld"]

SURFACE_COLUMNS = ["profile_id", "pres_adjusted", "temp_adjusted", "psal_adjusted"]


def _check_float_id(platform_number: str) -> None:
    if not platform_number or platform_number in ("undefined", "null"):
        raise InvalidInput("Invalid float ID provided")


def _with_date(row: Dict[str, Any]) -> Dict[str, Any]:
    juld = row.get("juld")
    return {**row, "date": to_timestamp_literal(julian_day_to_datetime(juld)) if juld is not None else None}


def _float_window(platform_number: str, start: Optional[str], end: Optional[str]) -> FilterCollection:
    return all_of(
        FilterExpression("platform_number", Operator.EQ, platform_number),
        *date_predicates(start, end),
    )


async def _profiles_in_time_order(
    warehouse: Warehouse, registry: Registry, conditions: FilterCollection
) -> List[Dict[str, Any]]:
    by_time = (SqlLiteral.sort_field("juld"), SqlLiteral.sort_direction("asc"))
    return await run_query(
        warehouse,
        build_select(
            registry.view("profiles"),
            TRAJECTORY_COLUMNS,
            conditions,
            order_by=[by_time],
            limit=SqlLiteral.row_count(MAX_TRAJECTORY_POINTS),
        ),
    )


async def float_trajectory(
    warehouse: Warehouse,
    registry: Registry,
    platform_number: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> Dict[str, Any]:
    """Positions of one float's profiles in time order, optionally date bounded."""
    _check_float_id(platform_number)

    rows = await _profiles_in_time_order(warehouse, registry, _float_window(platform_number, start, end))

    log.info("Found %d trajectory points for float %s", len(rows), platform_number)

    trajectory = [_with_date(r) for r in rows]
    out: Dict[str, Any] = {
        "floatId": platform_number,
        "trajectory": trajectory,
        "dataPoints": len(trajectory),
        "lastUpdated": utc_now_iso(),
    }
    if not trajectory:
        out["message"] = "No trajectory data available for this float"
    return out


async def float_timeseries(
    warehouse: Warehouse,
    registry: Registry,
    platform_number: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Surface (level 0) temperature, salinity and pressure of each profile of a
    float, in time order. A float with no profiles in the window is NotFound.
    """
    _check_float_id(platform_number)

    profiles = await _profiles_in_time_order(warehouse, registry, _float_window(platform_number, start, end))
    if not profiles:
        raise NotFound("No time series data found for this float")

    surface = await run_query(
        warehouse,
        build_select(
            registry.view("measurements"),
            SURFACE_COLUMNS,
            all_of(
                FilterExpression("profile_id", Operator.IN, [p["profile_id"] for p in profiles]),
                FilterExpression("level_index", Operator.EQ, 0),
            ),
        ),
    )
    by_profile = {m["profile_id"]: m for m in surface}

    log.info("Found %d time series points for float %s", len(profiles), platform_number)

    series = []
    for p in profiles:
        level = by_profile.get(p["profile_id"], {})
        series.append({
            "profile_id": p["profile_id"],
            "cycle_number": p["cycle_number"],
            "juld": p["juld"],
            "date": _with_date(p)["date"],
            "temperature": level.get("temp_adjusted"),
            "salinity": level.get("psal_adjusted"),
            "pressure": level.get("pres_adjusted"),
        })

    return {
        "floatId": platform_number,
        "timeSeries": series,
        "dataPoints": len(series),
        "lastUpdated": utc_now_iso(),
    }


async def float_profile(warehouse: Warehouse, registry: Registry, platform_number: str) -> Dict[str, Any]:
    """The most recent profile of a float with its depth levels."""
    _check_float_id(platform_number)

    latest = (SqlLiteral.sort_field("juld"), SqlLiteral.sort_direction("desc"))
    rows = await run_query(
        warehouse,
        build_select(
            registry.view("profiles"),
            PROFILE_SUMMARY_COLUMNS + ["juld"],
            all_of(FilterExpression("platform_number", Operator.EQ, platform_number)),
            order_by=[latest],
            limit=SqlLiteral.row_count(1),
        ),
    )
    if not rows:
        raise NotFound("Float profile not found")

    profile = _with_date(rows[0])
    return {
        "floatId": platform_number,
        "profile": profile,
        "measurements": await fetch_measurements(warehouse, registry, profile["profile_id"]),
        "lastUpdated": utc_now_iso(),
    }
