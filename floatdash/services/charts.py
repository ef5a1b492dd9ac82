"""
Aggregates behind the dashboard charts, one function per chart type.
"""

from __future__ import annotations
import calendar
import logging
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional

from ..database import Warehouse
from ..dates import to_julian_day
from ..errors import InvalidInput
from ..query import Query
from ..query.builder import _quote_dotted_identifier
from ..registry import Registry
from .common import run_query, utc_now_iso

log = logging.getLogger("charts")

ChartFn = Callable[[Warehouse, Registry], Awaitable[Dict[str, Any]]]

FLOAT_STATUS = {"A": "adjusted", "R": "real-time"}

MODE_NAMES = {
    "A": "Adjusted/Delayed Mode",
    "R": "Real-time",
    "D": "Delayed Mode",
}


def _views(registry: Registry) -> tuple[str, str]:
    return (
        _quote_dotted_identifier(registry.view("profiles")),
        _quote_dotted_identifier(registry.view("measurements")),
    )


def _round(value: Any, ndigits: int) -> Optional[float]:
    return None if value is None else round(float(value), ndigits)


def _iso_day(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)[:10]


def months_before(today: date, months: int) -> date:
    idx = today.year * 12 + (today.month - 1) - months
    year, month = divmod(idx, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


async def global_distribution(warehouse: Warehouse, registry: Registry) -> Dict[str, Any]:
    profiles, _ = _views(registry)
    rows = await run_query(warehouse, Query(
        "SELECT DISTINCT p.platform_number, p.latitude, p.longitude, "
        "p.data_mode AS status, p.data_centre AS data_center "
        f"FROM {profiles} p "
        "WHERE p.latitude IS NOT NULL AND p.longitude IS NOT NULL "
        "AND p.latitude BETWEEN -90 AND 90 AND p.longitude BETWEEN -180 AND 180 "
        "LIMIT 2000",
        [],
    ))
    return {
        "floats": [
            {
                "platform_number": r["platform_number"],
                "lat": r["latitude"],
                "lng": r["longitude"],
                "status": FLOAT_STATUS.get(r["status"], "other"),
                "data_center": r["data_center"],
            }
            for r in rows
        ],
        "total": len(rows),
    }


async def data_mode_distribution(warehouse: Warehouse, registry: Registry) -> Dict[str, Any]:
    profiles, _ = _views(registry)
    rows = await run_query(warehouse, Query(
        "SELECT data_mode AS status, COUNT(DISTINCT platform_number) AS float_count "
        f"FROM {profiles} WHERE data_mode IS NOT NULL "
        "GROUP BY data_mode ORDER BY float_count DESC",
        [],
    ))
    return {
        "distribution": [
            {
                "name": MODE_NAMES.get(r["status"], f"Mode {r['status']}"),
                "value": r["float_count"],
                "status": r["status"],
            }
            for r in rows
        ],
        "total": sum(int(r["float_count"] or 0) for r in rows),
    }


async def temperature_trends(warehouse: Warehouse, registry: Registry) -> Dict[str, Any]:
    profiles, measurements = _views(registry)
    threshold = to_julian_day(months_before(date.today(), 6).isoformat())
    rows = await run_query(warehouse, Query(
        "WITH recent_surface_temps AS ("
        " SELECT p.profile_id, m.temp_adjusted,"
        " CASE WHEN p.latitude > 66.5 THEN 'Arctic'"
        " WHEN p.latitude > 23.5 THEN 'Northern Hemisphere'"
        " WHEN p.latitude > -23.5 THEN 'Tropical'"
        " WHEN p.latitude > -66.5 THEN 'Southern Hemisphere'"
        " ELSE 'Antarctic' END AS region,"
        " DATEADD(day, FLOOR(p.juld), '1950-01-01'::DATE) AS profile_date"
        f" FROM {profiles} p JOIN {measurements} m ON p.profile_id = m.profile_id"
        " WHERE p.juld IS NOT NULL AND p.juld >= ?"
        " AND p.latitude IS NOT NULL AND p.profile_temp_qc = 'A'"
        " AND m.level_index <= 5 AND m.temp_adjusted BETWEEN -2 AND 35"
        " AND m.temp_qc = '1'"
        ") "
        "SELECT region, DATE_TRUNC('MONTH', profile_date) AS month,"
        " AVG(temp_adjusted) AS avg_temp, COUNT(*) AS measurement_count,"
        " COUNT(DISTINCT profile_id) AS profile_count "
        "FROM recent_surface_temps GROUP BY region, month "
        "HAVING COUNT(*) >= 20 AND COUNT(DISTINCT profile_id) >= 5 "
        "ORDER BY month, region",
        [threshold],
    ))

    monthly: Dict[str, Dict[str, Any]] = {}
    for r in rows:
        month = _iso_day(r["month"])
        entry = monthly.setdefault(month, {
            "month": month,
            "month_display": date.fromisoformat(month).strftime("%b %Y"),
        })
        entry[r["region"]] = _round(r["avg_temp"], 2)

    regions: List[str] = []
    for r in rows:
        if r["region"] not in regions:
            regions.append(r["region"])

    return {
        "trends": list(monthly.values()),
        "regions": regions,
        "metadata": {
            "total_measurements": sum(int(r["measurement_count"] or 0) for r in rows),
            "date_range": f"Last 6 months (Julian day >= {threshold})",
        },
    }


async def salinity_depth(warehouse: Warehouse, registry: Registry) -> Dict[str, Any]:
    _, measurements = _views(registry)
    rows = await run_query(warehouse, Query(
        "SELECT FLOOR(pres_adjusted / 50) * 50 AS depth_bin,"
        " AVG(psal_adjusted) AS avg_salinity, COUNT(*) AS measurement_count "
        f"FROM {measurements} "
        "WHERE pres_adjusted IS NOT NULL AND psal_adjusted IS NOT NULL"
        " AND pres_adjusted <= 2000 AND psal_qc = '1' "
        "GROUP BY depth_bin HAVING COUNT(*) >= 100 ORDER BY depth_bin",
        [],
    ))
    return {
        "profile": [
            {
                "depth": r["depth_bin"],
                "salinity": _round(r["avg_salinity"], 3),
                "count": r["measurement_count"],
            }
            for r in rows
        ]
    }


async def ts_scatter(warehouse: Warehouse, registry: Registry) -> Dict[str, Any]:
    _, measurements = _views(registry)
    rows = await run_query(warehouse, Query(
        "SELECT temp_adjusted AS temperature, psal_adjusted AS salinity "
        f"FROM {measurements} "
        "WHERE temp_qc = '1' AND psal_qc = '1'"
        " AND temp_adjusted BETWEEN -2 AND 35"
        " AND psal_adjusted BETWEEN 30 AND 40 "
        "LIMIT 5000",
        [],
    ))
    return {
        "points": [
            {"temperature": _round(r["temperature"], 2), "salinity": _round(r["salinity"], 3)}
            for r in rows
        ]
    }


async def pressure_distribution(warehouse: Warehouse, registry: Registry) -> Dict[str, Any]:
    _, measurements = _views(registry)
    rows = await run_query(warehouse, Query(
        "SELECT CASE WHEN pres_adjusted < 100 THEN '0-100m'"
        " WHEN pres_adjusted < 500 THEN '100-500m'"
        " WHEN pres_adjusted < 1000 THEN '500-1000m'"
        " WHEN pres_adjusted < 1500 THEN '1000-1500m'"
        " WHEN pres_adjusted < 2000 THEN '1500-2000m'"
        " ELSE '2000m+' END AS depth_range,"
        " COUNT(*) AS measurement_count, AVG(pres_adjusted) AS avg_pressure "
        f"FROM {measurements} WHERE pres_adjusted IS NOT NULL "
        "GROUP BY depth_range ORDER BY MIN(pres_adjusted)",
        [],
    ))
    return {
        "distribution": [
            {
                "depth_range": r["depth_range"],
                "count": r["measurement_count"],
                "avg_pressure": _round(r["avg_pressure"], 1),
            }
            for r in rows
        ]
    }


async def deployments_timeline(warehouse: Warehouse, registry: Registry) -> Dict[str, Any]:
    profiles, _ = _views(registry)
    rows = await run_query(warehouse, Query(
        "SELECT DATE_TRUNC('YEAR', date_creation::DATE) AS year,"
        " COUNT(DISTINCT profile_id) AS profile_count,"
        " COUNT(DISTINCT platform_number) AS float_count "
        f"FROM {profiles} "
        "WHERE date_creation IS NOT NULL"
        " AND date_creation::DATE >= '2000-01-01'"
        " AND date_creation::DATE <= CURRENT_DATE() "
        "GROUP BY year ORDER BY year",
        [],
    ))
    return {
        "timeline": [
            {"year": _iso_day(r["year"]), "profiles": r["profile_count"], "floats": r["float_count"]}
            for r in rows
        ]
    }


async def regional_distribution(warehouse: Warehouse, registry: Registry) -> Dict[str, Any]:
    profiles, _ = _views(registry)
    rows = await run_query(warehouse, Query(
        "SELECT CASE WHEN latitude > 60 THEN 'Arctic'"
        " WHEN latitude > 30 THEN 'North Temperate'"
        " WHEN latitude > 0 THEN 'North Tropical'"
        " WHEN latitude > -30 THEN 'South Tropical'"
        " WHEN latitude > -60 THEN 'South Temperate'"
        " ELSE 'Antarctic' END AS region,"
        " COUNT(DISTINCT platform_number) AS float_count,"
        " COUNT(DISTINCT profile_id) AS profile_count,"
        " AVG(latitude) AS avg_latitude "
        f"FROM {profiles} WHERE latitude IS NOT NULL "
        "GROUP BY region ORDER BY float_count DESC",
        [],
    ))
    return {
        "regions": [
            {
                "region": r["region"],
                "float_count": r["float_count"],
                "profile_count": r["profile_count"],
                "avg_latitude": _round(r["avg_latitude"], 2),
            }
            for r in rows
        ]
    }


class Chart(NamedTuple):
    title: str
    description: str
    type: str
    fetch: ChartFn

    def config(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description, "type": self.type}


CHARTS: Dict[str, Chart] = {
    "global-distribution": Chart(
        "Global Float Distribution Map", "Distribution of ARGO floats worldwide", "map",
        global_distribution,
    ),
    "data-mode-pie": Chart(
        "Data Mode Distribution", "Real-time vs Adjusted mode floats", "pie",
        data_mode_distribution,
    ),
    "temperature-trends": Chart(
        "Temperature Trends by Region (Last 6 Months)", "Average surface temperature across regions", "line",
        temperature_trends,
    ),
    "salinity-depth": Chart(
        "Salinity vs Depth Profile", "Average salinity changes with ocean depth", "line",
        salinity_depth,
    ),
    "ts-scatter": Chart(
        "Temperature-Salinity (T-S) Diagram", "Water mass identification scatter plot", "scatter",
        ts_scatter,
    ),
    "pressure-distribution": Chart(
        "Measurement Distribution by Depth", "Number of measurements at different depths", "bar",
        pressure_distribution,
    ),
    "deployments-timeline": Chart(
        "Profile Deployments Over Time", "Profile and float deployments by year", "bar",
        deployments_timeline,
    ),
    "regional-distribution": Chart(
        "Regional Float Distribution", "Float count by geographic regions", "bar",
        regional_distribution,
    ),
}


async def chart_data(warehouse: Warehouse, registry: Registry, chart_type: Optional[str]) -> Dict[str, Any]:
    if not chart_type:
        raise InvalidInput("Chart type is required. Use ?type=chart-name")
    chart = CHARTS.get(chart_type)
    if chart is None:
        raise InvalidInput(f"Unknown chart type: {chart_type}")

    log.info("Fetching chart data for %s", chart_type)
    data = await chart.fetch(warehouse, registry)

    return {
        "success": True,
        "chartType": chart_type,
        "config": chart.config(),
        "data": data,
        "lastUpdated": utc_now_iso(),
    }
