"""
Profile search, measurements and filter options.
"""

from __future__ import annotations
import asyncio
import logging
import math
from typing import Any, Dict, List, Mapping

from ..database import Warehouse
from ..errors import ApiError, InvalidInput, NotFound
from ..filters import (
    MAX_PAGE_SIZE,
    FilterExpression,
    Operator,
    all_of,
    build_conditions,
    parse_filter_request,
)
from ..quality import (
    data_centre_label,
    data_mode_label,
    quality_options,
    with_derived_fields,
)
from ..query import Query, SqlLiteral, build_profile_queries, build_select
from ..query.builder import _quote_dotted_identifier
from ..registry import Registry
from .common import run_all, run_query, utc_now_iso

log = logging.getLogger("profiles")

MAX_MEASUREMENTS = 1000
TOP_PROJECTS = 15

PROFILE_SUMMARY_COLUMNS = [
    "profile_id",
    "platform_number",
    "cycle_number",
    "latitude",
    "longitude",
    "date_creation",
]

MEASUREMENT_COLUMNS = [
    "level_index",
    "pres_adjusted",
    "temp_adjusted",
    "psal_adjusted",
    "temp_qc",
    "psal_qc",
    "pres_qc",
    "temp_adjusted_error",
    "psal_adjusted_error",
    "pres_adjusted_error",
]


def _first_int(rows: List[Dict[str, Any]], key: str) -> int:
    if not rows:
        return 0
    return int(rows[0].get(key) or 0)


def paginate(page: int, limit: int, total: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "offset": (page - 1) * limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


async def quality_breakdown(warehouse: Warehouse, query: Query) -> Dict[str, Any]:
    """Per data-mode counts and mean temperature quality. Best effort: {} on failure."""
    try:
        rows = await run_query(warehouse, query)
    except ApiError as e:
        log.warning("Failed to get quality breakdown: %s", e.message)
        return {}
    return {
        row["data_mode"]: {
            "count": int(row.get("profile_count") or 0),
            "avgTempQuality": round(float(row.get("avg_temp_quality") or 0), 2),
        }
        for row in rows
    }


async def search_profiles(warehouse: Warehouse, registry: Registry, params: Mapping[str, str]) -> Dict[str, Any]:
    req = parse_filter_request(
        params, max_page_size=registry.max_page_size("profiles", MAX_PAGE_SIZE)
    )
    conditions = build_conditions(req)
    queries = build_profile_queries(
        conditions,
        profiles_view=registry.view("profiles"),
        measurements_view=registry.view("measurements"),
        sort_by=req.sort_by,
        sort_order=req.sort_order,
        limit=req.limit,
        offset=req.offset,
    )

    log.info("Fetching profiles page %d, limit %d, offset %d", req.page, req.limit, req.offset)

    (rows, count_rows, measurement_rows), breakdown = await asyncio.gather(
        run_all(warehouse, queries.rows, queries.count, queries.measurement_count),
        quality_breakdown(warehouse, queries.quality_breakdown),
    )
    total = _first_int(count_rows, "total_count")
    measurements = _first_int(measurement_rows, "measurement_count")

    log.info("Found %d profiles, total: %d, measurements: %d", len(rows), total, measurements)

    return {
        "profiles": [with_derived_fields(r) for r in rows],
        "pagination": paginate(req.page, req.limit, total),
        "statistics": {
            "totalProfiles": total,
            "totalMeasurements": measurements,
            "qualityBreakdown": breakdown,
        },
        "filters": {
            "applied": len(conditions),
            "sortBy": queries.sort_field.text,
            "sortOrder": queries.sort_direction.text.lower(),
            "conditions": conditions.to_dict(),
        },
        "lastUpdated": utc_now_iso(),
    }


def _profile_id(raw: str) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid profile ID: {raw!r}")


async def fetch_measurements(warehouse: Warehouse, registry: Registry, pid: int) -> List[Dict[str, Any]]:
    """Depth levels of one profile, shallowest first, with 1-based ids and QC defaults."""
    level_order = (
        SqlLiteral.sort_field("level_index", allowed=("level_index",), default="level_index"),
        SqlLiteral.sort_direction("asc"),
    )
    measurements = await run_query(
        warehouse,
        build_select(
            registry.view("measurements"),
            MEASUREMENT_COLUMNS,
            all_of(FilterExpression("profile_id", Operator.EQ, pid)),
            order_by=[level_order],
            limit=SqlLiteral.row_count(MAX_MEASUREMENTS),
        ),
    )
    log.info("Found %d measurements for profile %d", len(measurements), pid)
    return [
        {
            **m,
            "measurement_id": i,
            "temp_qc": m.get("temp_qc") or "1",
            "psal_qc": m.get("psal_qc") or "1",
            "pres_qc": m.get("pres_qc") or "1",
        }
        for i, m in enumerate(measurements, start=1)
    ]


async def profile_measurements(warehouse: Warehouse, registry: Registry, profile_id: str) -> Dict[str, Any]:
    pid = _profile_id(profile_id)

    log.info("Fetching measurements for profile %d", pid)

    profile_rows = await run_query(
        warehouse,
        build_select(
            registry.view("profiles"),
            PROFILE_SUMMARY_COLUMNS,
            all_of(FilterExpression("profile_id", Operator.EQ, pid)),
            limit=SqlLiteral.row_count(1),
        ),
    )
    if not profile_rows:
        raise NotFound(f"Profile {pid} not found")

    return {
        "profile": profile_rows[0],
        "measurements": await fetch_measurements(warehouse, registry, pid),
        "lastUpdated": utc_now_iso(),
    }


def _distinct_values(view: str, column: str) -> Query:
    return Query(
        f"SELECT DISTINCT {column} AS option_value FROM {view} "
        f"WHERE {column} IS NOT NULL ORDER BY option_value",
        [],
    )


async def filter_options(warehouse: Warehouse, registry: Registry) -> Dict[str, Any]:
    view = _quote_dotted_identifier(registry.view("profiles"))

    top_projects = Query(
        f"SELECT project_name, COUNT(*) AS profile_count FROM {view} "
        f"WHERE project_name IS NOT NULL GROUP BY project_name "
        f"ORDER BY profile_count DESC, project_name LIMIT {SqlLiteral.row_count(TOP_PROJECTS)}",
        [],
    )
    qc_flags = Query(
        "SELECT DISTINCT qc_flag FROM ("
        f"SELECT profile_temp_qc AS qc_flag FROM {view} "
        f"UNION SELECT profile_psal_qc AS qc_flag FROM {view} "
        f"UNION SELECT profile_pres_qc AS qc_flag FROM {view}"
        ") q WHERE qc_flag IS NOT NULL ORDER BY qc_flag",
        [],
    )

    log.info("Fetching filter options")

    centres, modes, platform_types, projects, flags = await run_all(
        warehouse,
        _distinct_values(view, "data_centre"),
        _distinct_values(view, "data_mode"),
        _distinct_values(view, "platform_type"),
        top_projects,
        qc_flags,
    )

    options = {
        "dataCentres": [{"value": r["option_value"], "label": data_centre_label(r["option_value"])} for r in centres],
        "dataModes": [{"value": r["option_value"], "label": data_mode_label(r["option_value"])} for r in modes],
        "platformTypes": sorted(r["option_value"] for r in platform_types),
        "projects": [r["project_name"] for r in projects],
        "qualityOptions": quality_options([r["qc_flag"] for r in flags]),
    }

    log.info(
        "Found filter options: %d centres, %d platforms, %d projects",
        len(options["dataCentres"]), len(options["platformTypes"]), len(options["projects"]),
    )

    return {"success": True, "options": options, "lastUpdated": utc_now_iso()}
