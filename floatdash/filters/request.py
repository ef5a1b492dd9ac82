from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20

SORT_FIELDS = ("date_creation", "juld", "platform_number", "cycle_number", "latitude", "longitude")
SORT_ORDERS = ("asc", "desc")
DEFAULT_SORT_FIELD = "date_creation"
DEFAULT_SORT_ORDER = "desc"


@dataclass
class FilterRequest:
    """
    Parsed profile-search parameters. Built from a raw query-string mapping;
    every field already holds a valid value or its default.
    """
    search: Optional[str] = None
    platform_number: Optional[str] = None
    data_center: Optional[str] = None
    data_mode: Optional[str] = None
    platform_type: Optional[str] = None
    project_name: Optional[str] = None
    lat_range: Optional[Tuple[float, float]] = None
    lon_range: Optional[Tuple[float, float]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    quality_filter: Optional[str] = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = DEFAULT_SORT_FIELD
    sort_order: str = DEFAULT_SORT_ORDER

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _text(params: Mapping[str, str], key: str) -> Optional[str]:
    v = params.get(key)
    if v is None:
        return None
    v = str(v).strip()
    return v or None


def _int(raw: Optional[str], default: int) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


def _float(raw: Optional[str]) -> Optional[float]:
    try:
        return float(str(raw).strip())
    except (TypeError, ValueError):
        return None


def _range(params: Mapping[str, str], lo_key: str, hi_key: str) -> Optional[Tuple[float, float]]:
    lo = _float(params.get(lo_key))
    hi = _float(params.get(hi_key))
    if lo is None or hi is None:
        return None
    return lo, hi


def _cap_page_size(limit: int, cap: int = MAX_PAGE_SIZE) -> int:
    return max(1, min(limit, cap, MAX_PAGE_SIZE))


def parse_filter_request(params: Mapping[str, str], *, max_page_size: int = MAX_PAGE_SIZE) -> FilterRequest:
    """
    Turn loosely typed query-string parameters into a FilterRequest.
    Unknown or malformed values fall back to their defaults; nothing here raises.
    """
    sort_by = (_text(params, "sort_by") or "").lower()
    sort_order = (_text(params, "sort_order") or "").lower()

    return FilterRequest(
        search=_text(params, "search"),
        platform_number=_text(params, "platform_number"),
        data_center=_text(params, "data_center"),
        data_mode=_text(params, "data_mode"),
        platform_type=_text(params, "platform_type"),
        project_name=_text(params, "project_name"),
        lat_range=_range(params, "min_lat", "max_lat"),
        lon_range=_range(params, "min_lon", "max_lon"),
        start_date=_text(params, "start_date"),
        end_date=_text(params, "end_date"),
        quality_filter=_text(params, "quality_filter"),
        page=max(1, _int(params.get("page"), 1)),
        limit=_cap_page_size(_int(params.get("limit"), DEFAULT_PAGE_SIZE), max_page_size),
        sort_by=sort_by if sort_by in SORT_FIELDS else DEFAULT_SORT_FIELD,
        sort_order=sort_order if sort_order in SORT_ORDERS else DEFAULT_SORT_ORDER,
    )
