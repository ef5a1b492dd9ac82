"""
Translate a FilterRequest into an ordered predicate tree over the profiles view.
"""

from __future__ import annotations
import logging
from typing import Callable, Dict, List, Optional

from ..dates import parse_date, to_julian_day, to_timestamp_literal, validate_date_range
from .models import FilterCollection, FilterExpression, Operator, all_of, any_of
from .request import FilterRequest

log = logging.getLogger("filters")

SEARCH_FIELDS = ("platform_number", "data_centre", "project_name", "pi_name", "platform_type")
QC_FIELDS = ("profile_temp_qc", "profile_psal_qc", "profile_pres_qc")

# request attribute -> column
EXACT_MATCH_FIELDS = (
    ("platform_number", "platform_number"),
    ("data_center", "data_centre"),
    ("data_mode", "data_mode"),
    ("platform_type", "platform_type"),
    ("project_name", "project_name"),
)

RAW_QC_CODES = frozenset({"1", "2", "3", "4", "8", "9", "A", "B", "C", "D", "F"})
PROBLEMATIC_QC_CODES = ("B", "C", "F")


def _qc_all_equal(code: str) -> FilterCollection:
    return all_of(*(FilterExpression(f, Operator.EQ, code) for f in QC_FIELDS))


def _qc_any_equal(code: str) -> FilterCollection:
    return any_of(*(FilterExpression(f, Operator.EQ, code) for f in QC_FIELDS))


def _qc_any_in(codes) -> FilterCollection:
    return any_of(*(FilterExpression(f, Operator.IN, list(codes)) for f in QC_FIELDS))


QUALITY_FILTERS: Dict[str, Callable[[], object]] = {
    "good": lambda: _qc_all_equal("A"),
    "real_time": lambda: FilterExpression("data_mode", Operator.EQ, "R"),
    "adjusted": lambda: FilterExpression("data_mode", Operator.EQ, "A"),
    "problematic": lambda: _qc_any_in(PROBLEMATIC_QC_CODES),
}


def quality_predicate(quality_filter: Optional[str]):
    """
    Predicate for a quality filter value, or None when the value selects
    everything ("all") or is not recognised.
    """
    if not quality_filter or quality_filter == "all":
        return None
    factory = QUALITY_FILTERS.get(quality_filter)
    if factory is not None:
        return factory()
    if quality_filter in RAW_QC_CODES:
        return _qc_any_equal(quality_filter)
    return None


def search_predicate(term: str) -> FilterCollection:
    return any_of(*(FilterExpression(f, Operator.LK, term) for f in SEARCH_FIELDS))


def date_predicates(
    start: Optional[str],
    end: Optional[str],
    *,
    juld_field: str = "juld",
    timestamp_field: str = "date_creation",
) -> List[FilterExpression]:
    """
    Inclusive date bounds on the Julian-day column. A bound that cannot be
    reduced to a day offset is compared against the raw timestamp column.
    Raises InvalidDateRange when the range itself is malformed.
    """
    validate_date_range(start, end)

    out: List[FilterExpression] = []
    for raw, op in ((start, Operator.GTE), (end, Operator.LTE)):
        if not raw:
            continue
        try:
            out.append(FilterExpression(juld_field, op, to_julian_day(raw)))
        except ValueError as e:
            log.warning("Julian day conversion failed for %r, filtering on %s: %s", raw, timestamp_field, e)
            out.append(FilterExpression(timestamp_field, op, to_timestamp_literal(parse_date(raw))))
    return out


def build_conditions(req: FilterRequest) -> FilterCollection:
    """
    Ordered AND of every predicate the request asks for. Absent parameters
    contribute nothing.
    """
    root = FilterCollection()

    if req.search:
        root.add(search_predicate(req.search))

    for attr, column in EXACT_MATCH_FIELDS:
        value = getattr(req, attr)
        if value:
            root.add(FilterExpression(column, Operator.EQ, value))

    if req.lat_range is not None:
        root.add(FilterExpression("latitude", Operator.BT, req.lat_range))
    if req.lon_range is not None:
        root.add(FilterExpression("longitude", Operator.BT, req.lon_range))

    for e in date_predicates(req.start_date, req.end_date):
        root.add(e)

    qp = quality_predicate(req.quality_filter)
    if qp is not None:
        root.add(qp)

    return root
