from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Iterable, Optional
import re

from ..filters import (
    FilterCollection,
    FilterExpression,
    Operator,
    LogicalOperator,
    SORT_FIELDS,
    SORT_ORDERS,
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    MAX_PAGE_SIZE,
)

_UNQUOTED_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")
_LIKE_ESCAPE = "!"

def _quote_identifier(name: str, *, quote_identifiers: bool = False) -> str:
    """
    Quote an identifier if needed. Doubles internal quotes.
    """
    if not quote_identifiers and _UNQUOTED_IDENT_RE.match(name):
        return name
    escaped = name.replace('"', '""')
    return f'"{escaped}"'

def _quote_dotted_identifier(name: str, *, quote_identifiers: bool = False) -> str:
    """
    Quote a possibly dotted identifier (e.g., db.schema.view).
    """
    parts = [p.strip() for p in name.split(".")]
    return ".".join(_quote_identifier(p, quote_identifiers=quote_identifiers) for p in parts)

def _escape_like(value: str) -> str:
    """
    Escape the escape char, % and _ in LIKE patterns. Rendered with ESCAPE '!'
    so the same text works on Snowflake and SQLite.
    """
    value = value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
    value = value.replace("%", _LIKE_ESCAPE + "%").replace("_", _LIKE_ESCAPE + "_")
    return value

# -----------------------------------------------------------------------------
# Validated literals
# -----------------------------------------------------------------------------
_LITERAL_KEY = object()

class SqlLiteral:
    """
    Text that is rendered into SQL as-is. Only the validating constructors
    below can build one; anything outside their whitelist becomes the default.
    """
    __slots__ = ("text",)

    def __init__(self, text: str, *, _key: object = None):
        if _key is not _LITERAL_KEY:
            raise TypeError("SqlLiteral must be built through a validating constructor")
        self.text = text

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"SqlLiteral({self.text!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SqlLiteral) and other.text == self.text

    def __hash__(self) -> int:
        return hash(self.text)

    @classmethod
    def sort_field(cls, name: Optional[str], allowed: Sequence[str] = SORT_FIELDS,
                   default: str = DEFAULT_SORT_FIELD) -> "SqlLiteral":
        field = (name or "").strip().lower()
        return cls(field if field in allowed else default, _key=_LITERAL_KEY)

    @classmethod
    def sort_direction(cls, direction: Optional[str]) -> "SqlLiteral":
        d = (direction or "").strip().lower()
        return cls((d if d in SORT_ORDERS else DEFAULT_SORT_ORDER).upper(), _key=_LITERAL_KEY)

    @classmethod
    def row_count(cls, n: Any, *, default: int = 0, cap: Optional[int] = None) -> "SqlLiteral":
        try:
            value = int(n)
        except (TypeError, ValueError):
            value = default
        value = max(0, value)
        if cap is not None:
            value = min(value, cap)
        return cls(str(value), _key=_LITERAL_KEY)

# -----------------------------------------------------------------------------
# WHERE builder
# -----------------------------------------------------------------------------
class _ParamSink:
    """Collects bound values in order; every placeholder is a qmark."""
    def __init__(self):
        self.params: List[Any] = []

    def add(self, value: Any) -> str:
        self.params.append(value)
        return "?"

def _build_expr_sql(e: FilterExpression, sink: _ParamSink) -> str:
    col = _quote_identifier(e.property_name)
    op = e.operator

    if op == Operator.LK:
        ph = sink.add(f"%{_escape_like(str(e.value))}%")
        return f"UPPER({col}) LIKE UPPER({ph}) ESCAPE '{_LIKE_ESCAPE}'"

    if op == Operator.IN:
        vals = list(e.value)
        if not vals:
            # IN () is always false
            return "1=0"
        phs = ", ".join(sink.add(v) for v in vals)
        return f"{col} IN ({phs})"

    if op == Operator.BT:
        lo, hi = e.value
        return f"{col} BETWEEN {sink.add(lo)} AND {sink.add(hi)}"

    rhs = sink.add(e.value)
    if op == Operator.EQ:  return f"{col} = {rhs}"
    if op == Operator.GTE: return f"{col} >= {rhs}"
    if op == Operator.LTE: return f"{col} <= {rhs}"

    raise ValueError(f"Unsupported operator: {op}")

def _combine(parts: List[str], logical: LogicalOperator) -> str:
    if not parts:
        return ""
    if len(parts) == 1:
        return f"({parts[0]})"
    joiner = " AND " if logical == LogicalOperator.AND else " OR "
    return "(" + joiner.join(parts) + ")"

def build_where_clause_and_params(root: FilterCollection) -> Tuple[str, List[Any]]:
    """
    Returns ('WHERE ...', params) with qmark placeholders, or ('', []) for an
    empty collection.
    """
    sink = _ParamSink()

    def walk(node: FilterCollection) -> str:
        parts: List[str] = []
        for item in node.items:
            if isinstance(item, FilterCollection):
                child = walk(item)
                if child:
                    parts.append(child)
            else:
                parts.append(_build_expr_sql(item, sink))
        return _combine(parts, node.logical_operator)

    body = walk(root)
    if not body:
        return "", sink.params
    # drop outer parens
    return f"WHERE {body[1:-1]}", sink.params

# -----------------------------------------------------------------------------
# Profile queries
# -----------------------------------------------------------------------------
PROFILE_COLUMNS = [
    "profile_id",
    "platform_number",
    "cycle_number",
    "latitude",
    "longitude",
    "juld",
    "date_creation",
    "data_centre AS data_center",
    "data_mode",
    "platform_type",
    "project_name",
    "pi_name",
    "profile_temp_qc",
    "profile_psal_qc",
    "profile_pres_qc",
    "position_qc",
    "juld_qc",
]

@dataclass
class Query:
    sql: str
    params: List[Any]

@dataclass
class ProfileQueries:
    rows: Query
    count: Query
    measurement_count: Query
    quality_breakdown: Query
    sort_field: SqlLiteral
    sort_direction: SqlLiteral

def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)

def build_profile_queries(
    conditions: FilterCollection,
    *,
    profiles_view: str,
    measurements_view: str,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> ProfileQueries:
    """
    Render every profile-search query from one predicate tree, so the page of
    rows, the totals, and the breakdown always describe the same filter.
    """
    profiles = _quote_dotted_identifier(profiles_view)
    measurements = _quote_dotted_identifier(measurements_view)

    sort_field = SqlLiteral.sort_field(sort_by)
    sort_direction = SqlLiteral.sort_direction(sort_order)
    limit_lit = SqlLiteral.row_count(limit, default=20, cap=MAX_PAGE_SIZE)
    offset_lit = SqlLiteral.row_count(offset)

    def where() -> Tuple[str, List[Any]]:
        return build_where_clause_and_params(conditions)

    w, params = where()
    rows = Query(
        _join(
            f"SELECT {', '.join(PROFILE_COLUMNS)} FROM {profiles} p",
            w,
            f"ORDER BY {sort_field} {sort_direction}",
            f"LIMIT {limit_lit} OFFSET {offset_lit}",
        ),
        params,
    )

    w, params = where()
    count = Query(_join(f"SELECT COUNT(*) AS total_count FROM {profiles} p", w), params)

    w, params = where()
    measurement_count = Query(
        _join(
            f"SELECT COUNT(*) AS measurement_count FROM {measurements} m",
            "WHERE m.profile_id IN (",
            _join(f"SELECT DISTINCT p.profile_id FROM {profiles} p", w),
            ")",
        ),
        params,
    )

    w, params = where()
    quality_breakdown = Query(
        _join(
            "SELECT data_mode, COUNT(*) AS profile_count,",
            "AVG(CASE WHEN profile_temp_qc = 'A' THEN 5",
            "WHEN profile_temp_qc = '1' THEN 4",
            "WHEN profile_temp_qc = '2' THEN 3",
            "ELSE 1 END) AS avg_temp_quality",
            f"FROM {profiles} p",
            w,
            "GROUP BY data_mode",
            "ORDER BY profile_count DESC",
        ),
        params,
    )

    return ProfileQueries(
        rows=rows,
        count=count,
        measurement_count=measurement_count,
        quality_breakdown=quality_breakdown,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )

# -----------------------------------------------------------------------------
# Generic SELECT
# -----------------------------------------------------------------------------
def build_select(
    view: str,
    columns: Iterable[str],
    conditions: FilterCollection,
    *,
    order_by: Sequence[Tuple[SqlLiteral, SqlLiteral]] = (),
    limit: Optional[SqlLiteral] = None,
) -> Query:
    """
    Plain SELECT over one view. Column expressions are trusted (code constants);
    ordering and limits only accept validated literals.
    """
    w, params = build_where_clause_and_params(conditions)
    order = ", ".join(f"{f} {d}" for f, d in order_by)
    return Query(
        _join(
            f"SELECT {', '.join(columns)} FROM {_quote_dotted_identifier(view)}",
            w,
            f"ORDER BY {order}" if order else "",
            f"LIMIT {limit}" if limit is not None else "",
        ),
        params,
    )

# -----------------------------------------------------------------------------
# Public exports
# -----------------------------------------------------------------------------
__all__ = [
    "SqlLiteral",
    "Query",
    "ProfileQueries",
    "PROFILE_COLUMNS",
    "build_where_clause_and_params",
    "build_profile_queries",
    "build_select",
]
