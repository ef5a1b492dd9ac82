import pytest

from floatdash.filters import (
    FilterCollection,
    FilterExpression,
    Operator,
    all_of,
    any_of,
    build_conditions,
    parse_filter_request,
)
from floatdash.query import SqlLiteral, build_profile_queries, build_where_clause_and_params


def _queries(params, **kw):
    req = parse_filter_request(params)
    return build_profile_queries(
        build_conditions(req),
        profiles_view="ARGO.ARGO_FULL.PROFILES",
        measurements_view="ARGO.ARGO_FULL.MEASUREMENTS",
        sort_by=req.sort_by,
        sort_order=req.sort_order,
        limit=req.limit,
        offset=req.offset,
        **kw,
    )


def test_empty_collection_renders_no_where():
    sql, params = build_where_clause_and_params(FilterCollection())
    assert sql == ""
    assert params == []


def test_values_are_bound_not_inlined():
    sql, params = build_where_clause_and_params(
        all_of(FilterExpression("platform_number", Operator.EQ, "1' OR '1'='1"))
    )
    assert sql == "WHERE platform_number = ?"
    assert params == ["1' OR '1'='1"]


def test_nested_groups_and_between():
    root = all_of(
        any_of(
            FilterExpression("data_mode", Operator.EQ, "R"),
            FilterExpression("data_mode", Operator.EQ, "A"),
        ),
        FilterExpression("latitude", Operator.BT, (-10.0, 10.0)),
    )
    sql, params = build_where_clause_and_params(root)
    assert sql == "WHERE (data_mode = ? OR data_mode = ?) AND latitude BETWEEN ? AND ?"
    assert params == ["R", "A", -10.0, 10.0]


def test_like_is_case_insensitive_and_escaped():
    sql, params = build_where_clause_and_params(
        all_of(FilterExpression("pi_name", Operator.LK, "50%_off!"))
    )
    assert sql == "WHERE UPPER(pi_name) LIKE UPPER(?) ESCAPE '!'"
    assert params == ["%50!%!_off!!%"]


def test_in_list_and_empty_in():
    sql, params = build_where_clause_and_params(
        all_of(FilterExpression("profile_temp_qc", Operator.IN, ["B", "C"]))
    )
    assert sql == "WHERE profile_temp_qc IN (?, ?)"
    assert params == ["B", "C"]

    sql, params = build_where_clause_and_params(
        all_of(FilterExpression("profile_temp_qc", Operator.IN, []))
    )
    assert sql == "WHERE 1=0"


def test_empty_nested_groups_render_no_where():
    sql, params = build_where_clause_and_params(all_of(any_of(), all_of()))
    assert (sql, params) == ("", [])


def test_params_are_positional_in_placeholder_order():
    sql, params = build_where_clause_and_params(all_of(
        FilterExpression("data_centre", Operator.EQ, "ME"),
        FilterExpression("juld", Operator.GTE, 27028),
    ))
    assert sql == "WHERE data_centre = ? AND juld >= ?"
    assert params == ["ME", 27028]


def test_all_queries_share_predicates():
    q = _queries({"search": "ME", "min_lat": "-10", "max_lat": "10", "quality_filter": "problematic"})
    where, params = build_where_clause_and_params(
        build_conditions(parse_filter_request({"search": "ME", "min_lat": "-10", "max_lat": "10",
                                               "quality_filter": "problematic"}))
    )
    for query in (q.rows, q.count, q.measurement_count, q.quality_breakdown):
        assert where in query.sql
        assert query.params == params
    assert len(params) == 5 + 2 + 9


def test_rows_query_paging_and_sort():
    q = _queries({"page": "3", "limit": "10", "sort_by": "latitude", "sort_order": "asc"})
    assert q.rows.sql.endswith("ORDER BY latitude ASC LIMIT 10 OFFSET 20")
    assert "FROM ARGO.ARGO_FULL.PROFILES p" in q.rows.sql
    assert "WHERE" not in q.rows.sql


def test_bad_sort_values_use_defaults():
    q = build_profile_queries(
        FilterCollection(),
        profiles_view="profiles",
        measurements_view="measurements",
        sort_by="1; DROP TABLE profiles",
        sort_order="up",
    )
    assert "ORDER BY date_creation DESC" in q.rows.sql
    assert q.sort_field.text == "date_creation"


def test_measurement_count_uses_profile_subquery():
    q = _queries({"data_center": "AO"})
    assert q.measurement_count.sql == (
        "SELECT COUNT(*) AS measurement_count FROM ARGO.ARGO_FULL.MEASUREMENTS m "
        "WHERE m.profile_id IN ( SELECT DISTINCT p.profile_id FROM ARGO.ARGO_FULL.PROFILES p "
        "WHERE data_centre = ? )"
    )


def test_literals_cannot_be_built_directly():
    with pytest.raises(TypeError):
        SqlLiteral("DESC; DROP TABLE profiles")


@pytest.mark.parametrize("raw,expected", [("25", "25"), (-3, "0"), ("x", "0"), (500, "100")])
def test_row_count_literal(raw, expected):
    assert SqlLiteral.row_count(raw, cap=100).text == expected


def test_sort_literals():
    assert SqlLiteral.sort_field("juld").text == "juld"
    assert SqlLiteral.sort_field("pi_name").text == "date_creation"
    assert SqlLiteral.sort_direction("asc").text == "ASC"
    assert SqlLiteral.sort_direction(None).text == "DESC"
