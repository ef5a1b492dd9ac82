import pytest

from floatdash.quality import (
    data_centre_label,
    data_mode_label,
    position_quality,
    qc_label,
    quality_options,
    quality_score,
    with_derived_fields,
)


@pytest.mark.parametrize("codes,expected", [
    (("A", "A", "A"), 5),
    (("F", "F", "F"), 0),
    (("A", "1", "B"), 4),   # 11/3 = 3.67
    (("1", "2", "2"), 3),   # 10/3 = 3.33
    (("A", "F", "F"), 2),   # 5/3 = 1.67
    (("C", "F", "F"), 0),   # 1/3 = 0.33
    (("2", "B", "F"), 2),   # 5/3
    (("X", None, ""), 0),
])
def test_quality_score(codes, expected):
    assert quality_score(*codes) == expected


def test_quality_score_exact_means():
    assert quality_score("A", "C", "F") == 2   # 6/3
    assert quality_score("1", "1", "C") == 3   # 9/3
    assert quality_score("1", "1", "1") == 4


def test_position_quality():
    assert position_quality("1") == "good"
    assert position_quality("2") == "questionable"
    assert position_quality(None) == "questionable"


def test_derived_fields():
    row = with_derived_fields({
        "juld": 1,
        "position_qc": "1",
        "profile_temp_qc": "A",
        "profile_psal_qc": "1",
        "profile_pres_qc": "B",
    })
    assert row["quality_score"] == 4
    assert row["position_quality"] == "good"
    assert row["juld_readable"] == -631152000000 + 86_400_000


def test_missing_juld_has_no_readable_date():
    assert with_derived_fields({"juld": None})["juld_readable"] is None


def test_labels():
    assert data_centre_label("ME") == "ME - USA (AOML)"
    assert data_centre_label("XX") == "XX - Unknown"
    assert data_mode_label("R") == "Real-time"
    assert data_mode_label("Q") == "Q"
    assert qc_label("F") == "Failed"
    assert qc_label("7") == "QC 7"


def test_quality_options_put_derived_entries_first():
    opts = quality_options(["1", "2", "A", "B", "F"])
    values = [o["value"] for o in opts]
    assert values[:5] == ["all", "good", "real_time", "adjusted", "problematic"]
    assert values[5:] == ["B", "F"]
    assert opts[-1]["label"] == "Failed"
