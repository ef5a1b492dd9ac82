import math
from typing import Any, Dict, Optional

from ..dates import julian_day_to_epoch_ms

QC_SCORES: Dict[str, int] = {
    "A": 5,  # adjusted, highest quality
    "1": 4,  # good
    "2": 3,  # probably good
    "B": 2,  # real-time
    "C": 1,  # correctable
    "F": 0,  # failed
}


def quality_score(temp_qc: Optional[str], psal_qc: Optional[str], pres_qc: Optional[str]) -> int:
    """
    0-5 score for a profile: the mean of the three per-variable QC scores,
    rounded half up. Unknown codes score 0.
    """
    total = sum(QC_SCORES.get(code or "", 0) for code in (temp_qc, psal_qc, pres_qc))
    return math.floor(total / 3 + 0.5)


def position_quality(position_qc: Optional[str]) -> str:
    return "good" if position_qc == "1" else "questionable"


def with_derived_fields(profile: Dict[str, Any]) -> Dict[str, Any]:
    juld = profile.get("juld")
    return {
        **profile,
        "juld_readable": julian_day_to_epoch_ms(juld) if juld else None,
        "position_quality": position_quality(profile.get("position_qc")),
        "quality_score": quality_score(
            profile.get("profile_temp_qc"),
            profile.get("profile_psal_qc"),
            profile.get("profile_pres_qc"),
        ),
    }
