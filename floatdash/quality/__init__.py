"""
Quality scoring and display labels for ARGO profiles.
"""

from .scoring import (
    QC_SCORES,
    quality_score,
    position_quality,
    with_derived_fields,
)
from .labels import (
    DATA_CENTRE_LABELS,
    DATA_MODE_LABELS,
    QC_LABELS,
    data_centre_label,
    data_mode_label,
    qc_label,
    quality_options,
)

__all__ = [
    "QC_SCORES",
    "quality_score",
    "position_quality",
    "with_derived_fields",
    "DATA_CENTRE_LABELS",
    "DATA_MODE_LABELS",
    "QC_LABELS",
    "data_centre_label",
    "data_mode_label",
    "qc_label",
    "quality_options",
]
