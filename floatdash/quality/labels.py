from typing import Dict, List

DATA_CENTRE_LABELS: Dict[str, str] = {
    "AO": "AO - Australia (CSIRO)",
    "BO": "BO - France (Coriolis)",
    "CS": "CS - Canada",
    "HZ": "HZ - Japan (JMA)",
    "IF": "IF - Germany (BSH)",
    "JA": "JA - Japan (JAMSTEC)",
    "KM": "KM - South Korea",
    "ME": "ME - USA (AOML)",
    "NM": "NM - USA (PMEL)",
    "PH": "PH - Philippines",
    "VN": "VN - India (INCOIS)",
}

DATA_MODE_LABELS: Dict[str, str] = {
    "R": "Real-time",
    "A": "Adjusted (Delayed Mode)",
    "D": "Delayed Mode",
}

QC_LABELS: Dict[str, str] = {
    "1": "Good",
    "2": "Probably Good",
    "3": "Probably Bad",
    "4": "Bad",
    "8": "Estimated",
    "9": "Missing",
    "A": "Adjusted/Delayed Mode",
    "B": "Real-time",
    "C": "Real-time (Corrected)",
    "D": "Delayed Mode",
    "F": "Failed",
}

# Always offered ahead of the raw flags found in the data.
DERIVED_QUALITY_OPTIONS: List[Dict[str, str]] = [
    {"value": "all", "label": "All Quality"},
    {"value": "good", "label": "Good Quality Only (QC=A)"},
    {"value": "real_time", "label": "Real-time (Data Mode R)"},
    {"value": "adjusted", "label": "Delayed Mode (Data Mode A)"},
    {"value": "problematic", "label": "Problematic (QC=B/C/F)"},
]

# Raw flags already covered by a derived option.
_SUBSUMED_QC_FLAGS = {"A", "1", "2", "3", "4"}


def data_centre_label(centre: str) -> str:
    return DATA_CENTRE_LABELS.get(centre, f"{centre} - Unknown")


def data_mode_label(mode: str) -> str:
    return DATA_MODE_LABELS.get(mode, mode)


def qc_label(qc: str) -> str:
    return QC_LABELS.get(qc, f"QC {qc}")


def quality_options(flags: List[str]) -> List[Dict[str, str]]:
    raw = [{"value": f, "label": qc_label(f)} for f in flags if f and f not in _SUBSUMED_QC_FLAGS]
    return [dict(o) for o in DERIVED_QUALITY_OPTIONS] + raw
