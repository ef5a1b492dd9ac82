"""
Date handling for the floatdash API.

This module validates date ranges and converts between calendar dates and
ARGO Julian day offsets.
"""

from .julian import (
    JULIAN_EPOCH,
    parse_date,
    validate_date_range,
    to_julian_day,
    julian_day_to_datetime,
    julian_day_to_epoch_ms,
    to_timestamp_literal,
)

__all__ = [
    "JULIAN_EPOCH",
    "parse_date",
    "validate_date_range",
    "to_julian_day",
    "julian_day_to_datetime",
    "julian_day_to_epoch_ms",
    "to_timestamp_literal",
]
