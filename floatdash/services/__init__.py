"""
Request-level services for the floatdash API.

Each service builds its queries, runs them against the warehouse and shapes
the JSON response.
"""

from .common import run_all, run_query
from .profiles import filter_options, paginate, profile_measurements, search_profiles
from .charts import CHARTS, chart_data
from .floats import float_profile, float_timeseries, float_trajectory

__all__ = [
    "run_all",
    "run_query",
    "filter_options",
    "paginate",
    "profile_measurements",
    "search_profiles",
    "CHARTS",
    "chart_data",
    "float_profile",
    "float_timeseries",
    "float_trajectory",
]
