"""
API routes for the floatdash service.
"""

from .profiles import router as profiles_router
from .charts import router as charts_router
from .floats import router as floats_router

__all__ = [
    "profiles_router",
    "charts_router",
    "floats_router",
]
