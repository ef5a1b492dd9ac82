"""
Error kinds surfaced by the floatdash API.

Every ApiError renders as {"error": ..., "message": ...} with its status code.
"""

from __future__ import annotations
from typing import Any, Dict


class ApiError(Exception):
    status_code: int = 500
    error: str = "Internal error"

    def __init__(self, message: str, *, error: str | None = None):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class InvalidInput(ApiError):
    status_code = 400
    error = "Invalid input"


class InvalidDateRange(InvalidInput):
    error = "Invalid date range"


class NotFound(ApiError):
    status_code = 404
    error = "Not found"


class UpstreamQueryFailure(ApiError):
    status_code = 500
    error = "Query failed"


__all__ = [
    "ApiError",
    "InvalidInput",
    "InvalidDateRange",
    "NotFound",
    "UpstreamQueryFailure",
]
