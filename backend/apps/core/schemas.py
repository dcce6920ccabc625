"""
Core schemas - the uniform response envelope.

Every endpoint answers ``{"success": true, "data": ..., "message": ...}`` or
``{"success": false, "message": ...}``.
"""

from typing import Any

from ninja import Schema
from pydantic import Field


class ErrorResponse(Schema):
    """Standard error response format."""

    success: bool = False
    message: str = Field(..., description="Human-readable error message")

    model_config = {
        "json_schema_extra": {"example": {"success": False, "message": "Plan not found"}}
    }


def api_success(data: Any, message: str = "") -> dict[str, Any]:
    return {"success": True, "data": data, "message": message}


def api_error(message: str) -> dict[str, Any]:
    return {"success": False, "message": message}
