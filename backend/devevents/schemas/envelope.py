"""
Uniform response envelope used by every /api endpoint.

    {"success": true,  "data": ..., "count": 3, "message": "..."}
    {"success": false, "error": "...", "errors": [{"field": ..., "message": ...}]}
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    count: Optional[int] = None
    message: Optional[str] = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str
    errors: Optional[list[dict[str, Any]]] = None
