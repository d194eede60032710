"""Uniform response envelope used by every backend endpoint."""
from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, message, data?, error?}`` wrapper around a payload."""

    success: bool
    message: str = ""
    data: T | None = None
    error: str | None = None


__all__ = ["ApiResponse"]
