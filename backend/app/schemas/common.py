"""Common API response schemas."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Consistent JSON envelope for API responses."""

    data: T


class ErrorResponse(BaseModel):
    """Failure body; ``details`` is only filled in debug mode."""

    error: str
    code: str
    details: str | None = None
