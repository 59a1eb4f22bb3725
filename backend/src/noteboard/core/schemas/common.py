"""
Shared response schemas - pagination, errors, health
"""

from datetime import datetime, timezone
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar('T')


class PaginationResponse(BaseModel, Generic[T]):
    """Pagination wrapper for API responses"""

    items: List[T]
    total: int
    page: int
    per_page: int
    pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def create(cls, items: List[T], total: int, page: int, per_page: int):
        pages = (total + per_page - 1) // per_page
        return cls(
            items=items,
            total=total,
            page=page,
            per_page=per_page,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1,
        )


class ErrorResponse(BaseModel):
    """Body returned for application errors."""

    error: str = Field(description="Error code, e.g. INVALID_ORDER")
    message: str = Field(description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(default=None)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str
    checks: dict[str, dict[str, Any]] = Field(description="Individual component health checks")
