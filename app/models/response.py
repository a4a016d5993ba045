"""
API Response Models

Standardized response structures for search endpoints.
"""

from typing import Any, Dict, List
from pydantic import BaseModel, Field, ConfigDict


class SearchResponse(BaseModel):
    """Paginated search envelope."""
    results: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Normalized media items"
    )
    total_results: int = 0
    total_pages: int = 0
    page: int = 1


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: bool = True
    message: str
    status_code: int

    model_config = ConfigDict(populate_by_name=True)
