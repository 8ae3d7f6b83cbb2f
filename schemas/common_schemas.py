"""
RecipeShare Common Schemas
Response envelope and pagination metadata shared by every endpoint
"""

import math
from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel

DataT = TypeVar("DataT")


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses"""
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope wrapping every successful response"""
    success: bool = True
    message: str = "Success"
    data: Optional[DataT] = None
    meta: Optional[PaginationMeta] = None


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Envelope for failed requests"""
    success: bool = False
    message: str
    error: str
    errors: Optional[List[FieldError]] = None
    details: Optional[Any] = None
    request_id: Optional[str] = None
