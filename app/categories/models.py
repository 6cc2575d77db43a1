"""Category models and schemas."""

from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, Field

from app.core.query_builder import Pagination

CategoryStatus = Literal["active", "inactive"]


class CategoryCreate(BaseModel):
    """Schema for creating a category."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    status: CategoryStatus = "active"


class CategoryUpdate(BaseModel):
    """Schema for updating a category."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    status: Optional[CategoryStatus] = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    status: str = "active"
    created_at: datetime
    updated_at: Optional[datetime] = None


class CategorySummary(BaseModel):
    """Category reference populated into plant documents."""
    id: str
    name: str
    description: Optional[str] = None


class CategoryListResponse(BaseModel):
    success: bool = True
    data: List[CategoryResponse]
    pagination: Pagination


class CategoryDetailResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: CategoryResponse
