"""Plant catalog models and schemas."""

from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, Field, field_validator

from app.categories.models import CategorySummary
from app.core.query_builder import Pagination

PlantStatus = Literal["active", "inactive"]


def split_ids(value):
    """Accept a list of ids or a comma-separated string ("id1,id2")."""
    if value is None:
        return None
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class PlantCreate(BaseModel):
    """Schema to add a plant to the catalog."""
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1, description="Stored image file name")
    category_ids: List[str] = Field(..., description="Category ids, list or comma-separated")

    @field_validator("category_ids", mode="before")
    @classmethod
    def parse_category_ids(cls, v):
        return split_ids(v)

    @field_validator("category_ids")
    @classmethod
    def require_category(cls, v):
        if not v:
            raise ValueError("At least one category is required")
        return v


class PlantUpdate(BaseModel):
    """Schema to update a plant. Omitted fields keep their value."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = Field(None, min_length=1)
    status: Optional[PlantStatus] = None
    category_ids: Optional[List[str]] = None

    @field_validator("category_ids", mode="before")
    @classmethod
    def parse_category_ids(cls, v):
        return split_ids(v)


class AssignCategoriesRequest(BaseModel):
    """Add every listed category to every listed plant."""
    plant_ids: List[str] = Field(..., min_length=1)
    category_ids: List[str] = Field(..., min_length=1)


class PlantResponse(BaseModel):
    """A catalog plant with its categories populated."""
    id: str
    name: str
    description: str
    image: str
    image_url: Optional[str] = None
    status: str = "active"
    category_ids: List[str] = Field(default_factory=list)
    categories: List[CategorySummary] = Field(default_factory=list)
    favorite_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None


class PlantListResponse(BaseModel):
    success: bool = True
    data: List[PlantResponse]
    pagination: Pagination


class RelatedPlantsResponse(BaseModel):
    success: bool = True
    data: List[PlantResponse]


class PlantDetailResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: PlantResponse


class DeletedPlant(BaseModel):
    id: str
    name: str
    deleted_image: Optional[str] = None


class PlantDeleteResponse(BaseModel):
    success: bool = True
    message: str
    deleted_data: DeletedPlant


class AssignCategoriesResponse(BaseModel):
    success: bool = True
    message: str
    matched_count: int
    modified_count: int
