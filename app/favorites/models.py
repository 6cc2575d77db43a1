"""Favorite models and schemas."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from app.core.query_builder import Pagination


class FavoriteRequest(BaseModel):
    """User/plant pair identifying a favorite."""
    user_id: str = Field(..., min_length=1)
    plant_id: str = Field(..., min_length=1)


class FavoriteResponse(BaseModel):
    id: str
    user_id: str
    plant_id: str
    created_at: datetime


class FavoritePlant(BaseModel):
    """Plant fields shown in a user's favorites list."""
    id: str
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    image_url: Optional[str] = None


class FavoriteListResponse(BaseModel):
    success: bool = True
    data: List[FavoriteResponse]
    pagination: Pagination


class FavoriteDetailResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: FavoriteResponse


class FavoriteCheckResponse(BaseModel):
    success: bool = True
    is_favorited: bool


class FavoritePlantsResponse(BaseModel):
    success: bool = True
    data: List[FavoritePlant]
