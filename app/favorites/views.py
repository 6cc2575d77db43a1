"""API routes for user plant favorites."""

from typing import Dict
from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import get_query_params
from app.favorites.models import (
    FavoriteRequest,
    FavoriteListResponse,
    FavoriteDetailResponse,
    FavoriteCheckResponse,
    FavoritePlantsResponse,
)
from app.favorites.service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("", response_model=FavoriteListResponse)
async def list_favorites(params: Dict[str, str] = Depends(get_query_params)):
    """
    List favorites.
    
    Filter with `user_id` / `plant_id`, paginate with `page` / `limit`.
    """
    result = await FavoriteService.list_favorites(params)
    return FavoriteListResponse(data=result.data, pagination=result.pagination)


@router.get("/check", response_model=FavoriteCheckResponse)
async def check_favorite(
    user_id: str = Query(..., description="User id"),
    plant_id: str = Query(..., description="Plant id"),
):
    """Check whether a user has favorited a plant."""
    favorited = await FavoriteService.is_favorited(user_id, plant_id)
    return FavoriteCheckResponse(is_favorited=favorited)


@router.post("", response_model=FavoriteDetailResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(request: FavoriteRequest):
    """Add a plant to a user's favorites."""
    favorite = await FavoriteService.add_favorite(request.user_id, request.plant_id)
    return FavoriteDetailResponse(message="Added to favorites", data=favorite)


@router.delete("")
async def remove_favorite(request: FavoriteRequest):
    """Remove a plant from a user's favorites. 404 if it was not favorited."""
    await FavoriteService.remove_favorite(request.user_id, request.plant_id)
    return {"success": True, "message": "Removed from favorites"}


@router.get("/user/{user_id}", response_model=FavoritePlantsResponse)
async def get_user_favorites(user_id: str):
    """Plants favorited by a user, most recent first."""
    plants = await FavoriteService.get_user_favorite_plants(user_id)
    return FavoritePlantsResponse(data=plants)
