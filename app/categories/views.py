"""Categories API routes."""

from typing import Dict
from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_query_params
from app.categories.models import (
    CategoryCreate,
    CategoryUpdate,
    CategoryListResponse,
    CategoryDetailResponse,
)
from app.categories.service import CategoryService


router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=CategoryListResponse)
async def list_categories(params: Dict[str, str] = Depends(get_query_params)):
    """
    List categories.
    
    Supports `page`, `limit`, `sort` (name, status, created_at, updated_at),
    `search` (name, description), `status` and `name` filters.
    """
    result = await CategoryService.list_categories(params)
    return CategoryListResponse(data=result.data, pagination=result.pagination)


@router.get("/{category_id}", response_model=CategoryDetailResponse)
async def get_category(category_id: str):
    """Get a single category."""
    return CategoryDetailResponse(data=await CategoryService.get_category(category_id))


@router.post("", response_model=CategoryDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate):
    """Create a category. Names must be unique."""
    category = await CategoryService.create_category(data)
    return CategoryDetailResponse(message="Category created", data=category)


@router.put("/{category_id}", response_model=CategoryDetailResponse)
async def update_category(category_id: str, data: CategoryUpdate):
    """Update a category."""
    category = await CategoryService.update_category(category_id, data)
    return CategoryDetailResponse(message="Category updated", data=category)


@router.delete("/{category_id}")
async def delete_category(category_id: str):
    """Delete a category; plants referencing it lose the reference."""
    await CategoryService.delete_category(category_id)
    return {"success": True, "message": "Category deleted"}
