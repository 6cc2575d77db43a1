"""Plants API routes."""

from typing import Dict
from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_query_params
from app.plants.models import (
    PlantCreate,
    PlantUpdate,
    AssignCategoriesRequest,
    PlantListResponse,
    PlantDetailResponse,
    RelatedPlantsResponse,
    PlantDeleteResponse,
    AssignCategoriesResponse,
)
from app.plants.service import PlantService


router = APIRouter(prefix="/plants", tags=["Plants"])


@router.get("", response_model=PlantListResponse)
async def list_plants(params: Dict[str, str] = Depends(get_query_params)):
    """
    List catalog plants with their categories.

    - **page**, **limit**: pagination (default 5 per page, max 50)
    - **sort**: `name`, `status`, `favorite_count`, `created_at`, `updated_at`; `-` prefix for descending
    - **search**: matches name or description
    - **status**, **name**, **description**, **category_ids**: exact filters
    - **favorite_count_gte**, **favorite_count_lte** (also `_gt`, `_lt`): range filters
    - **startDate**, **endDate**: creation date range
    """
    result = await PlantService.list_plants(params)
    return PlantListResponse(data=result.data, pagination=result.pagination)


@router.post("/assign-categories", response_model=AssignCategoriesResponse)
async def assign_categories(request: AssignCategoriesRequest):
    """Assign several categories to several plants at once."""
    counts = await PlantService.assign_categories(request.plant_ids, request.category_ids)
    return AssignCategoriesResponse(message="Categories assigned to plants", **counts)


@router.get("/{plant_id}", response_model=PlantDetailResponse)
async def get_plant(plant_id: str):
    """Get a plant with its categories."""
    return PlantDetailResponse(data=await PlantService.get_plant(plant_id))


@router.get("/{plant_id}/related", response_model=RelatedPlantsResponse)
async def get_related_plants(plant_id: str):
    """Up to 10 other plants sharing a category with this one."""
    return RelatedPlantsResponse(data=await PlantService.get_related(plant_id))


@router.post("", response_model=PlantDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_plant(data: PlantCreate):
    """
    Add a plant to the catalog.

    `category_ids` accepts a list or a comma-separated string. `image` is the
    stored file name of an already uploaded image.
    """
    plant = await PlantService.create_plant(data)
    return PlantDetailResponse(message="Plant created", data=plant)


@router.put("/{plant_id}", response_model=PlantDetailResponse)
async def update_plant(plant_id: str, data: PlantUpdate):
    """Update a plant. Only the supplied fields change."""
    plant = await PlantService.update_plant(plant_id, data)
    return PlantDetailResponse(message="Plant updated", data=plant)


@router.delete("/{plant_id}", response_model=PlantDeleteResponse)
async def delete_plant(plant_id: str):
    """Delete a plant and its favorites."""
    deleted = await PlantService.delete_plant(plant_id)
    return PlantDeleteResponse(message="Plant deleted", deleted_data=deleted)
