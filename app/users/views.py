"""Users API routes."""

from typing import Dict
from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_query_params
from app.users.models import (
    UserCreate,
    UserUpdate,
    UserListResponse,
    UserDetailResponse,
)
from app.users.service import UserService


router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=UserListResponse)
async def list_users(params: Dict[str, str] = Depends(get_query_params)):
    """
    List users.
    
    - **page**, **limit**: pagination (default 10 per page, max 100)
    - **sort**: `first_name`, `last_name` or `created_at`; prefix `-` for descending
    - **search**: matches first name, last name or email
    - **status**: `active` / `inactive`
    - **startDate**, **endDate**: creation date range
    """
    result = await UserService.list_users(params)
    return UserListResponse(data=result.data, pagination=result.pagination)


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(user_id: str):
    """Get a single user."""
    user = await UserService.get_user(user_id)
    return UserDetailResponse(data=user)


@router.post("", response_model=UserDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate):
    """Create a user. Emails must be unique."""
    user = await UserService.create_user(data)
    return UserDetailResponse(message="User created", data=user)


@router.put("/{user_id}", response_model=UserDetailResponse)
async def update_user(user_id: str, data: UserUpdate):
    """Update a user. Only the supplied fields change."""
    user = await UserService.update_user(user_id, data)
    return UserDetailResponse(message="User updated", data=user)


@router.delete("/{user_id}")
async def delete_user(user_id: str):
    """Delete a user and their favorites."""
    await UserService.delete_user(user_id)
    return {"success": True, "message": "User deleted"}
