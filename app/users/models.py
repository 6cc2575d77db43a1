"""User models and schemas."""

from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, EmailStr, Field

from app.core.query_builder import Pagination

UserStatus = Literal["active", "inactive"]


class UserCreate(BaseModel):
    """Schema for creating a user."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    status: UserStatus = "active"


class UserUpdate(BaseModel):
    """Schema for updating a user. Omitted fields are left unchanged."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    status: Optional[UserStatus] = None


class UserResponse(BaseModel):
    """Schema for a user document."""
    id: str
    first_name: str
    last_name: str
    email: str
    status: str = "active"
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    success: bool = True
    data: List[UserResponse]
    pagination: Pagination


class UserDetailResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: UserResponse
