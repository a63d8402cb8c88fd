"""
User Schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.models.user import UserRole


class UserCreate(BaseModel):
    """User registration; the role cannot be changed later"""
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    role: UserRole = UserRole.CITIZEN
    phone: Optional[str] = None
    avatar: Optional[str] = None


class UserResponse(BaseModel):
    """User response schema"""
    id: str
    name: str
    email: str
    role: UserRole
    avatar: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
