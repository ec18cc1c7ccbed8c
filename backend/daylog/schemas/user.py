"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class UserCredentials(BaseModel):
    """Schema for register and login requests."""
    username: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int
    username: str
    created_at: datetime

    class Config:
        from_attributes = True


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"
    user_id: int
    username: str
