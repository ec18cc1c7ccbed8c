"""
Pydantic schemas for CustomOption entity.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional


class CustomOptionCreate(BaseModel):
    """Schema for custom option creation."""
    option_type: Optional[str] = None
    value: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CustomOptionResponse(BaseModel):
    """Schema for custom option response."""
    id: int
    user_id: int
    option_type: str
    value: str

    class Config:
        from_attributes = True
