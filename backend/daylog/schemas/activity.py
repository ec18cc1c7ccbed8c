"""
Pydantic schemas for Activity and ActivityDetail entities.

Request schemas accept both snake_case and camelCase keys.
"""
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from daylog.core.utils import as_bool, to_storage_datetime


def _number_to_str(v):
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class DetailFields(BaseModel):
    """Subjective fields recorded in an activity detail."""
    mood: Optional[str] = None
    energy_level: Optional[str] = None
    environment_description: Optional[str] = None
    related_people: Optional[str] = None
    personal_feeling: Optional[str] = None

    @field_validator("energy_level", mode="before")
    @classmethod
    def coerce_energy_level(cls, v):
        """Energy levels are often sent as numbers."""
        return _number_to_str(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ActivityCreate(BaseModel):
    """Schema for starting an activity."""
    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    start_location: Optional[str] = None
    is_fixed_schedule: Optional[bool] = False

    @field_validator("start_time", mode="after")
    @classmethod
    def normalize_start_time(cls, v):
        return to_storage_datetime(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ActivityEnd(DetailFields):
    """Schema for completing an activity and recording a detail."""
    end_time: Optional[datetime] = None
    end_location: Optional[str] = None

    @field_validator("end_time", mode="after")
    @classmethod
    def normalize_end_time(cls, v):
        return to_storage_datetime(v)

    def detail_fields(self) -> DetailFields:
        return DetailFields(**self.model_dump(include=set(DetailFields.model_fields)))


class ActivityUpdate(BaseModel):
    """Schema for editing an activity's basic info."""
    title: Optional[str] = None
    description: Optional[str] = None
    is_fixed_schedule: Optional[bool] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ActivityDetailUpdate(DetailFields):
    """Schema for editing one detail record. Omitted fields are left unchanged."""
    pass


class SearchFilters(BaseModel):
    """
    Optional search predicates, combined with AND.

    A predicate is absent when its field is None; 0 is a real value
    (hour=0 matches activities starting at midnight).
    """
    year: Optional[int] = Field(None, ge=1, le=9999)
    month: Optional[int] = Field(None, ge=1, le=12)
    day: Optional[int] = Field(None, ge=1, le=31)
    hour: Optional[int] = Field(None, ge=0, le=23)
    title: Optional[str] = None
    description: Optional[str] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    related_people: Optional[str] = None
    personal_feeling: Optional[str] = None

    def provided(self) -> dict:
        """Predicates that were supplied."""
        return {name: value for name, value in self.model_dump().items() if value is not None}


class ActivityDetailResponse(BaseModel):
    """Schema for activity detail response."""
    id: int
    activity_id: int
    mood: Optional[str] = None
    energy_level: Optional[str] = None
    environment_description: Optional[str] = None
    related_people: Optional[str] = None
    personal_feeling: Optional[str] = None
    recorded_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ActivityResponse(BaseModel):
    """Schema for activity response. details holds full history or only the latest entry."""
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    is_fixed_schedule: bool = False
    created_at: datetime
    updated_at: datetime
    details: List[ActivityDetailResponse] = []

    @field_validator("is_fixed_schedule", mode="before")
    @classmethod
    def map_fixed_schedule(cls, v):
        return as_bool(v)

    class Config:
        from_attributes = True
