from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from estatehub.models.user import UserRole


# ─── Media Schemas ────────────────────────────────────────────────────────────

class PropertyMediaResponse(BaseModel):
    id: UUID
    url: str
    display_order: int

    model_config = {"from_attributes": True}


class MediaUrlRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=500)


# ─── Property Base ────────────────────────────────────────────────────────────

class PropertyBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    location: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    rooms: int = Field(0, ge=0)
    floor: int = 0
    area: Optional[float] = Field(None, ge=0)
    distance_to_metro: Optional[float] = Field(None, ge=0)
    distance_to_university: Optional[float] = Field(None, ge=0)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class PropertyUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    rooms: Optional[int] = Field(None, ge=0)
    floor: Optional[int] = None
    area: Optional[float] = Field(None, ge=0)
    distance_to_metro: Optional[float] = Field(None, ge=0)
    distance_to_university: Optional[float] = Field(None, ge=0)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


# ─── Response Schemas ─────────────────────────────────────────────────────────

class PropertyResponse(PropertyBase):
    id: UUID
    owner_id: UUID
    is_verified: bool
    is_archived: bool
    rating_average: float
    rating_count: int
    view_count: int
    photos: List[PropertyMediaResponse] = []
    videos: List[PropertyMediaResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PropertyOwnerSummary(BaseModel):
    id: UUID
    name: str
    email: str
    role: UserRole
    id_verified: bool

    model_config = {"from_attributes": True}


class AdminPropertyResponse(PropertyResponse):
    """Admin review view: the listing together with its owner."""
    owner: Optional[PropertyOwnerSummary] = None
