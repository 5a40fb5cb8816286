from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from datetime import datetime

class ReviewCreate(BaseModel):
    target_user_id: UUID
    # Range is enforced by the review service so the failure has its own kind
    rating: int
    comment: Optional[str] = None

class ReviewResponse(BaseModel):
    id: UUID
    reviewer_id: UUID
    target_user_id: UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
