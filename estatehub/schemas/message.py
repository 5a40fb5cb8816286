from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime

class MessageCreate(BaseModel):
    # Email address or user id of the recipient
    recipient: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, max_length=5000)
    property_id: Optional[UUID] = None

class MessageResponse(BaseModel):
    id: UUID
    sender_id: UUID
    recipient_id: UUID
    property_id: Optional[UUID] = None
    text: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}

class UnreadCountResponse(BaseModel):
    unread: int
