from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from datetime import datetime
from estatehub.models.report import ReportReason, ReportStatus

class ReportCreate(BaseModel):
    reported_user_id: Optional[UUID] = None
    reported_property_id: Optional[UUID] = None
    reason: ReportReason
    description: Optional[str] = None

class ReportAction(BaseModel):
    admin_notes: Optional[str] = None

class ReportResponse(BaseModel):
    id: UUID
    reporter_id: UUID
    reported_user_id: Optional[UUID] = None
    reported_property_id: Optional[UUID] = None
    reason: ReportReason
    description: Optional[str] = None
    status: ReportStatus
    admin_notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
