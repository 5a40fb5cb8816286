from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from estatehub.core.database import get_db
from estatehub.models.user import User
from estatehub.schemas.report import ReportCreate, ReportResponse
from estatehub.services import reports
from estatehub.api.deps import get_current_active_user

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("/", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    payload: ReportCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Report a user or a property (exactly one of the two)."""
    return reports.create_report(
        db,
        reporter_id=current_user.id,
        reason=payload.reason,
        description=payload.description,
        reported_user_id=payload.reported_user_id,
        reported_property_id=payload.reported_property_id,
    )
