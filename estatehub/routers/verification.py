from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session
from estatehub.core.database import get_db
from estatehub.models.user import User
from estatehub.schemas.user import UserResponse
from estatehub.schemas.verification import VerificationStatusResponse
from estatehub.services import auth_service
from estatehub.services.eligibility import can_log_in
from estatehub.utils.file_storage import save_id_document
from estatehub.api.deps import get_current_active_user

router = APIRouter(prefix="/verification", tags=["Verification"])

@router.post("/upload-id", response_model=UserResponse)
async def upload_id_document(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Upload a government ID document for admin review.
    Puts the account back into review until an admin verifies it.
    """
    # Checked before touching the disk
    auth_service.ensure_can_submit_id(current_user)
    path = await save_id_document(file, current_user.id)
    user = auth_service.attach_id_document(db, current_user, path)
    return UserResponse.from_user(user)

@router.get("/status", response_model=VerificationStatusResponse)
async def get_verification_status(
    current_user: User = Depends(get_current_active_user)
):
    """Get current user's verification status"""
    return VerificationStatusResponse(
        email_status=current_user.email_status.value,
        id_status=current_user.id_status.value,
        approval_status=current_user.approval_status.value,
        is_verified=current_user.is_verified,
        can_log_in=can_log_in(current_user),
        has_id_document=bool(current_user.id_document_path),
    )
