from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session
from uuid import UUID
from estatehub.core.database import get_db
from estatehub.models.user import User
from estatehub.schemas.user import ProfileUpdate, PublicUserResponse, UserResponse
from estatehub.services import auth_service
from estatehub.utils.file_storage import save_avatar
from estatehub.api.deps import get_current_active_user

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_my_profile(current_user: User = Depends(get_current_active_user)):
    return UserResponse.from_user(current_user)


@router.put("/me", response_model=UserResponse)
async def update_my_profile(
    updates: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Edit name, phone, city, occupation and bio. Email and role are fixed."""
    user = auth_service.update_profile(db, current_user, updates.model_dump(exclude_unset=True))
    return UserResponse.from_user(user)


@router.post("/me/avatar", response_model=UserResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    url = await save_avatar(current_user.id, file)
    user = auth_service.set_avatar(db, current_user, url)
    return UserResponse.from_user(user)


@router.get("/find", response_model=PublicUserResponse)
async def find_user(
    query: str = Query(..., min_length=1, description="Email address or full name"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Look up someone to start a chat with."""
    return auth_service.find_contact(db, current_user, query)


@router.get("/{user_id}", response_model=PublicUserResponse)
async def get_public_profile(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return auth_service.get_user_or_404(db, user_id)
