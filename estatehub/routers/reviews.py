from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
from estatehub.core.database import get_db
from estatehub.models.user import User
from estatehub.schemas.review import ReviewCreate, ReviewResponse
from estatehub.schemas.user import PublicUserResponse
from estatehub.services import auth_service, reviews
from estatehub.api.deps import get_current_active_user

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def add_review(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Rate a user you have messaged before. Submitting again replaces
    your earlier review of the same user.
    """
    return reviews.add_review(
        db, current_user, payload.target_user_id, payload.rating, payload.comment
    )


@router.get("/eligible", response_model=List[PublicUserResponse])
async def reviewable_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return reviews.get_contacted_users(db, current_user.id)


@router.get("/user/{user_id}", response_model=List[ReviewResponse])
async def reviews_for_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    auth_service.get_user_or_404(db, user_id)
    return reviews.get_reviews_for_user(db, user_id)
