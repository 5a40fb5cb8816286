"""User reviews, gated on prior contact, with a denormalised rating on the user."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from estatehub.core.exceptions import InvalidRating, NoInteraction, NotFound, SelfReview
from estatehub.models.message import Message
from estatehub.models.review import Review
from estatehub.models.user import User
from estatehub.services import auth_service
from estatehub.services.messaging import has_user_contacted

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def add_review(
    db: Session,
    reviewer: User,
    target_user_id: UUID,
    rating: int,
    comment: Optional[str] = None,
) -> Review:
    """Create or overwrite ``reviewer``'s review of the target, then refresh the aggregate."""
    if rating is None or not (MIN_RATING <= rating <= MAX_RATING):
        raise InvalidRating()

    if reviewer.id == target_user_id:
        raise SelfReview()

    if auth_service.get_user_by_id(db, target_user_id) is None:
        raise NotFound("User not found")

    if not has_user_contacted(db, reviewer.id, target_user_id):
        raise NoInteraction()

    review = (
        db.query(Review)
        .filter(Review.reviewer_id == reviewer.id, Review.target_user_id == target_user_id)
        .first()
    )
    if review is not None:
        review.rating = rating
        review.comment = comment
    else:
        review = Review(
            reviewer_id=reviewer.id,
            target_user_id=target_user_id,
            rating=rating,
            comment=comment,
        )
        db.add(review)
    db.flush()

    update_user_rating(db, target_user_id)
    db.commit()
    db.refresh(review)
    logger.info("Review by %s for %s: %d", reviewer.id, target_user_id, rating)
    return review


def update_user_rating(db: Session, user_id: UUID) -> None:
    """Recompute average and count from every review of the user.

    Locks the user row so concurrent reviews of the same target serialise.
    Does not commit.
    """
    target = (
        db.query(User)
        .filter(User.id == user_id)
        .with_for_update()
        .one_or_none()
    )
    if target is None:
        return

    count, average = (
        db.query(func.count(Review.id), func.avg(Review.rating))
        .filter(Review.target_user_id == user_id)
        .one()
    )
    target.review_count = count or 0
    target.average_rating = float(average) if average is not None else 0.0


def get_reviews_for_user(db: Session, user_id: UUID) -> List[Review]:
    return (
        db.query(Review)
        .filter(Review.target_user_id == user_id)
        .order_by(Review.created_at.desc())
        .all()
    )


def compute_average_rating(db: Session, user_id: UUID) -> float:
    average = (
        db.query(func.avg(Review.rating))
        .filter(Review.target_user_id == user_id)
        .scalar()
    )
    return float(average) if average is not None else 0.0


def get_contacted_users(db: Session, reviewer_id: UUID) -> List[User]:
    """Users ``reviewer_id`` has sent at least one message to, i.e. who they may review."""
    return (
        db.query(User)
        .filter(
            User.id != reviewer_id,
            User.id.in_(
                db.query(Message.recipient_id).filter(Message.sender_id == reviewer_id)
            ),
        )
        .order_by(User.name.asc())
        .all()
    )
