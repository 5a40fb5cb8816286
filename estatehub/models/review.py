from sqlalchemy import Column, Integer, Text, ForeignKey, UniqueConstraint, CheckConstraint, Uuid
from estatehub.models.base import BaseModel

class Review(BaseModel):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("reviewer_id", "target_user_id", name="uq_review_pair"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating"),
    )

    reviewer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
