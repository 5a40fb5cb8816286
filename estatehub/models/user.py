from sqlalchemy import Column, String, Text, Enum, Float, Integer, DateTime
from sqlalchemy.orm import relationship
from estatehub.models.base import BaseModel
import enum

class UserRole(str, enum.Enum):
    ADMIN = "admin"
    BUYER = "buyer"
    SELLER = "seller"
    AGENT = "agent"

class EmailStatus(str, enum.Enum):
    UNVERIFIED = "unverified"
    VERIFIED = "verified"

class IdStatus(str, enum.Enum):
    NOT_SUBMITTED = "not_submitted"
    PENDING_REVIEW = "pending_review"
    VERIFIED = "verified"

class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"

class User(BaseModel):
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    # Stored trimmed; lookups compare lower(email)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=True)
    role = Column(Enum(UserRole), nullable=False)

    # Verification state, one status per concern
    email_status = Column(Enum(EmailStatus), default=EmailStatus.UNVERIFIED, nullable=False)
    id_status = Column(Enum(IdStatus), default=IdStatus.NOT_SUBMITTED, nullable=False)
    approval_status = Column(Enum(ApprovalStatus), default=ApprovalStatus.PENDING, nullable=False)

    email_verification_code = Column(String(6), nullable=True)
    email_verification_expiry = Column(DateTime, nullable=True)

    government_id = Column(String(100), nullable=True)
    id_document_path = Column(String(255), nullable=True)

    # Denormalised review aggregate
    average_rating = Column(Float, default=0.0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)

    # Profile
    phone_number = Column(String(30), nullable=True)
    city = Column(String(100), nullable=True)
    occupation = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_path = Column(String(255), nullable=True)

    properties = relationship(
        "Property",
        back_populates="owner",
        foreign_keys="Property.owner_id",
        cascade="all, delete-orphan",
    )

    @property
    def email_verified(self) -> bool:
        return self.email_status == EmailStatus.VERIFIED

    @property
    def id_verified(self) -> bool:
        return self.id_status == IdStatus.VERIFIED

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED

    @property
    def is_verified(self) -> bool:
        """Legacy aggregate: every verification concern is satisfied."""
        return self.email_verified and self.id_verified and self.is_approved

    def __repr__(self):
        return f"<User {self.email} ({self.role.value if self.role else None})>"
