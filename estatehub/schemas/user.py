from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime
from estatehub.models.user import UserRole, EmailStatus, IdStatus, ApprovalStatus

class UserLogin(BaseModel):
    # Plain str: format problems are reported as InvalidCredentials, not 422
    email: str
    password: str

class PublicUserResponse(BaseModel):
    """Profile as seen by other users: no email or verification internals."""
    id: UUID
    name: str
    role: UserRole
    city: Optional[str] = None
    occupation: Optional[str] = None
    bio: Optional[str] = None
    avatar_path: Optional[str] = None
    average_rating: float = 0.0
    review_count: int = 0
    is_approved: bool

    model_config = {"from_attributes": True}

class UserResponse(PublicUserResponse):
    email: str
    government_id: Optional[str] = None
    phone_number: Optional[str] = None
    email_status: EmailStatus
    id_status: IdStatus
    approval_status: ApprovalStatus
    email_verified: bool
    id_verified: bool
    is_verified: bool
    has_id_document: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        data = cls.model_validate(user)
        data.has_id_document = bool(user.id_document_path)
        return data

class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=30)
    city: Optional[str] = Field(None, max_length=100)
    occupation: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

class RejectRequest(BaseModel):
    reason: Optional[str] = None
