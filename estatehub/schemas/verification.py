from pydantic import BaseModel, Field, field_validator

class EmailRequest(BaseModel):
    email: str

    @field_validator('email')
    @classmethod
    def strip_email(cls, v):
        return v.strip()

class VerifyEmailRequest(EmailRequest):
    code: str = Field(..., min_length=6, max_length=6)

class VerificationStatusResponse(BaseModel):
    email_status: str
    id_status: str
    approval_status: str
    is_verified: bool
    can_log_in: bool
    has_id_document: bool
