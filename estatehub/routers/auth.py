from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from typing import Optional
from estatehub.core.database import get_db
from estatehub.core.exceptions import InvalidRole, MarketplaceError, NotFound
from estatehub.models.user import User
from estatehub.schemas.user import UserLogin, TokenResponse, UserResponse
from estatehub.schemas.verification import EmailRequest, VerifyEmailRequest
from estatehub.services import auth_service, eligibility, email_verification
from estatehub.utils.auth import create_access_token
from estatehub.utils.file_storage import discard_id_document, save_id_document
from estatehub.api.deps import get_current_active_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_for(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role.value})


def _takes_id_document(role: str) -> bool:
    try:
        return eligibility.accepts_id_document(eligibility.parse_role(role))
    except InvalidRole:
        return False


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    role: str = Form(...),
    government_id: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    """
    Register a new account. Sellers, agents and admins may attach their ID
    document; a file sent with a buyer registration is ignored. The file is
    checked and stored before the account row is created, so a rejected
    upload creates nothing.
    A verification code is sent to the email address; the account cannot log
    in until that code is confirmed.
    """
    document_path = None
    if file is not None and file.filename and _takes_id_document(role):
        document_path = await save_id_document(file)

    try:
        user = auth_service.register(
            db, name, email, password, role, government_id, id_document_path=document_path
        )
    except MarketplaceError:
        if document_path:
            discard_id_document(document_path)
        raise

    return UserResponse.from_user(user)


@router.post("/login", response_model=TokenResponse)
async def login(user_data: UserLogin, db: Session = Depends(get_db)):
    user = auth_service.login(db, user_data.email, user_data.password)
    return TokenResponse(
        access_token=_token_for(user),
        user=UserResponse.from_user(user)
    )


@router.post("/token", response_model=dict)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """OAuth2 compatible token endpoint for Swagger UI"""
    user = auth_service.login(db, form_data.username, form_data.password)
    return {
        "access_token": _token_for(user),
        "token_type": "bearer"
    }


@router.post("/verify-email", response_model=UserResponse)
async def verify_email(request: VerifyEmailRequest, db: Session = Depends(get_db)):
    user = auth_service.get_user_by_email(db, request.email)
    if not user:
        raise NotFound("User not found")
    user = email_verification.verify_code(db, user, request.code)
    return UserResponse.from_user(user)


@router.post("/resend-code", response_model=dict)
async def resend_code(request: EmailRequest, db: Session = Depends(get_db)):
    user = auth_service.get_user_by_email(db, request.email)
    # Same answer whether or not the address exists
    if user and not user.email_verified:
        email_verification.send_verification_code(db, user)
    return {"message": "If the account exists and is unverified, a new code has been sent"}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user)
):
    return UserResponse.from_user(current_user)
