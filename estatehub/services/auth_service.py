"""Registration, login and the admin approval workflows."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from estatehub.core.config import settings
from estatehub.core.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidEmailFormat,
    MarketplaceError,
    NotFound,
    PermissionDenied,
    WeakPassword,
)
from estatehub.models.review import Review
from estatehub.models.user import ApprovalStatus, EmailStatus, IdStatus, User, UserRole
from estatehub.services import eligibility
from estatehub.services.email_verification import send_verification_code
from estatehub.services.security import (
    PASSWORD_REQUIREMENTS,
    normalize_email,
    sanitize_input,
    validate_email,
    validate_password,
)
from estatehub.utils.auth import get_password_hash, verify_password

logger = logging.getLogger(__name__)

MAIN_ADMIN_GOVERNMENT_ID = "MAIN_ADMIN_001"

PROFILE_FIELDS = ("name", "phone_number", "city", "occupation", "bio")


# ─── Lookups ──────────────────────────────────────────────────────────────────

def get_user_by_email(db: Session, email: Optional[str]) -> Optional[User]:
    email = normalize_email(email)
    if not email:
        return None
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def get_user_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.get(User, user_id)


def get_user_or_404(db: Session, user_id: UUID) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def ensure_main_admin(db: Session) -> User:
    """Return the main admin row, creating it if it does not exist yet."""
    admin = get_user_by_email(db, settings.MAIN_ADMIN_EMAIL)
    if admin:
        return admin

    admin = User(
        name=settings.MAIN_ADMIN_NAME,
        email=settings.MAIN_ADMIN_EMAIL,
        password_hash=get_password_hash(settings.MAIN_ADMIN_PASSWORD),
        role=UserRole.ADMIN,
        government_id=MAIN_ADMIN_GOVERNMENT_ID,
        email_status=EmailStatus.VERIFIED,
        id_status=IdStatus.VERIFIED,
        approval_status=ApprovalStatus.APPROVED,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Main admin account created: %s", admin.email)
    return admin


# ─── Registration / login ─────────────────────────────────────────────────────

def register(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: str,
    government_id: Optional[str] = None,
    send_code: bool = True,
    id_document_path: Optional[str] = None,
) -> User:
    """Create an account. An ID document path is only recorded for roles that submit one."""
    name = (name or "").strip()
    email = normalize_email(email)

    if get_user_by_email(db, email):
        logger.info("Registration failed: email already exists (%s)", email)
        raise DuplicateEmail()

    if not validate_email(email):
        raise InvalidEmailFormat()

    if not validate_password(password):
        raise WeakPassword(PASSWORD_REQUIREMENTS)

    user_role = eligibility.parse_role(role)
    eligibility.check_email_domain(user_role, email)

    user = User(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        role=user_role,
        government_id=(government_id or "").strip() or None,
        email_status=EmailStatus.UNVERIFIED,
        id_status=IdStatus.NOT_SUBMITTED,
        approval_status=eligibility.initial_approval(user_role),
    )
    if (
        id_document_path
        and eligibility.accepts_id_document(user_role)
        and not eligibility.is_main_admin_email(email)
    ):
        user.id_document_path = id_document_path
        user.id_status = IdStatus.PENDING_REVIEW
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered %s as %s", user.email, user.role.value)

    if send_code:
        send_verification_code(db, user)
    return user


def login(db: Session, email: str, password: str) -> User:
    email = normalize_email(email)

    # Bootstrap safety net: the main admin can always get in
    if eligibility.is_main_admin_email(email) and password == settings.MAIN_ADMIN_PASSWORD:
        logger.info("Login successful (main admin override)")
        return ensure_main_admin(db)

    user = get_user_by_email(db, email)
    if not user or not user.password_hash:
        logger.info("Login failed: unknown user %s", email)
        raise InvalidCredentials()

    if not verify_password(password, user.password_hash):
        logger.info("Login failed: password mismatch for %s", email)
        raise InvalidCredentials()

    try:
        eligibility.check_login_eligibility(user)
    except MarketplaceError as e:
        logger.info("Login refused for %s: %s", email, e.code)
        raise

    logger.info("Login successful for %s", user.email)
    return user


# ─── Admin workflows ──────────────────────────────────────────────────────────

def _grant_all(db: Session, user_id: UUID) -> User:
    user = get_user_or_404(db, user_id)
    user.email_status = EmailStatus.VERIFIED
    user.id_status = IdStatus.VERIFIED
    user.approval_status = ApprovalStatus.APPROVED
    db.commit()
    db.refresh(user)
    return user


def verify_user(db: Session, user_id: UUID) -> User:
    """Mark every verification concern satisfied ("approve on sight")."""
    user = _grant_all(db, user_id)
    logger.info("User verified: %s", user.email)
    return user


def approve_user(db: Session, user_id: UUID) -> User:
    user = _grant_all(db, user_id)
    logger.info("User approved: %s", user.email)
    return user


def verify_admin(db: Session, user_id: UUID) -> User:
    # Admin verification is the same transition as approval
    return approve_user(db, user_id)


def reject_user(db: Session, user_id: UUID, reason: Optional[str] = None) -> None:
    """Delete an account along with its listings, messages, blocks, reviews and reports.

    Ratings of the users this account reviewed are recomputed without its reviews.
    """
    from estatehub.services.reviews import update_user_rating

    user = get_user_or_404(db, user_id)
    if eligibility.is_main_admin(user):
        raise PermissionDenied("Cannot reject Main Admin")

    reviewed_ids = [
        row[0] for row in db.query(Review.target_user_id)
        .filter(Review.reviewer_id == user.id)
        .distinct()
        .all()
    ]

    logger.info("User rejected: %s - Reason: %s", user.email, reason or "-")
    db.query(Review).filter(Review.reviewer_id == user.id).delete(synchronize_session=False)
    db.delete(user)
    db.flush()

    for target_id in reviewed_ids:
        update_user_rating(db, target_id)
    db.commit()


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.asc()).all()


def list_unverified_users(db: Session) -> List[User]:
    return [
        u for u in db.query(User)
        .filter(
            or_(
                User.email_status != EmailStatus.VERIFIED,
                User.id_status != IdStatus.VERIFIED,
                User.approval_status != ApprovalStatus.APPROVED,
            )
        )
        .order_by(User.created_at.asc())
        .all()
        if not eligibility.is_main_admin(u)
    ]


def list_pending_approval(db: Session) -> List[User]:
    return [
        u for u in db.query(User)
        .filter(User.approval_status == ApprovalStatus.PENDING)
        .order_by(User.created_at.asc())
        .all()
        if not eligibility.is_main_admin(u)
    ]


def list_unverified_admins(db: Session) -> List[User]:
    return [
        u for u in db.query(User)
        .filter(User.role == UserRole.ADMIN, User.approval_status == ApprovalStatus.PENDING)
        .order_by(User.created_at.asc())
        .all()
        if not eligibility.is_main_admin(u)
    ]


def list_pending_id_documents(db: Session) -> List[User]:
    return (
        db.query(User)
        .filter(User.id_document_path.isnot(None), User.id_status != IdStatus.VERIFIED)
        .order_by(User.created_at.asc())
        .all()
    )


# ─── Self-service ─────────────────────────────────────────────────────────────

def ensure_can_submit_id(user: User) -> None:
    if eligibility.is_main_admin(user):
        raise PermissionDenied("Main Admin does not submit ID documents")
    if not eligibility.accepts_id_document(user.role):
        raise PermissionDenied("Buyers do not need ID verification")


def attach_id_document(db: Session, user: User, path: str) -> User:
    """Record an uploaded ID document and put the account back into review."""
    ensure_can_submit_id(user)

    user.id_document_path = path
    user.id_status = IdStatus.PENDING_REVIEW
    user.approval_status = ApprovalStatus.PENDING
    db.commit()
    db.refresh(user)
    logger.info("ID document submitted by %s", user.email)
    return user


def update_profile(db: Session, user: User, updates: dict) -> User:
    """Apply editable profile fields. Email and role are never changed here."""
    for field in PROFILE_FIELDS:
        if field in updates and updates[field] is not None:
            setattr(user, field, sanitize_input(updates[field].strip()))
    db.commit()
    db.refresh(user)
    return user


def set_avatar(db: Session, user: User, path: str) -> User:
    user.avatar_path = path
    db.commit()
    db.refresh(user)
    return user


def find_contact(db: Session, current_user: User, query: str) -> User:
    """Resolve a chat partner by email, falling back to an exact name match."""
    match = get_user_by_email(db, query)
    if match is None:
        name = (query or "").strip().lower()
        match = (
            db.query(User)
            .filter(func.lower(User.name) == name)
            .order_by(User.created_at.asc())
            .first()
        )
    if match is None:
        raise NotFound("User not found")

    if match.id == current_user.id:
        raise MarketplaceError("You cannot chat with yourself")

    if not match.is_approved and not eligibility.is_main_admin(current_user):
        raise PermissionDenied("User is not verified/approved yet")
    return match
