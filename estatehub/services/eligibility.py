"""Role-gated login eligibility and registration rules.

Pure functions over ``(role, statuses)``; no database access. The login
table is evaluated in order and the first failing rule wins:

1. email must be verified (main admin exempt)
2. buyer     -> nothing further
   admin     -> every verification concern satisfied (main admin exempt)
   seller    -> ID verified, then approved
   agent     -> ID verified, then approved
"""

from typing import Optional

from estatehub.core.config import settings
from estatehub.core.exceptions import (
    AccountPendingApproval,
    EmailNotVerified,
    IdNotVerified,
    InvalidRole,
    MarketplaceError,
    ReservedDomainViolation,
)
from estatehub.models.user import ApprovalStatus, EmailStatus, IdStatus, User, UserRole

# Roles gated on a reviewed government ID
DOCUMENT_ROLES = frozenset({UserRole.SELLER, UserRole.AGENT, UserRole.ADMIN})


def parse_role(raw: Optional[str]) -> UserRole:
    try:
        return UserRole((raw or "").strip().lower())
    except ValueError:
        raise InvalidRole()


def is_main_admin_email(email: Optional[str]) -> bool:
    return (email or "").strip().lower() == settings.MAIN_ADMIN_EMAIL.lower()


def is_main_admin(user: Optional[User]) -> bool:
    return user is not None and is_main_admin_email(user.email)


def accepts_id_document(role: UserRole) -> bool:
    return role in DOCUMENT_ROLES


def is_admin_domain(email: str) -> bool:
    return email.strip().lower().endswith(settings.ADMIN_EMAIL_DOMAIN.lower())


def check_email_domain(role: UserRole, email: str) -> None:
    """Admins must use the reserved domain; nobody else may."""
    admin_email = is_admin_domain(email)
    if role == UserRole.ADMIN and not admin_email:
        raise ReservedDomainViolation(
            f"Admin accounts must use {settings.ADMIN_EMAIL_DOMAIN} email domain."
        )
    if role != UserRole.ADMIN and admin_email:
        raise ReservedDomainViolation(
            f"{settings.ADMIN_EMAIL_DOMAIN} domain is reserved for administrators only."
        )


def initial_approval(role: UserRole) -> ApprovalStatus:
    # Buyers need no document review
    return ApprovalStatus.APPROVED if role == UserRole.BUYER else ApprovalStatus.PENDING


def login_failure(
    role: UserRole,
    email_status: EmailStatus,
    id_status: IdStatus,
    approval_status: ApprovalStatus,
    main_admin: bool = False,
) -> Optional[MarketplaceError]:
    """Return the failure a login would hit, or None when the user may log in."""
    if email_status != EmailStatus.VERIFIED and not main_admin:
        return EmailNotVerified()

    if role not in DOCUMENT_ROLES:
        return None

    if role == UserRole.ADMIN:
        fully_verified = (
            id_status == IdStatus.VERIFIED
            and approval_status == ApprovalStatus.APPROVED
        )
        if not fully_verified and not main_admin:
            return AccountPendingApproval("Admin account not verified")
        return None

    if id_status != IdStatus.VERIFIED:
        return IdNotVerified()
    if approval_status != ApprovalStatus.APPROVED:
        return AccountPendingApproval()
    return None


def check_login_eligibility(user: User) -> None:
    """Raise the first failing rule for ``user``."""
    failure = login_failure(
        user.role,
        user.email_status,
        user.id_status,
        user.approval_status,
        main_admin=is_main_admin(user),
    )
    if failure is not None:
        raise failure


def can_log_in(user: User) -> bool:
    try:
        check_login_eligibility(user)
    except MarketplaceError:
        return False
    return True
