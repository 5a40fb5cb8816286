"""Email verification codes.

Delivery is a stub: the code is written to the log instead of being mailed.
Sending is fire-and-forget; a failure is logged and never reaches the caller.
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from estatehub.core.config import settings
from estatehub.core.exceptions import InvalidVerificationCode
from estatehub.models.user import EmailStatus, User
from estatehub.services.security import generate_verification_code

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _deliver(user: User, code: str) -> None:
    logger.info(
        "EMAIL VERIFICATION to=%s code=%s expires_in=%smin",
        user.email,
        code,
        settings.VERIFICATION_CODE_EXPIRY_MINUTES,
    )


def send_verification_code(db: Session, user: User) -> bool:
    """Issue a fresh code for ``user`` and hand it to the mail stub.

    Returns False if anything went wrong; the error is logged.
    """
    try:
        code = generate_verification_code()
        user.email_verification_code = code
        user.email_verification_expiry = _now() + timedelta(
            minutes=settings.VERIFICATION_CODE_EXPIRY_MINUTES
        )
        db.commit()
        _deliver(user, code)
        return True
    except Exception:
        db.rollback()
        logger.exception("Failed to send verification code to %s", user.email)
        return False


def is_code_valid(user: User) -> bool:
    if not user.email_verification_code or not user.email_verification_expiry:
        return False
    return _now() <= user.email_verification_expiry


def verify_code(db: Session, user: User, entered_code: str) -> User:
    if not user.email_verification_code:
        raise InvalidVerificationCode("No verification code sent. Please request a new code.")

    if not is_code_valid(user):
        user.email_verification_code = None
        user.email_verification_expiry = None
        db.commit()
        raise InvalidVerificationCode("Code expired. Please request a new code.")

    if user.email_verification_code != (entered_code or "").strip():
        raise InvalidVerificationCode()

    user.email_status = EmailStatus.VERIFIED
    user.email_verification_code = None
    user.email_verification_expiry = None
    db.commit()
    db.refresh(user)
    logger.info("Email verified for %s", user.email)
    return user
