"""Named failure kinds raised by the service layer.

Each kind carries the HTTP status the REST layer answers with; ``main.py``
registers a single handler for ``MarketplaceError``.
"""

from fastapi import status


class MarketplaceError(Exception):
    """Base class for every business-rule failure."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


# ─── Registration ─────────────────────────────────────────────────────────────

class DuplicateEmail(MarketplaceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already registered"


class InvalidEmailFormat(MarketplaceError):
    default_message = "Invalid email format"


class WeakPassword(MarketplaceError):
    default_message = "Password must be at least 6 characters and contain both letters and numbers"


class ReservedDomainViolation(MarketplaceError):
    default_message = "Email domain not allowed for this role"


class InvalidRole(MarketplaceError):
    default_message = "Role must be one of: admin, buyer, seller, agent"


# ─── Login eligibility ────────────────────────────────────────────────────────

class InvalidCredentials(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class EmailNotVerified(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Email not verified"


class IdNotVerified(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "ID document not verified"


class AccountPendingApproval(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Account pending admin approval"


class PermissionDenied(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


class InvalidVerificationCode(MarketplaceError):
    default_message = "Invalid verification code"


# ─── Reviews ──────────────────────────────────────────────────────────────────

class InvalidRating(MarketplaceError):
    default_message = "Rating must be between 1 and 5."


class SelfReview(MarketplaceError):
    default_message = "You cannot review yourself."


class NoInteraction(MarketplaceError):
    default_message = "You can only review users you have interacted with."


# ─── Reports ──────────────────────────────────────────────────────────────────

class InvalidReportTarget(MarketplaceError):
    default_message = "A report must target exactly one user or one property"


class InvalidReportTransition(MarketplaceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Report status cannot change this way"


# ─── Generic ──────────────────────────────────────────────────────────────────

class NotFound(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"
