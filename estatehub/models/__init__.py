from estatehub.models.user import User, UserRole, EmailStatus, IdStatus, ApprovalStatus
from estatehub.models.property import Property, PropertyPhoto, PropertyVideo
from estatehub.models.message import Message, Block
from estatehub.models.review import Review
from estatehub.models.report import Report, ReportReason, ReportStatus

__all__ = [
    "User", "UserRole", "EmailStatus", "IdStatus", "ApprovalStatus",
    "Property", "PropertyPhoto", "PropertyVideo",
    "Message", "Block",
    "Review",
    "Report", "ReportReason", "ReportStatus",
]
