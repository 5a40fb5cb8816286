from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from estatehub.core.database import get_db
from estatehub.core.exceptions import NotFound
from estatehub.models.report import ReportStatus
from estatehub.models.user import User
from estatehub.schemas.property import AdminPropertyResponse
from estatehub.schemas.report import ReportAction, ReportResponse
from estatehub.schemas.user import RejectRequest, UserResponse
from estatehub.services import auth_service, reports
from estatehub.services import properties as property_service
from estatehub.utils.file_storage import delete_property_image, id_document_media_type
from estatehub.api.deps import require_admin

router = APIRouter(prefix="/admin", tags=["Admin"])


def _users(users: List[User]) -> List[UserResponse]:
    return [UserResponse.from_user(u) for u in users]


# ─── Users ────────────────────────────────────────────────────────────────────

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return _users(auth_service.list_users(db))


@router.get("/users/unverified", response_model=List[UserResponse])
async def list_unverified_users(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return _users(auth_service.list_unverified_users(db))


@router.get("/users/pending", response_model=List[UserResponse])
async def list_pending_users(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Accounts waiting for approval. The main admin never appears here."""
    return _users(auth_service.list_pending_approval(db))


@router.get("/users/id-documents", response_model=List[UserResponse])
async def list_pending_id_documents(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return _users(auth_service.list_pending_id_documents(db))


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return UserResponse.from_user(auth_service.get_user_or_404(db, user_id))


@router.get("/users/{user_id}/id-document")
async def get_id_document(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    user = auth_service.get_user_or_404(db, user_id)
    if not user.id_document_path:
        raise NotFound("No ID document on file")
    return FileResponse(
        user.id_document_path,
        media_type=id_document_media_type(user.id_document_path),
    )


@router.post("/users/{user_id}/verify", response_model=UserResponse)
async def verify_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return UserResponse.from_user(auth_service.verify_user(db, user_id))


@router.post("/users/{user_id}/approve", response_model=UserResponse)
async def approve_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return UserResponse.from_user(auth_service.approve_user(db, user_id))


@router.post("/users/{user_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject_user(
    user_id: UUID,
    payload: Optional[RejectRequest] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Rejecting an account deletes it."""
    auth_service.reject_user(db, user_id, payload.reason if payload else None)


# ─── Admin accounts ───────────────────────────────────────────────────────────

@router.get("/admins/unverified", response_model=List[UserResponse])
async def list_unverified_admins(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return _users(auth_service.list_unverified_admins(db))


@router.post("/admins/{user_id}/verify", response_model=UserResponse)
async def verify_admin(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return UserResponse.from_user(auth_service.verify_admin(db, user_id))


# ─── Properties ───────────────────────────────────────────────────────────────

@router.get("/properties", response_model=List[AdminPropertyResponse])
async def list_all_properties(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return property_service.list_properties(db)


@router.get("/properties/unverified", response_model=List[AdminPropertyResponse])
async def list_unverified_properties(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return property_service.list_unverified(db)


@router.get("/properties/{property_id}", response_model=AdminPropertyResponse)
async def get_property(
    property_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return property_service.get_property(db, property_id)


@router.post("/properties/{property_id}/verify", response_model=AdminPropertyResponse)
async def verify_property(
    property_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return property_service.verify_property(db, property_id)


@router.post("/properties/{property_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject_property(
    property_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Rejected listings are removed together with their photos."""
    for url in property_service.reject_property(db, property_id):
        delete_property_image(url)


@router.delete("/properties/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    property_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    for url in property_service.delete_property(db, property_id, admin):
        delete_property_image(url)


# ─── Reports ──────────────────────────────────────────────────────────────────

@router.get("/reports", response_model=List[ReportResponse])
async def list_reports(
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return reports.list_reports(db, status_filter)


@router.get("/reports/pending", response_model=List[ReportResponse])
async def list_pending_reports(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return reports.list_pending(db)


@router.get("/reports/user/{user_id}", response_model=List[ReportResponse])
async def reports_against_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return reports.reports_for_user(db, user_id)


@router.get("/reports/property/{property_id}", response_model=List[ReportResponse])
async def reports_against_property(
    property_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return reports.reports_for_property(db, property_id)


@router.post("/reports/{report_id}/review", response_model=ReportResponse)
async def review_report(
    report_id: UUID,
    payload: Optional[ReportAction] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return reports.mark_reviewed(db, report_id, payload.admin_notes if payload else None)


@router.post("/reports/{report_id}/resolve", response_model=ReportResponse)
async def resolve_report(
    report_id: UUID,
    payload: Optional[ReportAction] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return reports.resolve(db, report_id, payload.admin_notes if payload else None)


@router.post("/reports/{report_id}/dismiss", response_model=ReportResponse)
async def dismiss_report(
    report_id: UUID,
    payload: Optional[ReportAction] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return reports.dismiss(db, report_id, payload.admin_notes if payload else None)
