"""Abuse reports against users or properties, moderated by admins."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from estatehub.core.exceptions import InvalidReportTarget, InvalidReportTransition, NotFound
from estatehub.models.property import Property
from estatehub.models.report import Report, ReportReason, ReportStatus
from estatehub.models.user import User

logger = logging.getLogger(__name__)

# Transitions only move forward; RESOLVED and DISMISSED are terminal
ALLOWED_TRANSITIONS = {
    ReportStatus.PENDING: {ReportStatus.REVIEWED, ReportStatus.RESOLVED, ReportStatus.DISMISSED},
    ReportStatus.REVIEWED: {ReportStatus.RESOLVED, ReportStatus.DISMISSED},
    ReportStatus.RESOLVED: set(),
    ReportStatus.DISMISSED: set(),
}


def create_report(
    db: Session,
    reporter_id: UUID,
    reason: ReportReason,
    description: Optional[str] = None,
    reported_user_id: Optional[UUID] = None,
    reported_property_id: Optional[UUID] = None,
) -> Report:
    if (reported_user_id is None) == (reported_property_id is None):
        raise InvalidReportTarget()

    if reported_user_id is not None:
        if reported_user_id == reporter_id:
            raise InvalidReportTarget("You cannot report yourself")
        if db.get(User, reported_user_id) is None:
            raise NotFound("User not found")
    elif db.get(Property, reported_property_id) is None:
        raise NotFound("Property not found")

    report = Report(
        reporter_id=reporter_id,
        reported_user_id=reported_user_id,
        reported_property_id=reported_property_id,
        reason=reason,
        description=description,
        status=ReportStatus.PENDING,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info("Report created successfully. ID: %s", report.id)
    return report


def get_report(db: Session, report_id: UUID) -> Report:
    report = db.get(Report, report_id)
    if report is None:
        raise NotFound("Report not found")
    return report


def list_reports(db: Session, status: Optional[ReportStatus] = None) -> List[Report]:
    query = db.query(Report)
    if status is not None:
        query = query.filter(Report.status == status)
    return query.order_by(Report.created_at.desc()).all()


def list_pending(db: Session) -> List[Report]:
    return list_reports(db, ReportStatus.PENDING)


def reports_for_user(db: Session, user_id: UUID) -> List[Report]:
    return db.query(Report).filter(Report.reported_user_id == user_id).all()


def reports_for_property(db: Session, property_id: UUID) -> List[Report]:
    return db.query(Report).filter(Report.reported_property_id == property_id).all()


def transition(db: Session, report_id: UUID, target: ReportStatus, admin_notes: Optional[str] = None) -> Report:
    report = get_report(db, report_id)
    if target not in ALLOWED_TRANSITIONS[report.status]:
        raise InvalidReportTransition(
            f"Report is already {report.status.value}; cannot mark it {target.value}"
        )
    report.status = target
    if admin_notes is not None:
        report.admin_notes = admin_notes
    db.commit()
    db.refresh(report)
    logger.info("Report #%s %s.", report.id, target.value.lower())
    return report


def mark_reviewed(db: Session, report_id: UUID, admin_notes: Optional[str] = None) -> Report:
    return transition(db, report_id, ReportStatus.REVIEWED, admin_notes)


def resolve(db: Session, report_id: UUID, admin_notes: Optional[str] = None) -> Report:
    return transition(db, report_id, ReportStatus.RESOLVED, admin_notes)


def dismiss(db: Session, report_id: UUID, admin_notes: Optional[str] = None) -> Report:
    return transition(db, report_id, ReportStatus.DISMISSED, admin_notes)
