# backend/services/application_service.py
"""
Application workflow: submission, listing, status changes and the
two-factor status lookup.

Routers stay thin and call these functions; every function works on a
SQLAlchemy session and returns plain dicts shaped for the API.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import ApplicationNotFoundError, ApplicationValidationError, StatusTransitionError
from models.application import (
    Application,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    get_next_card_number,
)
from models.application_form import (
    HINDI_DESIGNATION_FIELD,
    HINDI_NAME_FIELD,
    PHOTO_FIELD,
    SIGNATURE_FIELD,
    DocumentUpload,
    parse_application_form,
    validate_documents,
    validate_status_update,
)
from models.employee_record import EmployeeRecord, to_canonical
from utils.dates import format_timestamp, same_date
from utils.file_storage import discard_document, file_url, save_document

logger = logging.getLogger("idcard-portal.application_service")

ALL_STATUSES = "all"
DEFAULT_STATUS_FILTER = "pending"


# ================ READ ================ #

def get_application(db: Session, application_id: str) -> Application:
    app = db.query(Application).filter(Application.id == application_id).first()
    if not app:
        raise ApplicationNotFoundError(application_id)
    return app


def get_record(db: Session, application_id: str) -> EmployeeRecord:
    return to_canonical(get_application(db, application_id).to_dict())


def list_employees(
    db: Session,
    applicant_type: Optional[str] = None,
    status: Optional[str] = None,
    department: Optional[str] = None,
    station: Optional[str] = None,
    offset: int = 0,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Lists applications as canonical records, newest first.

    Args:
        status: case-insensitive; defaults to "pending", "all" disables the filter

    Returns:
        {"employees": [...], "total": n} where total ignores offset/limit
    """
    status = (status or DEFAULT_STATUS_FILTER).strip().lower()

    query = db.query(Application)
    if applicant_type:
        query = query.filter(func.lower(Application.applicant_type) == applicant_type.strip().lower())
    if status != ALL_STATUSES:
        query = query.filter(func.lower(Application.status) == status)
    if department:
        query = query.filter(func.upper(Application.department) == department.strip().upper())
    if station:
        query = query.filter(Application.station.ilike(f"%{station.strip()}%"))

    total = query.count()
    query = query.order_by(Application.application_date.desc(), Application.created_at.desc()).offset(offset)
    if limit is not None:
        query = query.limit(limit)

    return {
        "employees": [to_canonical(app.to_dict()).to_api() for app in query.all()],
        "total": total,
    }


def application_stats(db: Session) -> Dict[str, int]:
    rows = db.query(Application.status, func.count(Application.id)).group_by(Application.status).all()
    counts = {status.lower(): count for status, count in rows}
    return {
        "total": sum(counts.values()),
        "pending": counts.get(STATUS_PENDING.lower(), 0),
        "approved": counts.get(STATUS_APPROVED.lower(), 0),
        "rejected": counts.get(STATUS_REJECTED.lower(), 0),
    }


# ================ SUBMIT ================ #

def submit_application(
    db: Session,
    fields: Mapping[str, Any],
    documents: Mapping[str, Optional[DocumentUpload]],
) -> Dict[str, Any]:
    """
    Validates and stores a new application.

    Documents are written first, then the record is created with their file
    ids; if the record cannot be committed the written files are removed.

    Raises:
        ApplicationValidationError: invalid fields or documents
    """
    form = parse_application_form(fields)
    errors = validate_documents(form.applicant_type, documents)
    if errors:
        raise ApplicationValidationError(errors)

    stored = {}
    try:
        for field_name, upload in documents.items():
            if upload is not None and upload.size > 0:
                stored[field_name] = save_document(db, upload)

        app = Application(
            applicant_type=form.applicant_type,
            employee_name=form.employee_name,
            designation=form.designation,
            employee_no=form.employee_no,
            ruid_no=form.ruid_no,
            date_of_birth=form.date_of_birth,
            department=form.department,
            station=form.station,
            bill_unit=form.bill_unit,
            residential_address=form.residential_address,
            rly_contact_number=form.rly_contact_number,
            mobile_number=form.mobile_number,
            reason_for_application=form.reason_for_application,
            emergency_contact_name=form.emergency_contact_name,
            emergency_contact_number=form.emergency_contact_number,
            family_members_json=form.family_members_json(),
            photo_file_id=stored[PHOTO_FIELD].id,
            signature_file_id=stored[SIGNATURE_FIELD].id,
            hindi_name_file_id=stored[HINDI_NAME_FIELD].id if HINDI_NAME_FIELD in stored else None,
            hindi_designation_file_id=(
                stored[HINDI_DESIGNATION_FIELD].id if HINDI_DESIGNATION_FIELD in stored else None
            ),
            status=STATUS_PENDING,
        )
        db.add(app)
        db.commit()
    except (SQLAlchemyError, OSError):
        db.rollback()
        for document in stored.values():
            discard_document(document)
        logger.exception("❌ Application could not be stored")
        raise

    db.refresh(app)
    logger.info(f"✅ Application {app.id} submitted by {app.employee_name} ({app.applicant_type})")
    return {"success": True, "data": to_canonical(app.to_dict()).to_api()}


# ================ STATUS ================ #

def update_application_status(
    db: Session,
    application_id: str,
    status: str,
    remark: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Approves or rejects a pending application.

    Approval assigns the next card serial number.

    Raises:
        ApplicationValidationError: unknown status or rejection without remark
        ApplicationNotFoundError: no such application
        StatusTransitionError: application is no longer pending
    """
    new_status, remark = validate_status_update(status, remark)
    app = get_application(db, application_id)

    if app.status != STATUS_PENDING:
        raise StatusTransitionError(app.status.lower(), new_status.lower())

    app.status = new_status
    app.remark = remark
    if new_status == STATUS_APPROVED:
        app.card_number = get_next_card_number(db)

    db.commit()
    logger.info(f"Application {application_id}: {STATUS_PENDING} -> {new_status}")
    return {"success": True, "message": f"Application {new_status.lower()} successfully"}


def get_application_status(db: Session, application_id: str, date_of_birth: str) -> Dict[str, Any]:
    """
    Two-factor status lookup by application id and date of birth.

    The record is only disclosed when the date part of date_of_birth equals
    the stored one; time of day and separators do not matter.
    """
    app = db.query(Application).filter(Application.id == (application_id or "").strip()).first()
    if not app:
        return {"success": False, "message": "Application not found"}

    if not same_date(date_of_birth, app.date_of_birth):
        logger.warning(f"⚠️ Status lookup for {application_id}: date of birth mismatch")
        return {"success": False, "message": "Invalid date of birth"}

    return {
        "success": True,
        "message": "Application found",
        "status": app.status.lower(),
        "applicantName": app.employee_name,
        "submissionDate": format_timestamp(app.application_date),
        "remark": app.remark or "",
        "photoUrl": file_url(app.photo_file_id),
        "signatureUrl": file_url(app.signature_file_id),
    }
