# backend/api/portal/employees.py
"""
API for ID-card applications: listing, details, submission, review.
"""

import io
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Font
from pydantic import BaseModel
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from api.portal.common import attachment_headers, http_error
from core.errors import PortalError
from database import get_db
from generator.summary_pdf import build_summary_pdf, summary_filename
from models.application_form import DOCUMENT_FIELDS, DocumentUpload
from services import application_service
from services.card_assets import collect_card_assets
from utils.dates import format_display_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/employees", tags=["employees"])

EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class StatusUpdate(BaseModel):
    """Approve / reject request"""
    status: str
    remark: Optional[str] = None


@router.get("")
async def list_employees(
    applicant_type: Optional[str] = Query(None, alias="applicantType"),
    status: Optional[str] = None,
    department: Optional[str] = None,
    station: Optional[str] = None,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """
    List of applications.

    status defaults to "pending"; "all" returns every status.
    """
    return application_service.list_employees(
        db,
        applicant_type=applicant_type,
        status=status,
        department=department,
        station=station,
        offset=offset,
        limit=limit,
    )


@router.get("/stats")
async def get_stats(db: Session = Depends(get_db)):
    """Counts per status for the dashboard"""
    return application_service.application_stats(db)


@router.get("/export/excel")
async def export_to_excel(
    applicant_type: Optional[str] = Query(None, alias="applicantType"),
    status: str = "all",
    db: Session = Depends(get_db),
):
    """Register of applications as an Excel workbook"""
    employees = application_service.list_employees(db, applicant_type=applicant_type, status=status)["employees"]

    wb = Workbook()
    ws = wb.active
    ws.title = "Applications"
    headers = [
        "Application ID", "Applicant Type", "Name", "Designation", "Employee No", "RUID No",
        "Date of Birth", "Department", "Station", "Bill Unit", "Mobile", "Status", "Card Serial", "Remark",
    ]
    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for e in employees:
        ws.append([
            e["id"], e["applicantType"], e["employeeName"], e["designation"], e["employeeNo"], e["ruidNo"],
            format_display_date(e["dateOfBirth"]), e["department"], e["station"], e["billUnit"],
            e["mobileNumber"], e["status"], e["cardNumber"], e["remark"],
        ])

    excel_buffer = io.BytesIO()
    wb.save(excel_buffer)
    excel_buffer.seek(0)

    filename = f"ID_Card_Applications_{datetime.now().strftime('%Y%m%d')}.xlsx"
    return StreamingResponse(excel_buffer, media_type=EXCEL_MEDIA_TYPE, headers=attachment_headers(filename))


@router.get("/{application_id}")
async def get_employee(application_id: str, db: Session = Depends(get_db)):
    """Application details; "actions" is empty unless the application is pending"""
    try:
        return application_service.get_record(db, application_id).to_api()
    except PortalError as ex:
        raise http_error(ex)


@router.post("")
async def submit_application(request: Request, db: Session = Depends(get_db)):
    """
    Submission of a new application (multipart/form-data).

    Files: uploadPhoto, uploadSignature (required), uploadHindiName,
    uploadHindiDesignation (required for gazetted applicants).
    Family members arrive as JSON text in familyMembersJson.
    """
    form = await request.form()

    fields = {}
    documents = {}
    for key, value in form.items():
        if isinstance(value, UploadFile):
            if key in DOCUMENT_FIELDS:
                documents[key] = DocumentUpload(
                    filename=value.filename or key,
                    content_type=value.content_type or "",
                    data=await value.read(),
                )
            continue
        fields[key] = value

    try:
        return application_service.submit_application(db, fields, documents)
    except PortalError as ex:
        raise http_error(ex)
    except Exception as ex:
        logger.exception(f"Submission failed: {ex}")
        raise HTTPException(status_code=500, detail="Failed to submit application")


@router.post("/{application_id}/status")
async def update_status(application_id: str, data: StatusUpdate, db: Session = Depends(get_db)):
    """Approve or reject; rejection requires a remark"""
    try:
        return application_service.update_application_status(db, application_id, data.status, data.remark)
    except PortalError as ex:
        raise http_error(ex)


@router.get("/{application_id}/summary")
async def download_summary(application_id: str, db: Session = Depends(get_db)):
    """Application summary as PDF"""
    try:
        record = application_service.get_record(db, application_id)
        assets = await collect_card_assets(db, record, with_qr=False)
        pdf_bytes = build_summary_pdf(record, assets)
    except PortalError as ex:
        raise http_error(ex)
    except Exception as ex:
        logger.exception(f"Summary PDF failed for {application_id}: {ex}")
        raise HTTPException(status_code=500, detail="Failed to generate application summary")

    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers=attachment_headers(summary_filename(record)),
    )
