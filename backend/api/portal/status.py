# backend/api/portal/status.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from services.application_service import get_application_status

router = APIRouter(prefix="/api/status", tags=["status"])


@router.get("")
async def check_status(
    application_id: str = Query(..., alias="id"),
    date_of_birth: str = Query(..., alias="dob"),
    db: Session = Depends(get_db),
):
    """
    Applicant-facing status lookup.

    Not found and date-of-birth mismatch are answered with success=false
    rather than an HTTP error.
    """
    return get_application_status(db, application_id, date_of_birth)
