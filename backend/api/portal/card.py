# backend/api/portal/card.py
"""
ID card export: print-ready two-page PDF and PNG previews of each face.
"""

import io
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from api.portal.common import attachment_headers, http_error
from core.errors import PortalError
from database import get_db
from generator.card_layout import build_card_content
from generator.card_pdf import export_id_card
from generator.card_renderer import BACK, FRONT, render_side
from services.application_service import get_record
from services.card_assets import collect_card_assets

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/card", tags=["card"])


@router.get("/{application_id}/pdf")
async def download_card(application_id: str, db: Session = Depends(get_db)):
    """
    Two-page PDF (front, back) at CR80 size.

    Returns:
        StreamingResponse with the PDF; file name is derived from the
        applicant's name
    """
    try:
        record = get_record(db, application_id)
        content = build_card_content(record, await collect_card_assets(db, record))
        export = export_id_card(content, record.name)
    except PortalError as ex:
        raise http_error(ex)

    return StreamingResponse(
        io.BytesIO(export.content),
        media_type="application/pdf",
        headers=attachment_headers(export.filename),
    )


async def _preview(application_id: str, side: str, dpi: int, db: Session) -> StreamingResponse:
    try:
        record = get_record(db, application_id)
        content = build_card_content(record, await collect_card_assets(db, record, with_qr=side == BACK))
        image = render_side(content, side, dpi)
    except PortalError as ex:
        raise http_error(ex)
    except Exception as ex:
        logger.exception(f"Card {side} preview failed for {application_id}: {ex}")
        raise HTTPException(status_code=500, detail=f"Failed to render card {side}")

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    buffer.seek(0)
    return StreamingResponse(buffer, media_type="image/png")


@router.get("/{application_id}/front.png")
async def preview_front(
    application_id: str,
    dpi: int = Query(150, ge=72, le=300),
    db: Session = Depends(get_db),
):
    return await _preview(application_id, FRONT, dpi, db)


@router.get("/{application_id}/back.png")
async def preview_back(
    application_id: str,
    dpi: int = Query(150, ge=72, le=300),
    db: Session = Depends(get_db),
):
    return await _preview(application_id, BACK, dpi, db)
