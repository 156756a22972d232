# backend/services/card_assets.py
"""
Collects the images printed on the card and in the summary PDF.

Documents are read from local storage; a document URL pointing elsewhere is
downloaded. Anything that cannot be obtained stays None and is drawn as a
placeholder later.
"""

import logging
from pathlib import Path
from typing import Optional

from qrcode.exceptions import DataOverflowError
from sqlalchemy.orm import Session

from core import config
from generator.card_layout import CardAssets
from generator.qr_builder import make_qr_png, qr_payload_text, remote_qr_url
from models.employee_record import EmployeeRecord
from utils.file_storage import read_document
from utils.image_fetcher import fetch_image

logger = logging.getLogger("idcard-portal.card_assets")


def read_static(path: Path) -> Optional[bytes]:
    path = Path(path)
    if not path.exists():
        logger.warning(f"⚠️ Static card image not found: {path}")
        return None
    return path.read_bytes()


async def load_document(db: Session, file_id: str, url: str) -> Optional[bytes]:
    stored = read_document(db, file_id)
    if stored is not None:
        return stored[0]
    if url.startswith(("http://", "https://")):
        return await fetch_image(url)
    return None


async def load_qr(record: EmployeeRecord) -> Optional[bytes]:
    """QR image for the back of the card, according to QR_MODE"""
    if config.QR_MODE == "remote":
        return await fetch_image(remote_qr_url(record))

    try:
        return make_qr_png(qr_payload_text(record))
    except DataOverflowError as ex:
        logger.warning(f"⚠️ QR payload too large for {record.id}: {ex}")
        return None


async def collect_card_assets(db: Session, record: EmployeeRecord, with_qr: bool = True) -> CardAssets:
    """
    Args:
        with_qr: False skips QR generation (summary PDF does not need it)
    """
    assets = CardAssets(
        photo=await load_document(db, record.photo_file_id, record.photo_url),
        signature=await load_document(db, record.signature_file_id, record.signature_url),
        authority_signature=read_static(config.AUTHORITY_SIGNATURE_PATH),
        logo=read_static(config.LOGO_PATH),
        qr=await load_qr(record) if with_qr else None,
    )
    if record.is_gazetted:
        assets.hindi_name = await load_document(db, record.hindi_name_file_id, record.hindi_name_url)
        assets.hindi_designation = await load_document(
            db, record.hindi_designation_file_id, record.hindi_designation_url
        )
    return assets
