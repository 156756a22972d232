# backend/generator/qr_builder.py
"""
QR code for the back of the ID card.

The payload is a compact JSON object identifying the card holder. It is
rendered either locally with ``qrcode`` or by a public QR endpoint that gets
the payload URL-encoded in its ``data`` parameter.
"""

from __future__ import annotations

import io
import json
import logging
from typing import Dict, Optional
from urllib.parse import quote

import qrcode
from qrcode.constants import ERROR_CORRECT_M
from PIL import Image

from core import config
from models.employee_record import EmployeeRecord

logger = logging.getLogger("idcard-portal.qr_builder")

# Same unreserved set as JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def qr_payload(record: EmployeeRecord) -> Dict[str, str]:
    return {
        "name": record.name,
        "pfNumber": record.id_number,
        "designation": record.designation,
        "dateOfBirth": record.date_of_birth,
        "station": record.station,
        "department": record.department,
    }


def qr_payload_text(record: EmployeeRecord) -> str:
    return json.dumps(qr_payload(record), ensure_ascii=False, separators=(",", ":"))


def encoded_payload(record: EmployeeRecord) -> str:
    """URL-encoded JSON payload"""
    return quote(qr_payload_text(record), safe=_URI_COMPONENT_SAFE)


def remote_qr_url(record: EmployeeRecord, size: Optional[int] = None) -> str:
    size = size or config.QR_SIZE
    return f"{config.QR_REMOTE_ENDPOINT}?size={size}x{size}&data={encoded_payload(record)}"


def make_qr_png(data: str, size: Optional[int] = None) -> bytes:
    """
    Generates a QR code as PNG bytes.

    Args:
        data: text to encode
        size: edge length of the resulting image in pixels
    """
    size = size or config.QR_SIZE

    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white").get_image()
    img = img.convert("RGB").resize((size, size), Image.Resampling.NEAREST)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    logger.info(f"QR code generated: {size}x{size}px, {len(data)} chars")
    return buffer.getvalue()
