# backend/generator/card_pdf.py
"""
Print-ready PDF of the ID card.

Two pages, each exactly the physical card size, front then back. Each page
carries the raster of one face at CARD_DPI, so the printed card is pixel
accurate. Export is all-or-nothing: any failure raises CardExportError and
no bytes are returned.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Tuple

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from core import config
from core.errors import CardExportError
from generator.card_layout import CardContent
from generator.card_renderer import render_card

logger = logging.getLogger("idcard-portal.card_pdf")

FILENAME_SUFFIX = "_ID_Card.pdf"


@dataclass
class CardExport:
    filename: str
    content: bytes


def card_page_size() -> Tuple[float, float]:
    """Page size in points"""
    return config.CARD_WIDTH_MM * mm, config.CARD_HEIGHT_MM * mm


def card_filename(applicant_name: str) -> str:
    """'Ramesh Kumar' -> 'Ramesh_Kumar_ID_Card.pdf'"""
    stem = re.sub(r"\s+", "_", (applicant_name or "").strip()) or "employee"
    return f"{stem}{FILENAME_SUFFIX}"


def build_card_pdf(pages: Iterable[Image.Image], title: str = "ID Card") -> bytes:
    """Places every image full-bleed on its own card-sized page"""
    page_width, page_height = card_page_size()
    buffer = io.BytesIO()

    pdf = canvas.Canvas(buffer, pagesize=(page_width, page_height))
    pdf.setTitle(title)
    for image in pages:
        pdf.drawImage(ImageReader(image), 0, 0, width=page_width, height=page_height)
        pdf.showPage()
    pdf.save()

    return buffer.getvalue()


def export_id_card(content: CardContent, applicant_name: str) -> CardExport:
    """
    Renders both faces and assembles the two-page card PDF.

    Raises:
        CardExportError: rasterization or PDF assembly failed
    """
    filename = card_filename(applicant_name)
    try:
        images = render_card(content)
        pdf_bytes = build_card_pdf([images.front, images.back], title=filename[:-4])
    except Exception as ex:
        logger.exception(f"❌ ID card export failed for {applicant_name!r}")
        raise CardExportError("Failed to generate ID card PDF", cause=ex) from ex

    logger.info(f"✅ ID card exported: {filename} ({len(pdf_bytes)} bytes)")
    return CardExport(filename=filename, content=pdf_bytes)
