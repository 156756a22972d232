# backend/generator/summary_pdf.py
"""
Application summary PDF (A4).

Page 1 is a cover sheet with the applicant's photo and signature, the
following pages hold the applicant details and family tables. Images that
are missing or cannot be decoded are replaced by a short note.
"""

from __future__ import annotations

import io
import logging
from datetime import datetime
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape

from PIL import Image, UnidentifiedImageError
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    Image as RLImage,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from core import config
from generator.card_layout import CardAssets
from models.employee_record import EmployeeRecord
from utils.dates import NOT_AVAILABLE, format_display_date

logger = logging.getLogger("idcard-portal.summary_pdf")

HEADER_BG = colors.HexColor("#004B85")
LABEL_BG = colors.HexColor("#E5EEF7")
GRID = colors.HexColor("#9CA3AF")


def summary_filename(record: EmployeeRecord) -> str:
    stem = "_".join((record.name or "application").split())
    return f"{stem}_Application.pdf"


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="CoverTitle",
        parent=styles["Title"],
        fontSize=20,
        leading=24,
        textColor=HEADER_BG,
        alignment=TA_CENTER,
    ))
    styles.add(ParagraphStyle(
        name="CoverSubtitle",
        parent=styles["Heading2"],
        alignment=TA_CENTER,
        spaceAfter=12,
    ))
    styles.add(ParagraphStyle(
        name="Cell",
        parent=styles["Normal"],
        fontSize=9,
        leading=11,
    ))
    styles.add(ParagraphStyle(
        name="Note",
        parent=styles["Normal"],
        fontSize=9,
        textColor=colors.grey,
        alignment=TA_CENTER,
    ))
    return styles


def _image_flowable(data: Optional[bytes], max_width: float, max_height: float, styles, label: str):
    """Image scaled into the box keeping its aspect ratio, or a note"""
    if data:
        try:
            with Image.open(io.BytesIO(data)) as img:
                width, height = img.size
            scale = min(max_width / width, max_height / height)
            return RLImage(io.BytesIO(data), width=width * scale, height=height * scale)
        except (UnidentifiedImageError, OSError, ValueError, ZeroDivisionError) as ex:
            logger.warning(f"⚠️ {label} cannot be embedded: {ex}")
    return Paragraph(f"{escape(label)} not available", styles["Note"])


def _key_value_table(rows: List[Tuple[str, str]], styles) -> Table:
    data = [
        [Paragraph(f"<b>{escape(label)}</b>", styles["Cell"]), Paragraph(escape(value or NOT_AVAILABLE), styles["Cell"])]
        for label, value in rows
    ]
    table = Table(data, colWidths=[55 * mm, 115 * mm])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (0, -1), LABEL_BG),
        ("GRID", (0, 0), (-1, -1), 0.5, GRID),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    return table


def _family_table(record: EmployeeRecord, styles):
    if not record.family_members:
        return Paragraph("No family member details provided", styles["Normal"])

    header = ["#", "Name", "Relationship", "Date of Birth", "Blood Group", "Identification Marks"]
    data = [[Paragraph(f"<b>{title}</b>", styles["Cell"]) for title in header]]
    for index, member in enumerate(record.family_members, start=1):
        data.append([
            Paragraph(str(index), styles["Cell"]),
            Paragraph(escape(member.name or "-"), styles["Cell"]),
            Paragraph(escape(member.relationship or "-"), styles["Cell"]),
            Paragraph(format_display_date(member.date_of_birth), styles["Cell"]),
            Paragraph(escape(member.blood_group or "-"), styles["Cell"]),
            Paragraph(escape(member.identification_marks or "-"), styles["Cell"]),
        ])

    table = Table(data, colWidths=[8 * mm, 40 * mm, 28 * mm, 26 * mm, 22 * mm, 46 * mm], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), LABEL_BG),
        ("GRID", (0, 0), (-1, -1), 0.5, GRID),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    return table


def _footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.grey)
    canvas.drawString(15 * mm, 10 * mm, f"{config.ORG_NAME_EN} - Identity Card Application")
    canvas.drawRightString(A4[0] - 15 * mm, 10 * mm, f"Page {doc.page}")
    canvas.restoreState()


def build_summary_story(record: EmployeeRecord, assets: Optional[CardAssets] = None) -> list:
    """Flowables of the summary: cover sheet, page break, details and family"""
    assets = assets or CardAssets()
    styles = _styles()

    id_label = "RUID No." if record.is_gazetted else "Employee No."
    category = "Gazetted" if record.is_gazetted else "Non-Gazetted"
    story = []

    # ---------- cover sheet ----------
    story.append(Paragraph(escape(config.ORG_NAME_EN), styles["CoverTitle"]))
    story.append(Paragraph("Application for Employee Identity Card", styles["CoverSubtitle"]))
    story.append(Spacer(1, 6 * mm))
    story.append(_key_value_table([
        ("Application ID", record.id),
        ("Applicant Type", category),
        ("Name", record.name),
        (id_label, record.id_number),
        ("Status", record.status.capitalize()),
        ("Application Date", format_display_date(record.application_date)),
    ], styles))
    story.append(Spacer(1, 10 * mm))

    images = Table(
        [
            [
                _image_flowable(assets.photo, 45 * mm, 55 * mm, styles, "Photo"),
                _image_flowable(assets.signature, 70 * mm, 30 * mm, styles, "Signature"),
            ],
            [Paragraph("Photograph", styles["Note"]), Paragraph("Signature", styles["Note"])],
        ],
        colWidths=[85 * mm, 85 * mm],
    )
    images.setStyle(TableStyle([
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, 0), "MIDDLE"),
        ("BOX", (0, 0), (0, 0), 0.5, GRID),
        ("BOX", (1, 0), (1, 0), 0.5, GRID),
    ]))
    story.append(images)

    if record.is_gazetted:
        story.append(Spacer(1, 8 * mm))
        hindi = Table(
            [
                [
                    _image_flowable(assets.hindi_name, 75 * mm, 20 * mm, styles, "Hindi name"),
                    _image_flowable(assets.hindi_designation, 75 * mm, 20 * mm, styles, "Hindi designation"),
                ],
                [Paragraph("Name in Hindi", styles["Note"]), Paragraph("Designation in Hindi", styles["Note"])],
            ],
            colWidths=[85 * mm, 85 * mm],
        )
        hindi.setStyle(TableStyle([("ALIGN", (0, 0), (-1, -1), "CENTER")]))
        story.append(hindi)

    story.append(PageBreak())

    # ---------- details ----------
    contact_name, contact_phone = record.emergency_contact
    story.append(Paragraph("Applicant Details", styles["Heading2"]))
    details = [
        ("Name", record.name),
        ("Designation", record.designation),
        (id_label, record.id_number),
        ("Date of Birth", format_display_date(record.date_of_birth)),
        ("Department", record.department),
        ("Station", record.station),
        ("Bill Unit", record.bill_unit),
        ("Residential Address", record.residential_address),
        ("Railway Contact No.", record.rly_contact_number),
        ("Mobile No.", record.mobile_number),
        ("Emergency Contact", f"{contact_name} ({contact_phone})" if contact_phone else contact_name),
        ("Reason for Application", record.reason_for_application),
        ("Status", record.status.capitalize()),
    ]
    if record.remark:
        details.append(("Remark", record.remark))
    if record.card_number is not None:
        details.append(("Card Serial No.", f"{record.department}-{record.card_number}"))
    story.append(_key_value_table(details, styles))

    story.append(Spacer(1, 8 * mm))
    story.append(Paragraph("Family Details", styles["Heading2"]))
    story.append(_family_table(record, styles))

    story.append(Spacer(1, 8 * mm))
    story.append(Paragraph(
        f"Generated on {datetime.now().strftime('%d-%m-%Y %H:%M')}",
        styles["Note"],
    ))
    return story


def build_summary_pdf(record: EmployeeRecord, assets: Optional[CardAssets] = None) -> bytes:
    """
    Builds the multi-page application summary.

    Args:
        record: canonical application record
        assets: photo, signature and Hindi images (None -> notes instead)

    Returns:
        PDF bytes
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title=f"ID Card Application - {record.name}",
    )
    story = build_summary_story(record, assets)

    doc.build(story, onFirstPage=_footer, onLaterPages=_footer)
    pdf_bytes = buffer.getvalue()
    logger.info(f"✅ Summary PDF built for {record.id}: {len(pdf_bytes)} bytes")
    return pdf_bytes
