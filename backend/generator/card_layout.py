# backend/generator/card_layout.py
"""
Layout of both faces of the employee ID card.

Geometry is expressed in "design units": pixels of a CR80 card
(85.6 x 54 mm) at 300 DPI, i.e. a 1011 x 638 canvas. A target of any other
size gets every coordinate and font size scaled proportionally.

The layout never fails on missing artwork: photo, signatures and QR code
fall back to placeholder text when their bytes are absent or undecodable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from core import config
from generator.render_target import DEVANAGARI, LATIN, Box, FontSpec, RenderTarget
from models.employee_record import EmployeeRecord
from utils.dates import NOT_AVAILABLE, format_display_date

logger = logging.getLogger("idcard-portal.card_layout")


# ================ GEOMETRY ================ #

MM_PER_INCH = 25.4
DESIGN_WIDTH = 1011
DESIGN_HEIGHT = 638

MAX_FAMILY_ROWS = 5

# Colours
NAVY = "#004B85"
TEAL = "#00A5B4"
TEXT = "#111827"
LABEL = "#374151"
MUTED = "#6B7280"
BORDER = "#9CA3AF"
PLACEHOLDER_FILL = "#F3F4F6"
PHOTO_FILL = "#EFF6FF"
TABLE_HEADER_FILL = "#E5EEF7"
WHITE = "#FFFFFF"

# Front: identity rows
FIELD_TOP = 236
ROW_HEIGHT = 48
HINDI_LABEL_X = 244
ENGLISH_LABEL_X = 398
VALUE_X = 540
HINDI_IMAGE_WIDTH = 200

# Back: family table columns (title, x0, x1)
FAMILY_COLUMNS = (
    ("Name", 24, 360),
    ("Relation", 360, 560),
    ("DOB", 560, 760),
    ("Blood Group", 760, 987),
)
TABLE_TOP = 72
TABLE_HEADER_HEIGHT = 34
TABLE_ROW_HEIGHT = 30

# Back: details and terms
DETAILS_TOP = 280
DETAIL_LINE_HEIGHT = 28
TERMS_LINE_HEIGHT = 22

DEPARTMENT_HINDI = {
    "ACCOUNTS": "लेखा",
    "COMMERCIAL": "वाणिज्य",
    "ELECTRICAL": "विद्युत",
    "ENGINEERING": "इंजीनियरिंग",
    "GA": "सामान्य प्रशासन",
    "MECHANICAL": "यांत्रिक",
    "MEDICAL": "चिकित्सा",
    "OPERATING": "परिचालन",
    "PERSONNEL": "कार्मिक",
    "RRB": "रे.भ.बो",
    "S&T": "सिग. एवं दूरसंचार",
    "SAFETY": "संरक्षा",
    "SECURITY": "सुरक्षा",
    "STORES": "भंडार",
}

FAMILY_TITLE = "परिवार का विवरण/Details of the family"
NO_FAMILY_TEXT = "No family member details provided"
LOST_CARD_HI = "यदि यह कार्ड मिले तो कृपया निकटतम पोस्ट बॉक्स में डाल दें ।"
LOST_CARD_EN = "If found please drop it in the nearest Post Box"

TERMS_TITLE = "Terms & Conditions"
DEFAULT_TERMS = (
    "This card is the property of Indian Railways",
    "Must be carried at all times while on duty",
    "Report loss immediately to HR department",
    "Not transferable",
)
ELLIPSIS = "..."


def card_pixel_size(dpi: Optional[int] = None) -> Tuple[int, int]:
    """Canvas size of one card face at the given (or configured) DPI"""
    dpi = dpi or config.CARD_DPI
    return (
        int(round(config.CARD_WIDTH_MM / MM_PER_INCH * dpi)),
        int(round(config.CARD_HEIGHT_MM / MM_PER_INCH * dpi)),
    )


# ================ CONTENT ================ #

@dataclass
class CardAssets:
    """Encoded images used on the card; None where unavailable"""
    photo: Optional[bytes] = None
    signature: Optional[bytes] = None
    hindi_name: Optional[bytes] = None
    hindi_designation: Optional[bytes] = None
    authority_signature: Optional[bytes] = None
    logo: Optional[bytes] = None
    qr: Optional[bytes] = None


@dataclass
class FamilyRow:
    name: str
    relationship: str
    date_of_birth: str
    blood_group: str


@dataclass
class CardContent:
    """Everything printed on the card, already formatted"""
    name: str
    designation: str
    id_label_hi: str
    id_label_en: str
    id_number: str
    station: str
    date_of_birth: str
    department_en: str
    department_hi: str
    card_serial: str
    is_gazetted: bool = False
    org_name_en: str = ""
    org_name_hi: str = ""
    family: List[FamilyRow] = field(default_factory=list)
    emergency_contact: str = NOT_AVAILABLE
    address: str = NOT_AVAILABLE
    blood_group: str = NOT_AVAILABLE
    terms: List[str] = field(default_factory=lambda: list(DEFAULT_TERMS))
    assets: CardAssets = field(default_factory=CardAssets)


def card_serial(department: str, card_number: Optional[int]) -> str:
    return f"H.Q. SI.No. {department}-{card_number if card_number is not None else ''}"


def build_card_content(record: EmployeeRecord, assets: Optional[CardAssets] = None) -> CardContent:
    """Formats a canonical record for printing"""
    department = record.department.upper()

    if record.is_gazetted:
        id_label_hi, id_label_en = "आर.यू.आई.डी", "RUID No."
    else:
        id_label_hi, id_label_en = "पी.एफ.नं", "P.F.No."

    family = [
        FamilyRow(
            name=member.name or "-",
            relationship=member.relationship or "-",
            date_of_birth=format_display_date(member.date_of_birth),
            blood_group=member.blood_group or "-",
        )
        for member in record.family_members
    ]

    contact_name, contact_phone = record.emergency_contact
    if contact_name and contact_phone:
        emergency = f"{contact_name} ({contact_phone})"
    else:
        emergency = contact_name or contact_phone or NOT_AVAILABLE

    return CardContent(
        name=record.name.upper() or NOT_AVAILABLE,
        designation=record.designation or NOT_AVAILABLE,
        id_label_hi=id_label_hi,
        id_label_en=id_label_en,
        id_number=record.id_number or NOT_AVAILABLE,
        station=record.station or NOT_AVAILABLE,
        date_of_birth=format_display_date(record.date_of_birth),
        department_en=department or NOT_AVAILABLE,
        department_hi=DEPARTMENT_HINDI.get(department, department or NOT_AVAILABLE),
        card_serial=card_serial(department, record.card_number),
        is_gazetted=record.is_gazetted,
        org_name_en=config.ORG_NAME_EN,
        org_name_hi=config.ORG_NAME_HI,
        family=family,
        emergency_contact=emergency,
        address=record.residential_address or NOT_AVAILABLE,
        blood_group=record.blood_group or NOT_AVAILABLE,
        assets=assets or CardAssets(),
    )


# ================ TEXT HELPERS ================ #

def script_of(text: str) -> str:
    """DEVANAGARI when the text contains any Devanagari character"""
    return DEVANAGARI if any("ऀ" <= ch <= "ॿ" for ch in text) else LATIN


def truncate_text(target: RenderTarget, text: str, font: FontSpec, max_width: float) -> str:
    if target.text_width(text, font) <= max_width:
        return text
    if target.text_width(ELLIPSIS, font) > max_width:
        # No room for the ellipsis: widest prefix that fits, possibly ""
        while text and target.text_width(text, font) > max_width:
            text = text[:-1]
        return text
    while text and target.text_width(text + ELLIPSIS, font) > max_width:
        text = text[:-1]
    return text.rstrip() + ELLIPSIS


def fit_text(target: RenderTarget, text: str, font: FontSpec, max_width: float,
             min_size: int = 10) -> Tuple[str, FontSpec]:
    """
    Shrinks the font until text fits max_width, then truncates.

    Returns:
        (text to draw, font to draw it with)
    """
    size = font.size
    while size > min_size and target.text_width(text, replace(font, size=size)) > max_width:
        size -= 1
    font = replace(font, size=size)
    return truncate_text(target, text, font, max_width), font


def wrap_text(target: RenderTarget, text: str, font: FontSpec, max_width: float,
              max_lines: int) -> List[str]:
    """Greedy word wrap; the last allowed line is truncated on overflow"""
    words = text.split()
    if max_lines <= 1:
        return [truncate_text(target, " ".join(words), font, max_width)]

    lines: List[str] = []
    current = ""
    for index, word in enumerate(words):
        candidate = f"{current} {word}".strip()
        if target.text_width(candidate, font) <= max_width or not current:
            current = candidate
            continue
        lines.append(current)
        current = word
        if len(lines) == max_lines - 1:
            current = " ".join(words[index:])
            break
    if current:
        lines.append(current)
    return [truncate_text(target, line, font, max_width) for line in lines[:max_lines]]


class _Grid:
    """Converts design units to target pixels"""

    def __init__(self, target: RenderTarget):
        self.target = target
        self.k = target.width / DESIGN_WIDTH

    def px(self, value: float) -> int:
        return int(round(value * self.k))

    def box(self, x0: float, y0: float, x1: float, y1: float) -> Box:
        return self.px(x0), self.px(y0), self.px(x1), self.px(y1)

    def font(self, size: int, bold: bool = False, script: str = LATIN) -> FontSpec:
        return FontSpec(size=max(1, self.px(size)), bold=bold, script=script)

    def text(self, x: float, y: float, text: str, size: int, max_width: float,
             bold: bool = False, color: str = TEXT, anchor: str = "lm", shrink: bool = True) -> None:
        font = self.font(size, bold, script_of(text))
        limit = self.px(max_width)
        if shrink:
            text, font = fit_text(self.target, text, font, limit, min_size=max(1, self.px(12)))
        else:
            text = truncate_text(self.target, text, font, limit)
        self.target.text((self.px(x), self.px(y)), text, font, color=color, anchor=anchor)


def draw_placeholder(grid: _Grid, box: Box, label: str) -> None:
    target = grid.target
    target.fill_rect(box, PLACEHOLDER_FILL)
    target.outline_rect(box, BORDER, width=max(1, grid.px(2)))
    font = grid.font(22, bold=True)
    x0, y0, x1, y1 = box
    text, font = fit_text(target, label, font, (x1 - x0) - grid.px(8), min_size=max(1, grid.px(10)))
    target.text(((x0 + x1) // 2, (y0 + y1) // 2), text, font, color=MUTED, anchor="mm")


def _draw_image_or_placeholder(grid: _Grid, box: Box, data: Optional[bytes], label: str,
                               fit: str = "contain") -> bool:
    if grid.target.image(box, data, fit=fit):
        return True
    logger.warning(f"⚠️ {label} unavailable, drawing placeholder")
    draw_placeholder(grid, box, label)
    return False


def _bar(grid: _Grid, y0: int, y1: int, color: str, cells: Sequence[str]) -> None:
    width = DESIGN_WIDTH / len(cells)
    grid.target.fill_rect(grid.box(0, y0, DESIGN_WIDTH, y1), color)
    for index, cell in enumerate(cells):
        center = width * index + width / 2
        grid.text(center, (y0 + y1) / 2, cell, 22, width - 16, bold=True, color=WHITE, anchor="mm")


def _frame(grid: _Grid) -> None:
    target = grid.target
    target.fill_rect((0, 0, target.width, target.height), WHITE)
    target.outline_rect((0, 0, target.width - 1, target.height - 1), BORDER, width=max(1, grid.px(4)))


# ================ FRONT ================ #

def draw_front(target: RenderTarget, content: CardContent) -> None:
    """
    Front face: header with logo and organisation name, department and
    identity-card bars, photo, bilingual identity rows, signatures.
    """
    grid = _Grid(target)
    assets = content.assets
    _frame(grid)

    # Header
    if not target.image(grid.box(20, 12, 116, 108), assets.logo):
        logger.debug("Logo unavailable, header drawn without it")
    header_width = DESIGN_WIDTH - 2 * 130
    grid.text(DESIGN_WIDTH / 2, 40, content.org_name_hi, 34, header_width, bold=True, color=NAVY, anchor="mm")
    grid.text(DESIGN_WIDTH / 2, 86, content.org_name_en, 40, header_width, bold=True, color=NAVY, anchor="mm")
    target.line((0, grid.px(118)), (target.width, grid.px(118)), NAVY, width=max(1, grid.px(3)))

    _bar(grid, 120, 165, TEAL, ("विभाग", "DEPARTMENT", content.department_hi, content.department_en))
    _bar(grid, 165, 210, NAVY, ("पहचान पत्र", "IDENTITY CARD", "प्र.का", content.card_serial))

    # Photo
    target.outline_rect(grid.box(30, 224, 222, 486), BORDER, width=max(1, grid.px(2)))
    photo_box = grid.box(34, 228, 218, 482)
    target.fill_rect(photo_box, PHOTO_FILL)
    _draw_image_or_placeholder(grid, photo_box, assets.photo, "PHOTO", fit="cover")

    # Identity rows
    rows = (
        ("नाम", "Name", content.name, assets.hindi_name),
        ("पद नाम", "Desig", content.designation, assets.hindi_designation),
        (content.id_label_hi, content.id_label_en, content.id_number, None),
        ("स्टेशन", "Station", content.station, None),
        ("जन्म तारीख", "D.O.B", content.date_of_birth, None),
    )
    right = DESIGN_WIDTH - 24
    hindi_x0 = right - HINDI_IMAGE_WIDTH
    for index, (label_hi, label_en, value, hindi_image) in enumerate(rows):
        cy = FIELD_TOP + index * ROW_HEIGHT + 20
        grid.text(HINDI_LABEL_X, cy, label_hi, 24, ENGLISH_LABEL_X - HINDI_LABEL_X - 8, color=LABEL)
        grid.text(ENGLISH_LABEL_X, cy, label_en, 24, VALUE_X - ENGLISH_LABEL_X - 8, bold=True, color=LABEL)

        value_right = right
        if content.is_gazetted and index < 2:
            value_right = hindi_x0 - 8
            if not target.image(grid.box(hindi_x0, cy - 22, right, cy + 22), hindi_image):
                logger.warning(f"⚠️ Hindi {label_en.lower()} image unavailable")
        grid.text(VALUE_X, cy, f": {value}", 26, value_right - VALUE_X, bold=index == 0)

    # Signatures
    _draw_image_or_placeholder(grid, grid.box(40, 500, 300, 560), assets.signature, "SIGNATURE")
    grid.text(170, 578, "कार्डधारक के हस्ताक्षर", 18, 300, color=LABEL, anchor="mm")
    grid.text(170, 604, "Signature of the Card Holder", 18, 300, color=LABEL, anchor="mm")

    authority_x0 = DESIGN_WIDTH - 300
    _draw_image_or_placeholder(
        grid, grid.box(authority_x0, 500, DESIGN_WIDTH - 40, 560),
        assets.authority_signature, "AUTHORITY SIGNATURE",
    )
    authority_cx = authority_x0 + 130
    grid.text(authority_cx, 578, "जारीकर्ता प्राधिकारी के हस्ताक्षर", 18, 300, color=LABEL, anchor="mm")
    grid.text(authority_cx, 604, "Signature of Issuing Authority", 18, 300, color=LABEL, anchor="mm")


# ================ BACK ================ #

def _family_table(grid: _Grid, family: Sequence[FamilyRow]) -> int:
    """Draws the family table and returns the design y below it"""
    target = grid.target
    x0, x1 = FAMILY_COLUMNS[0][1], FAMILY_COLUMNS[-1][2]
    header_bottom = TABLE_TOP + TABLE_HEADER_HEIGHT

    target.fill_rect(grid.box(x0, TABLE_TOP, x1, header_bottom), TABLE_HEADER_FILL)
    for title, col_x0, col_x1 in FAMILY_COLUMNS:
        grid.text(col_x0 + 10, TABLE_TOP + TABLE_HEADER_HEIGHT / 2, title, 21, col_x1 - col_x0 - 20,
                  bold=True, color=NAVY)

    if not family:
        target.outline_rect(grid.box(x0, TABLE_TOP, x1, header_bottom), BORDER, width=max(1, grid.px(2)))
        grid.text(DESIGN_WIDTH / 2, header_bottom + 40, NO_FAMILY_TEXT, 22, x1 - x0, color=MUTED, anchor="mm")
        return header_bottom + 80

    shown = family[:MAX_FAMILY_ROWS]
    for index, row in enumerate(shown):
        top = header_bottom + index * TABLE_ROW_HEIGHT
        cells = (row.name, row.relationship, row.date_of_birth, row.blood_group)
        for value, (_, col_x0, col_x1) in zip(cells, FAMILY_COLUMNS):
            grid.text(col_x0 + 10, top + TABLE_ROW_HEIGHT / 2, value, 20, col_x1 - col_x0 - 20)
        bottom = top + TABLE_ROW_HEIGHT
        target.line((grid.px(x0), grid.px(bottom)), (grid.px(x1), grid.px(bottom)), BORDER, width=1)

    table_bottom = header_bottom + len(shown) * TABLE_ROW_HEIGHT
    target.outline_rect(grid.box(x0, TABLE_TOP, x1, table_bottom), BORDER, width=max(1, grid.px(2)))

    hidden = len(family) - len(shown)
    if hidden > 0:
        grid.text(x1, table_bottom + 14, f"+{hidden} more", 18, 200, color=MUTED, anchor="rm")
    return table_bottom + 30


def _labelled(grid: _Grid, y: float, label: str, value: str, max_lines: int = 1) -> float:
    """Draws 'label value' at y; returns the design y of the next line"""
    target = grid.target
    x = 24
    right = DESIGN_WIDTH - 24
    label_font = grid.font(22, bold=True)
    label_width = target.text_width(label, label_font) / grid.k
    target.text((grid.px(x), grid.px(y)), label, label_font, color=NAVY, anchor="lm")

    value_x = x + label_width + 10
    value_font = grid.font(22, script=script_of(value))
    lines = wrap_text(target, value, value_font, grid.px(right - value_x), max_lines)
    for line in lines:
        target.text((grid.px(value_x), grid.px(y)), line, value_font, color=TEXT, anchor="lm")
        y += DETAIL_LINE_HEIGHT
    return y


def _terms(grid: _Grid, y: float, terms: Sequence[str], max_width: float, bottom: float) -> None:
    """Bulleted terms list from y; items that would pass bottom are dropped"""
    grid.text(24, y, TERMS_TITLE, 20, max_width, bold=True, color=NAVY)
    for term in terms:
        y += TERMS_LINE_HEIGHT
        if y > bottom:
            logger.warning(f"⚠️ {len(terms)} terms do not fit on the card back")
            return
        grid.text(24, y, f"• {term}", 17, max_width, color=TEXT)


def draw_back(target: RenderTarget, content: CardContent) -> None:
    """
    Back face: family table (at most MAX_FAMILY_ROWS rows), emergency
    contact, residential address, blood group, terms and conditions,
    lost-card notice, QR code.
    """
    grid = _Grid(target)
    _frame(grid)

    grid.text(DESIGN_WIDTH / 2, 36, FAMILY_TITLE, 28, DESIGN_WIDTH - 48, bold=True, color=NAVY, anchor="mm")

    y = max(_family_table(grid, content.family), DETAILS_TOP)
    y = _labelled(grid, y, "Emergency Contact:", content.emergency_contact)
    y = _labelled(grid, y, "Res. Address:", content.address, max_lines=2)
    y = _labelled(grid, y, "Blood Group:", content.blood_group)

    qr_x0 = DESIGN_WIDTH - 190
    notice_width = qr_x0 - 24 - 16
    notice_top = DESIGN_HEIGHT - 92
    _terms(grid, y + 6, content.terms, notice_width, notice_top - 28)

    grid.text(24, notice_top, LOST_CARD_HI, 20, notice_width, color=LABEL)
    grid.text(24, DESIGN_HEIGHT - 60, LOST_CARD_EN, 20, notice_width, color=LABEL)

    _draw_image_or_placeholder(
        grid, grid.box(qr_x0, DESIGN_HEIGHT - 190, DESIGN_WIDTH - 30, DESIGN_HEIGHT - 30),
        content.assets.qr, "QR",
    )
