# backend/core/config.py
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parents[1]

# Document storage
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads" / "documents")))
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(2 * 1024 * 1024)))
ACCEPTED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png")
FILE_URL_PREFIX = os.getenv("FILE_URL_PREFIX", "/api/file")

# Card geometry (CR80)
CARD_DPI = int(os.getenv("CARD_DPI", "300"))
CARD_WIDTH_MM = float(os.getenv("CARD_WIDTH_MM", "85.6"))
CARD_HEIGHT_MM = float(os.getenv("CARD_HEIGHT_MM", "54.0"))

# Fonts: env var, else the first file found in FONT_DIRS, else "" (Pillow
# default font, which has no Devanagari glyphs)
FONT_DIRS = (
    BASE_DIR / "assets" / "fonts",
    Path("/usr/share/fonts/truetype/noto"),
    Path("/usr/share/fonts/opentype/noto"),
    Path("/usr/share/fonts/truetype/lohit-devanagari"),
    Path("/usr/share/fonts/truetype/dejavu"),
)


def find_font(names, dirs=FONT_DIRS) -> str:
    for directory in dirs:
        for name in names:
            candidate = Path(directory) / name
            if candidate.is_file():
                return str(candidate)
    return ""


LATIN_FONT_PATH = os.getenv("LATIN_FONT_PATH") or find_font(("NotoSans-Regular.ttf", "DejaVuSans.ttf"))
LATIN_BOLD_FONT_PATH = os.getenv("LATIN_BOLD_FONT_PATH") or find_font(("NotoSans-Bold.ttf", "DejaVuSans-Bold.ttf"))
DEVANAGARI_FONT_PATH = os.getenv("DEVANAGARI_FONT_PATH") or find_font(
    ("NotoSansDevanagari-Regular.ttf", "Lohit-Devanagari.ttf")
)

# Static card artwork
LOGO_PATH = Path(os.getenv("LOGO_PATH", str(BASE_DIR / "assets" / "logo.png")))
AUTHORITY_SIGNATURE_PATH = Path(
    os.getenv("AUTHORITY_SIGNATURE_PATH", str(BASE_DIR / "assets" / "authority_signature.png"))
)

ORG_NAME_EN = os.getenv("ORG_NAME_EN", "EAST COAST RAILWAY")
ORG_NAME_HI = os.getenv("ORG_NAME_HI", "पूर्व तट रेलवे")

# QR code: "internal" (qrcode library) or "remote" (public endpoint)
QR_MODE = os.getenv("QR_MODE", "internal")
QR_REMOTE_ENDPOINT = os.getenv("QR_REMOTE_ENDPOINT", "https://api.qrserver.com/v1/create-qr-code/")
QR_SIZE = int(os.getenv("QR_SIZE", "200"))

# CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:8000,http://127.0.0.1:3000,http://127.0.0.1:8000",
    ).split(",")
    if origin.strip()
]
