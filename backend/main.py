# backend/main.py
"""
ID-card portal backend.

Employees apply for an identity card, administrators review the
applications, approved cards are rendered and exported as print-ready PDF.

Modules:
- Employees: submission, listing, review, Excel register, summary PDF
- Status: applicant-facing status lookup
- Files: uploaded documents
- Card: ID card PDF and previews
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import config
from database import init_db

# Routers
from api.portal.employees import router as employees_router
from api.portal.status import router as status_router
from api.portal.files import router as files_router
from api.portal.card import router as card_router

# ========================================================================
# LOGGING
# ========================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger("idcard-portal")

VERSION = "1.0.0"

# ========================================================================
# APPLICATION
# ========================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    config.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    logger.info(f"Uploads: {config.UPLOAD_DIR}")
    if not config.DEVANAGARI_FONT_PATH:
        logger.warning(
            "⚠️ No Devanagari font found: Hindi text on cards will not render. "
            "Set DEVANAGARI_FONT_PATH or put NotoSansDevanagari-Regular.ttf into backend/assets/fonts"
        )
    yield


app = FastAPI(
    title="ID Card Portal API",
    description="Employee identity card applications, review and card export",
    version=VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# ========================================================================
# CORS
# ========================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# ========================================================================
# API ROUTERS
# ========================================================================

app.include_router(employees_router)   # Applications and review
app.include_router(status_router)      # Status lookup
app.include_router(files_router)       # Uploaded documents
app.include_router(card_router)        # ID card export

# ========================================================================
# SERVICE ENDPOINTS
# ========================================================================


@app.get("/api/health")
async def health_check():
    """
    API health check.

    Returns:
        Service status and version
    """
    return {
        "status": "ok",
        "service": "ID Card Portal API",
        "version": VERSION,
        "modules": {
            "employees": "enabled",
            "status": "enabled",
            "files": "enabled",
            "card": "enabled",
        },
        "qr_mode": config.QR_MODE,
    }


@app.get("/api/info")
async def api_info():
    """
    Available modules.

    Returns:
        Modules with their prefixes
    """
    return {
        "modules": [
            {
                "name": "Employees",
                "prefix": "/api/employees",
                "description": "Submission, listing, approval/rejection, Excel register, summary PDF",
                "endpoints": 7
            },
            {
                "name": "Status",
                "prefix": "/api/status",
                "description": "Application status by id and date of birth",
                "endpoints": 1
            },
            {
                "name": "Files",
                "prefix": "/api/file",
                "description": "Uploaded photos, signatures and Hindi images",
                "endpoints": 1
            },
            {
                "name": "Card",
                "prefix": "/api/card",
                "description": "ID card PDF (CR80, 300 DPI) and PNG previews",
                "endpoints": 3
            },
        ]
    }

# ========================================================================
# SERVER
# ========================================================================

if __name__ == "__main__":
    import uvicorn

    logger.info("=" * 80)
    logger.info("Starting ID Card Portal API...")
    logger.info("=" * 80)
    logger.info("Swagger UI: http://localhost:8000/api/docs")
    logger.info("Health:     http://localhost:8000/api/health")
    logger.info("=" * 80)

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info",
        access_log=True,
    )
