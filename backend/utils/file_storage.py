# backend/utils/file_storage.py
"""
Local storage for applicant documents.

Each upload becomes a StoredFile row plus a file under UPLOAD_DIR; the row id
is the "file identifier" kept on the application and resolved to
``<FILE_URL_PREFIX>/<id>`` for clients.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from core import config
from models.application_form import DocumentUpload
from models.stored_file import StoredFile

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
}


def file_url(file_id: Optional[str]) -> str:
    return f"{config.FILE_URL_PREFIX}/{file_id}" if file_id else ""


def save_document(db: Session, upload: DocumentUpload) -> StoredFile:
    """Writes the document to disk and registers it (without committing)"""
    upload_dir = Path(config.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    file_id = uuid.uuid4().hex
    path = upload_dir / f"{file_id}{EXTENSIONS.get(upload.content_type.lower(), '')}"
    path.write_bytes(upload.data)

    stored = StoredFile(
        id=file_id,
        original_name=upload.filename,
        content_type=upload.content_type,
        size=upload.size,
        path=str(path),
    )
    db.add(stored)
    logger.info(f"Stored document {upload.filename!r} as {file_id} ({upload.size} bytes)")
    return stored


def discard_document(stored: StoredFile) -> None:
    """Removes the file of a document whose record was never committed"""
    path = Path(stored.path)
    if path.exists():
        path.unlink()


def read_document(db: Session, file_id: Optional[str]) -> Optional[Tuple[bytes, str]]:
    """
    Returns (content, content type) of a stored document, or None when the id
    is empty, unknown or its file is gone.
    """
    if not file_id:
        return None

    stored = db.query(StoredFile).filter(StoredFile.id == file_id).first()
    if not stored:
        return None

    path = Path(stored.path)
    if not path.exists():
        logger.warning(f"⚠️ Document {file_id} registered but missing on disk: {path}")
        return None

    return path.read_bytes(), stored.content_type
