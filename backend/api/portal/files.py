# backend/api/portal/files.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database import get_db
from utils.file_storage import read_document

router = APIRouter(prefix="/api/file", tags=["files"])


@router.get("/{file_id}")
async def get_file(file_id: str, db: Session = Depends(get_db)):
    """Uploaded document (photo, signature, Hindi images)"""
    document = read_document(db, file_id)
    if document is None:
        raise HTTPException(status_code=404, detail="File not found")

    content, content_type = document
    return Response(content=content, media_type=content_type, headers={"Cache-Control": "private, max-age=3600"})
