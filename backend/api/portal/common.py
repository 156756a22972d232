# backend/api/portal/common.py
from urllib.parse import quote

from fastapi import HTTPException

from core.errors import (
    ApplicationNotFoundError,
    ApplicationValidationError,
    CardExportError,
    PortalError,
    StatusTransitionError,
)


def http_error(ex: PortalError) -> HTTPException:
    """Maps a domain error to an HTTP error"""
    if isinstance(ex, ApplicationNotFoundError):
        return HTTPException(status_code=404, detail=str(ex))
    if isinstance(ex, ApplicationValidationError):
        return HTTPException(status_code=422, detail=ex.errors)
    if isinstance(ex, StatusTransitionError):
        return HTTPException(status_code=409, detail=str(ex))
    if isinstance(ex, CardExportError):
        return HTTPException(status_code=500, detail=str(ex))
    return HTTPException(status_code=400, detail=str(ex))


def attachment_headers(filename: str) -> dict:
    """Content-Disposition safe for non-ASCII names"""
    ascii_name = filename.encode("ascii", "ignore").decode() or "download"
    return {
        "Content-Disposition": f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"
    }
