# backend/utils/portal_client.py
"""
Async HTTP client of the portal API.

Requests that would be refused anyway (missing documents, malformed mobile
number, rejection without remark) are validated locally and raise
ApplicationValidationError before any connection is opened. Network and
server failures are reported as {"success": False, "message": ...}; there
are no retries.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Mapping, Optional

import aiohttp

from models.application_form import (
    DocumentUpload,
    parse_application_form,
    validate_documents,
    validate_status_update,
)
from core.errors import ApplicationValidationError

logger = logging.getLogger(__name__)


def _failure(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message}


def _error_message(status: int, body: Any) -> str:
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, list):
        detail = "; ".join(str(item) for item in detail)
    return f"HTTP {status}: {detail or 'request failed'}"


class PortalClient:
    """
    Example:
        client = PortalClient("http://localhost:8000")
        result = await client.update_application_status(app_id, "rejected", "incomplete documents")
    """

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        async with aiohttp.ClientSession() as session:
            try:
                async with session.request(method, url, **kwargs) as resp:
                    body = await resp.json(content_type=None)
                    if resp.status >= 400:
                        logger.error(f"Portal API error: {method} {path} -> {resp.status}")
                        return _failure(_error_message(resp.status, body))
                    return body
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.error(f"Portal API unreachable: {method} {path}: {e}")
                return _failure(f"Network error: {e}")

    # ---------- applications ----------

    async def list_employees(self, applicant_type: Optional[str] = None, status: Optional[str] = None) -> Dict[str, Any]:
        params = {}
        if applicant_type:
            params["applicantType"] = applicant_type
        if status:
            params["status"] = status
        return await self._request("GET", "/api/employees", params=params)

    async def submit_application(
        self,
        fields: Mapping[str, Any],
        documents: Mapping[str, Optional[DocumentUpload]],
    ) -> Dict[str, Any]:
        """
        Args:
            fields: camelCase form fields; familyMembers (list) is sent as
                familyMembersJson
            documents: uploadPhoto, uploadSignature, uploadHindiName,
                uploadHindiDesignation

        Raises:
            ApplicationValidationError: the submission is invalid (nothing sent)
        """
        fields = dict(fields)
        if isinstance(fields.get("familyMembers"), list):
            fields["familyMembersJson"] = json.dumps(fields.pop("familyMembers"), ensure_ascii=False)

        form = parse_application_form(fields)
        errors = validate_documents(form.applicant_type, documents)
        if errors:
            raise ApplicationValidationError(errors)

        data = aiohttp.FormData()
        for key, value in fields.items():
            if value is not None:
                data.add_field(key, str(value))
        for key, document in documents.items():
            if document is not None:
                data.add_field(key, document.data, filename=document.filename, content_type=document.content_type)

        return await self._request("POST", "/api/employees", data=data)

    async def update_application_status(self, application_id: str, status: str,
                                        remark: Optional[str] = None) -> Dict[str, Any]:
        """
        Raises:
            ApplicationValidationError: unknown status or rejection without remark (nothing sent)
        """
        validate_status_update(status, remark)
        payload = {"status": status, "remark": remark}
        return await self._request("POST", f"/api/employees/{application_id}/status", json=payload)

    async def get_application_status(self, application_id: str, date_of_birth: str) -> Dict[str, Any]:
        return await self._request("GET", "/api/status", params={"id": application_id, "dob": date_of_birth})
