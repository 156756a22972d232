# backend/models/application_form.py
"""
Validation of ID-card applications.

Used on both sides of the wire: the API validates every submission and
status update, and PortalClient runs the same checks before it sends
anything, so an invalid request never reaches the network.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core import config
from core.errors import ApplicationValidationError
from models.application import APPLICANT_GAZETTED, APPLICANT_NON_GAZETTED
from utils.dates import date_part


MOBILE_PATTERN = r"^[6-9]\d{9}$"

DEPARTMENTS = (
    "ACCOUNTS", "COMMERCIAL", "ELECTRICAL", "ENGINEERING", "GA",
    "MECHANICAL", "MEDICAL", "OPERATING", "PERSONNEL", "RRB",
    "S&T", "SAFETY", "SECURITY", "STORES",
)

BILL_UNITS = (
    "3101001", "3101002", "3101003", "3101004", "3101010", "3101023",
    "3101024", "3101025", "3101026", "3101027", "3101065", "3101066",
    "3101165", "3101166", "3101285", "3101286", "3101287", "3101288",
    "3101470",
)

# Multipart field names of the documents
PHOTO_FIELD = "uploadPhoto"
SIGNATURE_FIELD = "uploadSignature"
HINDI_NAME_FIELD = "uploadHindiName"
HINDI_DESIGNATION_FIELD = "uploadHindiDesignation"

DOCUMENT_FIELDS = (PHOTO_FIELD, SIGNATURE_FIELD, HINDI_NAME_FIELD, HINDI_DESIGNATION_FIELD)

DOCUMENT_LABELS = {
    PHOTO_FIELD: "Photo",
    SIGNATURE_FIELD: "Signature",
    HINDI_NAME_FIELD: "Hindi name",
    HINDI_DESIGNATION_FIELD: "Hindi designation",
}

STATUS_ACTIONS = {"approved": "Approved", "rejected": "Rejected"}


@dataclass
class DocumentUpload:
    """One uploaded document, already read into memory"""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _lenient_date(value: Any) -> Any:
    if isinstance(value, str):
        parsed = date_part(value)
        return parsed if parsed is not None else value
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class FamilyMemberIn(_CamelModel):
    name: str = Field(min_length=1)
    relationship: str = Field(min_length=1)
    dob: date
    blood_group: str = ""
    identification_marks: str = ""

    @field_validator("dob", mode="before")
    @classmethod
    def _parse_dob(cls, value):
        return _lenient_date(value)


class ApplicationForm(_CamelModel):
    """Scalar part of an application submission"""

    applicant_type: Literal[APPLICANT_GAZETTED, APPLICANT_NON_GAZETTED]
    employee_name: str = Field(min_length=1)
    designation: str = Field(min_length=1)
    employee_no: Optional[str] = None
    ruid_no: Optional[str] = None
    date_of_birth: date
    department: str
    station: str = Field(min_length=1)
    bill_unit: str
    residential_address: str = Field(min_length=1)
    rly_contact_number: str = ""
    mobile_number: str = Field(pattern=MOBILE_PATTERN)
    reason_for_application: str = Field(min_length=1)
    emergency_contact_name: str = Field(min_length=1)
    emergency_contact_number: str = Field(pattern=MOBILE_PATTERN)
    family_members: List[FamilyMemberIn] = Field(default_factory=list)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _parse_date_of_birth(cls, value):
        return _lenient_date(value)

    @field_validator("department")
    @classmethod
    def _known_department(cls, value: str) -> str:
        value = value.upper()
        if value not in DEPARTMENTS:
            raise ValueError(f"Unknown department {value!r}")
        return value

    @field_validator("bill_unit")
    @classmethod
    def _known_bill_unit(cls, value: str) -> str:
        if value not in BILL_UNITS:
            raise ValueError(f"Unknown bill unit {value!r}")
        return value

    @model_validator(mode="after")
    def _identifier_for_category(self):
        if self.applicant_type == APPLICANT_NON_GAZETTED and not self.employee_no:
            raise ValueError("Employee No is required for Non-Gazetted applicants.")
        if self.applicant_type == APPLICANT_GAZETTED and not self.ruid_no:
            raise ValueError("RUID No is required for Gazetted applicants.")
        return self

    def family_members_json(self) -> str:
        return json.dumps([
            {
                "name": member.name,
                "relationship": member.relationship,
                "dob": member.dob.isoformat(),
                "bloodGroup": member.blood_group,
                "identificationMarks": member.identification_marks,
            }
            for member in self.family_members
        ], ensure_ascii=False)


# ------------------------- helpers ------------------------- #

def _pydantic_messages(error: ValidationError) -> List[str]:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return messages


def parse_family_members_json(text: Optional[str]) -> List[Dict[str, Any]]:
    """familyMembersJson form field -> list of dicts"""
    if text is None or not text.strip():
        return []
    try:
        members = json.loads(text)
    except ValueError:
        raise ApplicationValidationError(["familyMembersJson: not valid JSON"])
    if not isinstance(members, list):
        raise ApplicationValidationError(["familyMembersJson: must be a JSON array"])
    return members


def parse_application_form(fields: Mapping[str, Any]) -> ApplicationForm:
    """
    Validates the scalar fields of a submission.

    Args:
        fields: camelCase (or snake_case) form fields; ``familyMembersJson``
            may carry the family members as JSON text.

    Raises:
        ApplicationValidationError: with one message per invalid field
    """
    data = {key: value for key, value in fields.items() if value is not None}
    if "familyMembersJson" in data and "familyMembers" not in data:
        data["familyMembers"] = parse_family_members_json(data.pop("familyMembersJson"))
    for key in ("employeeNo", "ruidNo", "employee_no", "ruid_no"):
        if isinstance(data.get(key), str) and not data[key].strip():
            data.pop(key)

    try:
        return ApplicationForm.model_validate(data)
    except ValidationError as ex:
        raise ApplicationValidationError(_pydantic_messages(ex))


def validate_documents(applicant_type: str, documents: Mapping[str, Optional[DocumentUpload]]) -> List[str]:
    """
    Checks uploaded documents against the applicant category.

    Photo and signature are always required; gazetted applicants also need
    the Hindi name and Hindi designation images. Every document must be a
    JPEG/PNG image within the size limit.

    Returns:
        List of error messages, empty when everything is in order
    """
    required = [PHOTO_FIELD, SIGNATURE_FIELD]
    if applicant_type == APPLICANT_GAZETTED:
        required += [HINDI_NAME_FIELD, HINDI_DESIGNATION_FIELD]

    errors = []
    for field_name in required:
        document = documents.get(field_name)
        if document is None or document.size == 0:
            suffix = " for Gazetted applicants" if field_name in (HINDI_NAME_FIELD, HINDI_DESIGNATION_FIELD) else ""
            errors.append(f"{DOCUMENT_LABELS[field_name]} file is required{suffix}.")

    for field_name, document in documents.items():
        if document is None or document.size == 0:
            continue
        label = DOCUMENT_LABELS.get(field_name, field_name)
        if document.content_type.lower() not in config.ACCEPTED_IMAGE_TYPES:
            errors.append(f"{label}: only JPEG and PNG images are accepted.")
        if document.size > config.MAX_UPLOAD_SIZE:
            errors.append(f"{label}: file exceeds {config.MAX_UPLOAD_SIZE // (1024 * 1024)}MB.")

    return errors


def validate_status_update(status: str, remark: Optional[str] = None) -> Tuple[str, Optional[str]]:
    """
    Normalises a requested status change.

    Returns:
        (stored status value, cleaned remark)

    Raises:
        ApplicationValidationError: unknown status, or rejection without remark
    """
    key = (status or "").strip().lower()
    if key not in STATUS_ACTIONS:
        raise ApplicationValidationError([f"Unsupported status {status!r}"])

    cleaned = remark.strip() if remark else ""
    if key == "rejected" and not cleaned:
        raise ApplicationValidationError(["Please provide rejection remarks"])

    return STATUS_ACTIONS[key], cleaned or None
