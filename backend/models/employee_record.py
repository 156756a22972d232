# backend/models/employee_record.py
"""
Canonical employee/application record.

Every consumer (API listing, status lookup, card renderer, PDF summary, Excel
export) works on EmployeeRecord. Raw records come from the ORM (snake_case),
from the HTTP API (camelCase) or from legacy exports with older key names;
``to_canonical`` is the only place where these shapes are reconciled.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core import config
from models.application import APPLICANT_GAZETTED


# Canonical field -> raw keys, highest precedence first.
FIELD_PRECEDENCE: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "$id", "applicationId", "application_id"),
    "applicant_type": ("applicant_type", "applicantType"),
    "name": ("employee_name", "employeeName", "empName", "name", "fullName"),
    "designation": ("designation",),
    "employee_no": ("employee_no", "employeeNo", "empNo", "empId", "employeeId"),
    "ruid_no": ("ruid_no", "ruidNo"),
    "date_of_birth": ("date_of_birth", "dateOfBirth", "dob"),
    "department": ("department",),
    "station": ("station",),
    "bill_unit": ("bill_unit", "billUnit"),
    "residential_address": ("residential_address", "residentialAddress", "address"),
    "rly_contact_number": ("rly_contact_number", "rlyContactNumber"),
    "mobile_number": ("mobile_number", "mobileNumber", "mobile"),
    "reason_for_application": ("reason_for_application", "reasonForApplication"),
    "emergency_contact_name": ("emergency_contact_name", "emergencyContactName", "emergencyName"),
    "emergency_contact_number": ("emergency_contact_number", "emergencyContactNumber", "emergencyPhone"),
    "photo_file_id": ("photo_file_id", "photoFileId"),
    "signature_file_id": ("signature_file_id", "signatureFileId"),
    "hindi_name_file_id": ("hindi_name_file_id", "hindiNameFileId"),
    "hindi_designation_file_id": ("hindi_designation_file_id", "hindiDesignationFileId"),
    "photo_url": ("photo_url", "photoUrl"),
    "signature_url": ("signature_url", "signatureUrl"),
    "hindi_name_url": ("hindi_name_url", "hindiNameUrl"),
    "hindi_designation_url": ("hindi_designation_url", "hindiDesignationUrl"),
    "status": ("status",),
    "remark": ("remark", "rejectionRemarks"),
    "card_number": ("card_number", "cardNumber"),
    "application_date": ("application_date", "applicationDate", "submissionDate", "$createdAt", "created_at", "createdAt"),
    "created_at": ("created_at", "createdAt", "$createdAt"),
    "updated_at": ("updated_at", "updatedAt", "$updatedAt"),
}

FAMILY_LIST_KEYS = ("family_members", "familyMembers")
FAMILY_JSON_KEYS = ("family_members_json", "familyMembersJson")

MEMBER_PRECEDENCE: Dict[str, Tuple[str, ...]] = {
    "name": ("name",),
    "relationship": ("relationship", "relation"),
    "date_of_birth": ("dob", "date_of_birth", "dateOfBirth"),
    "blood_group": ("blood_group", "bloodGroup"),
    "identification_marks": ("identification_marks", "identificationMarks"),
}

SELF_RELATIONSHIP = "self"


@dataclass
class FamilyMemberRecord:
    name: str = ""
    relationship: str = ""
    date_of_birth: str = ""
    blood_group: str = ""
    identification_marks: str = ""

    @property
    def is_self(self) -> bool:
        return self.relationship.strip().lower() == SELF_RELATIONSHIP

    def to_api(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "relationship": self.relationship,
            "dob": self.date_of_birth,
            "bloodGroup": self.blood_group,
            "identificationMarks": self.identification_marks,
        }


@dataclass
class EmployeeRecord:
    """Canonical view of one application"""

    id: str = ""
    applicant_type: str = ""
    name: str = ""
    designation: str = ""
    employee_no: str = ""
    ruid_no: str = ""
    date_of_birth: str = ""
    department: str = ""
    station: str = ""
    bill_unit: str = ""
    residential_address: str = ""
    rly_contact_number: str = ""
    mobile_number: str = ""
    reason_for_application: str = ""
    emergency_contact_name: str = ""
    emergency_contact_number: str = ""
    family_members: List[FamilyMemberRecord] = field(default_factory=list)
    photo_file_id: str = ""
    signature_file_id: str = ""
    hindi_name_file_id: str = ""
    hindi_designation_file_id: str = ""
    photo_url: str = ""
    signature_url: str = ""
    hindi_name_url: str = ""
    hindi_designation_url: str = ""
    status: str = "pending"
    remark: str = ""
    card_number: Optional[int] = None
    application_date: str = ""
    created_at: str = ""
    updated_at: str = ""

    @property
    def is_gazetted(self) -> bool:
        return self.applicant_type == APPLICANT_GAZETTED

    @property
    def id_number(self) -> str:
        """RUID number for gazetted officers, otherwise the employee (P.F.) number"""
        return self.ruid_no or self.employee_no

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    @property
    def available_actions(self) -> List[str]:
        return ["approve", "reject"] if self.is_pending else []

    @property
    def blood_group(self) -> str:
        for member in self.family_members:
            if member.is_self and member.blood_group:
                return member.blood_group
        if self.family_members and self.family_members[0].blood_group:
            return self.family_members[0].blood_group
        return ""

    @property
    def emergency_contact(self) -> Tuple[str, str]:
        """(name, phone) with fallback to the first non-SELF family member"""
        name = self.emergency_contact_name
        phone = self.emergency_contact_number
        if not name:
            relative = next((m for m in self.family_members if not m.is_self and m.name), None)
            name = relative.name if relative else self.name
        if not phone:
            phone = self.mobile_number
        return name, phone

    def to_api(self) -> Dict[str, Any]:
        """camelCase shape returned by /api/employees"""
        return {
            "id": self.id,
            "applicantType": self.applicant_type,
            "employeeName": self.name,
            "designation": self.designation,
            "employeeNo": self.employee_no,
            "ruidNo": self.ruid_no,
            "dateOfBirth": self.date_of_birth,
            "department": self.department,
            "station": self.station,
            "billUnit": self.bill_unit,
            "residentialAddress": self.residential_address,
            "rlyContactNumber": self.rly_contact_number,
            "mobileNumber": self.mobile_number,
            "reasonForApplication": self.reason_for_application,
            "emergencyContactName": self.emergency_contact_name,
            "emergencyContactNumber": self.emergency_contact_number,
            "familyMembers": [member.to_api() for member in self.family_members],
            "photoUrl": self.photo_url,
            "signatureUrl": self.signature_url,
            "hindiNameUrl": self.hindi_name_url,
            "hindiDesignationUrl": self.hindi_designation_url,
            "status": self.status,
            "remark": self.remark,
            "cardNumber": self.card_number,
            "applicationDate": self.application_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "actions": self.available_actions,
        }


# ------------------------- mapping ------------------------- #

def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value).strip()


def _first(raw: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _family_members(raw: Mapping[str, Any]) -> List[FamilyMemberRecord]:
    items: Any = _first(raw, FAMILY_LIST_KEYS)
    if items is None:
        items = _first(raw, FAMILY_JSON_KEYS)
    if isinstance(items, str):
        try:
            items = json.loads(items)
        except ValueError:
            items = []
    if not isinstance(items, list):
        return []

    members = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        members.append(FamilyMemberRecord(**{
            name: _as_text(_first(item, keys)) for name, keys in MEMBER_PRECEDENCE.items()
        }))
    return members


def _file_url(explicit: str, file_id: str, prefix: str) -> str:
    if explicit:
        return explicit
    return f"{prefix}/{file_id}" if file_id else ""


def to_canonical(raw: Mapping[str, Any], file_url_prefix: Optional[str] = None) -> EmployeeRecord:
    """
    Pure mapping raw-record -> EmployeeRecord.

    For every canonical field the first non-empty raw key listed in
    FIELD_PRECEDENCE wins. Missing values become empty strings, the status is
    lower-cased (default "pending") and document URLs fall back to
    ``<file_url_prefix>/<file id>``.
    """
    prefix = file_url_prefix if file_url_prefix is not None else config.FILE_URL_PREFIX
    values = {name: _first(raw, keys) for name, keys in FIELD_PRECEDENCE.items()}

    card_number = values.pop("card_number")
    try:
        card_number = int(card_number) if card_number is not None else None
    except (TypeError, ValueError):
        card_number = None

    text = {name: _as_text(value) for name, value in values.items()}
    text["status"] = (text["status"] or "pending").lower()

    for kind in ("photo", "signature", "hindi_name", "hindi_designation"):
        text[f"{kind}_url"] = _file_url(text[f"{kind}_url"], text[f"{kind}_file_id"], prefix)

    return EmployeeRecord(family_members=_family_members(raw), card_number=card_number, **text)
