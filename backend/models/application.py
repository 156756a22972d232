# backend/models/application.py
import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, Date, func
from database import Base


STATUS_PENDING = "Pending"
STATUS_APPROVED = "Approved"
STATUS_REJECTED = "Rejected"

STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

APPLICANT_GAZETTED = "gazetted"
APPLICANT_NON_GAZETTED = "non-gazetted"


def _new_id() -> str:
    return uuid.uuid4().hex


class Application(Base):
    """ID-card applications"""

    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=_new_id)

    # Applicant
    applicant_type = Column(String(20), nullable=False, index=True)
    employee_name = Column(String(200), nullable=False)
    designation = Column(String(200), nullable=False)
    employee_no = Column(String(50), nullable=True, index=True)
    ruid_no = Column(String(50), nullable=True, index=True)
    date_of_birth = Column(Date, nullable=False)

    # Posting
    department = Column(String(50), nullable=False, index=True)
    station = Column(String(100), nullable=False, index=True)
    bill_unit = Column(String(20), nullable=False)

    # Contacts
    residential_address = Column(Text, nullable=False)
    rly_contact_number = Column(String(20), nullable=True)
    mobile_number = Column(String(20), nullable=False)
    reason_for_application = Column(Text, nullable=True)
    emergency_contact_name = Column(String(200), nullable=False)
    emergency_contact_number = Column(String(20), nullable=False)

    # Family members, JSON array
    family_members_json = Column(Text, nullable=False, default="[]")

    # Documents (StoredFile ids)
    photo_file_id = Column(String(36), nullable=False)
    signature_file_id = Column(String(36), nullable=False)
    hindi_name_file_id = Column(String(36), nullable=True)
    hindi_designation_file_id = Column(String(36), nullable=True)

    # Workflow
    status = Column(String(20), nullable=False, default=STATUS_PENDING, index=True)
    remark = Column(Text, nullable=True)
    card_number = Column(Integer, nullable=True, unique=True)

    # Metadata
    application_date = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "applicant_type": self.applicant_type,
            "employee_name": self.employee_name,
            "designation": self.designation,
            "employee_no": self.employee_no,
            "ruid_no": self.ruid_no,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "department": self.department,
            "station": self.station,
            "bill_unit": self.bill_unit,
            "residential_address": self.residential_address,
            "rly_contact_number": self.rly_contact_number,
            "mobile_number": self.mobile_number,
            "reason_for_application": self.reason_for_application,
            "emergency_contact_name": self.emergency_contact_name,
            "emergency_contact_number": self.emergency_contact_number,
            "family_members_json": self.family_members_json,
            "photo_file_id": self.photo_file_id,
            "signature_file_id": self.signature_file_id,
            "hindi_name_file_id": self.hindi_name_file_id,
            "hindi_designation_file_id": self.hindi_designation_file_id,
            "status": self.status,
            "remark": self.remark,
            "card_number": self.card_number,
            "application_date": self.application_date.isoformat() if self.application_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def get_next_card_number(db):
    max_number = db.query(func.max(Application.card_number)).scalar()
    return (max_number or 0) + 1
