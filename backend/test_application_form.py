# backend/test_application_form.py
import json
from datetime import date

import pytest

from core import config
from core.errors import ApplicationValidationError
from models.application import APPLICANT_GAZETTED
from models.application_form import (
    HINDI_DESIGNATION_FIELD,
    HINDI_NAME_FIELD,
    PHOTO_FIELD,
    DocumentUpload,
    parse_application_form,
    validate_documents,
    validate_status_update,
)


class TestApplicationForm:

    def test_valid_submission(self, application_fields):
        form = parse_application_form(application_fields(department="commercial"))
        assert form.employee_name == "Ramesh Kumar"
        assert form.date_of_birth == date(1985, 3, 12)
        assert form.department == "COMMERCIAL"
        assert len(form.family_members) == 2
        assert json.loads(form.family_members_json())[1]["bloodGroup"] == "O+"

    def test_non_gazetted_requires_employee_number(self, application_fields):
        with pytest.raises(ApplicationValidationError) as exc:
            parse_application_form(application_fields(employeeNo="  "))
        assert "Employee No is required" in str(exc.value)

    def test_gazetted_requires_ruid(self, application_fields):
        with pytest.raises(ApplicationValidationError) as exc:
            parse_application_form(application_fields(applicantType="gazetted"))
        assert "RUID No is required" in str(exc.value)

    def test_applicant_type_matches_stored_values(self, application_fields):
        form = parse_application_form(application_fields(applicantType=APPLICANT_GAZETTED, ruidNo="RU42"))
        assert form.applicant_type == APPLICANT_GAZETTED
        with pytest.raises(ApplicationValidationError):
            parse_application_form(application_fields(applicantType="contractor"))

    @pytest.mark.parametrize("mobile", ["12345", "5876543210", "98765432101", "98765abcde"])
    def test_malformed_mobile_number(self, application_fields, mobile):
        with pytest.raises(ApplicationValidationError) as exc:
            parse_application_form(application_fields(mobileNumber=mobile))
        assert any("mobile" in error.lower() for error in exc.value.errors)

    def test_unknown_department(self, application_fields):
        with pytest.raises(ApplicationValidationError):
            parse_application_form(application_fields(department="ASTRONOMY"))

    def test_family_member_needs_relationship(self, application_fields):
        members = json.dumps([{"name": "Sita", "relationship": "", "dob": "1988-06-21"}])
        with pytest.raises(ApplicationValidationError):
            parse_application_form(application_fields(familyMembersJson=members))

    def test_family_members_json_must_be_valid(self, application_fields):
        with pytest.raises(ApplicationValidationError) as exc:
            parse_application_form(application_fields(familyMembersJson="{not json"))
        assert "familyMembersJson" in str(exc.value)


class TestDocuments:

    def test_non_gazetted_complete(self, documents):
        assert validate_documents("non-gazetted", documents()) == []

    def test_photo_is_required(self, documents):
        docs = documents()
        docs.pop(PHOTO_FIELD)
        assert validate_documents("non-gazetted", docs) == ["Photo file is required."]

    def test_gazetted_needs_both_hindi_documents(self, documents):
        errors = validate_documents("gazetted", documents())
        assert len(errors) == 2
        assert any("Hindi name" in error for error in errors)
        assert any("Hindi designation" in error for error in errors)
        assert validate_documents("gazetted", documents(hindi=True)) == []

    def test_only_one_hindi_document(self, documents):
        docs = documents(hindi=True)
        docs[HINDI_DESIGNATION_FIELD] = None
        errors = validate_documents("gazetted", docs)
        assert errors == ["Hindi designation file is required for Gazetted applicants."]

    def test_content_type(self, documents):
        docs = documents()
        docs[PHOTO_FIELD] = DocumentUpload("photo.pdf", "application/pdf", b"%PDF-1.4")
        errors = validate_documents("non-gazetted", docs)
        assert errors == ["Photo: only JPEG and PNG images are accepted."]

    def test_size_limit(self, documents, monkeypatch):
        monkeypatch.setattr(config, "MAX_UPLOAD_SIZE", 10)
        docs = {HINDI_NAME_FIELD: DocumentUpload("x.png", "image/png", b"x" * 11)}
        errors = validate_documents("non-gazetted", {**documents(), **docs})
        assert any("Hindi name: file exceeds" in error for error in errors)


class TestStatusUpdate:

    def test_approve(self):
        assert validate_status_update("approved") == ("Approved", None)
        assert validate_status_update("Approved", "  ok ") == ("Approved", "ok")

    def test_reject_with_remark(self):
        assert validate_status_update("rejected", " incomplete documents ") == ("Rejected", "incomplete documents")

    @pytest.mark.parametrize("remark", [None, "", "   ", "\n\t"])
    def test_reject_requires_remark(self, remark):
        with pytest.raises(ApplicationValidationError) as exc:
            validate_status_update("rejected", remark)
        assert exc.value.errors == ["Please provide rejection remarks"]

    def test_unknown_status(self):
        with pytest.raises(ApplicationValidationError):
            validate_status_update("pending")
