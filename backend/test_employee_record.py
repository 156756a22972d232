# backend/test_employee_record.py
import json
from datetime import date

from models.employee_record import to_canonical


class TestFieldPrecedence:
    """to_canonical picks the first non-empty raw key"""

    def test_snake_case_wins_over_camel_case(self):
        record = to_canonical({"employee_name": "Snake", "employeeName": "Camel"})
        assert record.name == "Snake"

    def test_legacy_keys(self):
        record = to_canonical({"empName": "Legacy", "empNo": "123", "emergencyPhone": "9000000000"})
        assert record.name == "Legacy"
        assert record.employee_no == "123"
        assert record.emergency_contact_number == "9000000000"

    def test_blank_values_are_skipped(self):
        record = to_canonical({"employee_name": "   ", "employeeName": "Camel"})
        assert record.name == "Camel"

    def test_residential_address_never_falls_back_to_station(self):
        assert to_canonical({"residentialAddress": "New", "address": "Old"}).residential_address == "New"
        assert to_canonical({"address": "Old", "station": "BBS"}).residential_address == "Old"
        assert to_canonical({"station": "BBS"}).residential_address == ""

    def test_dates_become_iso_text(self):
        record = to_canonical({"date_of_birth": date(1985, 3, 12)})
        assert record.date_of_birth == "1985-03-12"

    def test_card_number(self):
        assert to_canonical({"card_number": "7"}).card_number == 7
        assert to_canonical({"cardNumber": 3}).card_number == 3
        assert to_canonical({"card_number": "abc"}).card_number is None
        assert to_canonical({}).card_number is None


class TestStatus:

    def test_default_is_pending_with_actions(self):
        record = to_canonical({})
        assert record.status == "pending"
        assert record.available_actions == ["approve", "reject"]

    def test_status_is_lower_cased(self):
        record = to_canonical({"status": "Approved"})
        assert record.status == "approved"
        assert record.available_actions == []
        assert record.to_api()["actions"] == []


class TestDocuments:

    def test_url_from_file_id(self):
        record = to_canonical({"photo_file_id": "abc"}, file_url_prefix="/files")
        assert record.photo_url == "/files/abc"
        assert record.signature_url == ""

    def test_explicit_url_wins(self):
        record = to_canonical({"photoFileId": "abc", "photoUrl": "https://cdn.example.org/p.png"})
        assert record.photo_url == "https://cdn.example.org/p.png"


class TestFamily:

    def test_members_from_json_text(self):
        raw = {"family_members_json": json.dumps([
            {"name": "Sita", "relation": "Wife", "dob": "1988-06-21", "bloodGroup": "B+"},
        ])}
        members = to_canonical(raw).family_members
        assert len(members) == 1
        assert members[0].relationship == "Wife"
        assert members[0].date_of_birth == "1988-06-21"
        assert members[0].blood_group == "B+"

    def test_list_wins_over_json(self):
        raw = {
            "familyMembers": [{"name": "From list", "relationship": "Son"}],
            "familyMembersJson": json.dumps([{"name": "From json"}]),
        }
        assert [m.name for m in to_canonical(raw).family_members] == ["From list"]

    def test_invalid_json_gives_empty_list(self):
        assert to_canonical({"familyMembersJson": "[{broken"}).family_members == []
        assert to_canonical({"familyMembersJson": "{}"}).family_members == []

    def test_blood_group_prefers_self(self):
        raw = {"familyMembers": [
            {"name": "Sita", "relationship": "Wife", "bloodGroup": "B+"},
            {"name": "Ramesh", "relationship": "SELF", "bloodGroup": "O+"},
        ]}
        assert to_canonical(raw).blood_group == "O+"

    def test_blood_group_falls_back_to_first_member(self):
        raw = {"familyMembers": [{"name": "Sita", "relationship": "Wife", "bloodGroup": "B+"}]}
        assert to_canonical(raw).blood_group == "B+"
        assert to_canonical({}).blood_group == ""

    def test_emergency_contact_fallback(self):
        raw = {
            "employeeName": "Ramesh",
            "mobileNumber": "9876543210",
            "familyMembers": [
                {"name": "Ramesh", "relationship": "Self"},
                {"name": "Sita", "relationship": "Wife"},
            ],
        }
        assert to_canonical(raw).emergency_contact == ("Sita", "9876543210")

        raw["emergencyContactName"] = "Mohan"
        raw["emergencyContactNumber"] = "9123456780"
        assert to_canonical(raw).emergency_contact == ("Mohan", "9123456780")

        assert to_canonical({"employeeName": "Ramesh"}).emergency_contact == ("Ramesh", "")


class TestIdentity:

    def test_gazetted_uses_ruid(self):
        record = to_canonical({"applicantType": "gazetted", "ruidNo": "RU42", "employeeNo": "E1"})
        assert record.is_gazetted
        assert record.id_number == "RU42"

    def test_non_gazetted_uses_employee_number(self):
        record = to_canonical({"applicant_type": "non-gazetted", "employee_no": "E1"})
        assert not record.is_gazetted
        assert record.id_number == "E1"

    def test_api_shape(self):
        api = to_canonical({
            "id": "a1",
            "employee_name": "Ramesh",
            "familyMembers": [{"name": "Sita", "relationship": "Wife", "dob": "1988-06-21"}],
        }).to_api()
        assert api["id"] == "a1"
        assert api["employeeName"] == "Ramesh"
        assert api["familyMembers"][0]["dob"] == "1988-06-21"
        assert api["actions"] == ["approve", "reject"]
