# backend/test_summary_pdf.py
import re

from reportlab.platypus import Image as RLImage, PageBreak, Paragraph, Table

from conftest import FAMILY, make_png
from generator.card_layout import CardAssets
from generator.summary_pdf import build_summary_pdf, build_summary_story, summary_filename
from models.employee_record import to_canonical


def _record(**overrides):
    raw = {
        "id": "a1",
        "applicantType": "non-gazetted",
        "employeeName": "Ramesh Kumar",
        "designation": "Senior Clerk",
        "employeeNo": "50212345678",
        "dateOfBirth": "1985-03-12",
        "department": "COMMERCIAL",
        "station": "Bhubaneswar",
        "residentialAddress": "Qr No. 12/B <Railway Colony> & Sons",
        "status": "Rejected",
        "remark": "incomplete documents",
        "familyMembers": FAMILY,
    }
    raw.update(overrides)
    return to_canonical(raw)


def _pages(pdf: bytes) -> int:
    return len(re.findall(rb"/Type /Page\b", pdf))


def _texts(flowables):
    """Plain text of every paragraph, including those inside tables"""
    texts = []
    for flowable in flowables:
        if isinstance(flowable, Paragraph):
            texts.append(flowable.getPlainText())
        elif isinstance(flowable, Table):
            for row in flowable._cellvalues:
                texts.extend(_texts(row))
    return texts


def _rows(table: Table):
    return [[cell.getPlainText() for cell in row] for row in table._cellvalues]


def _tables(story):
    return [flowable for flowable in story if isinstance(flowable, Table)]


class TestStory:

    def test_cover_sheet_then_details(self):
        assets = CardAssets(photo=make_png(), signature=make_png("blue", (120, 40)))
        story = build_summary_story(_record(), assets)

        breaks = [index for index, flowable in enumerate(story) if isinstance(flowable, PageBreak)]
        assert len(breaks) == 1
        cover, details = story[:breaks[0]], story[breaks[0]:]

        cover_rows = dict((label, value) for label, value in _rows(_tables(cover)[0]))
        assert cover_rows["Application ID"] == "a1"
        assert cover_rows["Employee No."] == "50212345678"
        assert cover_rows["Status"] == "Rejected"

        images = _tables(cover)[1]._cellvalues[0]
        assert all(isinstance(image, RLImage) for image in images)

        assert "Applicant Details" in _texts(details)

    def test_details_keep_markup_characters(self):
        details = _tables(build_summary_story(_record()))[-2]
        rows = dict((label, value) for label, value in _rows(details))
        assert rows["Residential Address"] == "Qr No. 12/B <Railway Colony> & Sons"
        assert rows["Date of Birth"] == "12-03-1985"
        assert rows["Remark"] == "incomplete documents"
        assert "Card Serial No." not in rows

    def test_family_table(self):
        family = _tables(build_summary_story(_record()))[-1]
        rows = _rows(family)
        assert rows[0] == ["#", "Name", "Relationship", "Date of Birth", "Blood Group", "Identification Marks"]
        assert len(rows) == len(FAMILY) + 1
        assert rows[1][1:5] == ["Sita Devi", "Wife", "21-06-1988", "B+"]
        assert rows[2][5] == "Mole on left cheek"

    def test_without_family(self):
        story = build_summary_story(_record(familyMembers=[]))
        assert "No family member details provided" in _texts(story)

    def test_missing_and_broken_images(self):
        texts = _texts(build_summary_story(_record(), CardAssets(photo=b"broken")))
        assert "Photo not available" in texts
        assert "Signature not available" in texts

    def test_gazetted_includes_hindi_images(self):
        record = _record(applicantType="gazetted", ruidNo="RU42", status="Approved", remark="", cardNumber=4)
        assets = CardAssets(hindi_name=make_png("green", (120, 30)), hindi_designation=None)
        story = build_summary_story(record, assets)

        texts = _texts(story)
        assert "Name in Hindi" in texts
        assert "Hindi designation not available" in texts

        rows = dict((label, value) for label, value in _rows(_tables(story)[-2]))
        assert rows["RUID No."] == "RU42"
        assert rows["Card Serial No."] == "COMMERCIAL-4"
        assert "Remark" not in rows

    def test_non_gazetted_has_no_hindi_section(self):
        assert "Name in Hindi" not in _texts(build_summary_story(_record()))


class TestPdf:

    def test_cover_sheet_and_details(self):
        assets = CardAssets(photo=make_png(), signature=make_png("blue", (120, 40)))
        pdf = build_summary_pdf(_record(), assets)
        assert pdf.startswith(b"%PDF")
        assert _pages(pdf) >= 2

    def test_missing_and_broken_images(self):
        pdf = build_summary_pdf(_record(familyMembers=[]), CardAssets(photo=b"broken"))
        assert pdf.startswith(b"%PDF")
        assert _pages(pdf) >= 2


def test_filename():
    assert summary_filename(_record()) == "Ramesh_Kumar_Application.pdf"
    assert summary_filename(_record(employeeName="")) == "application_Application.pdf"
