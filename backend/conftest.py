# backend/conftest.py
"""
Shared fixtures: in-memory database, temporary document storage, sample
applications and images.
"""

import io
import json

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core import config
from database import Base, get_db, init_db
from main import app
from models.application_form import (
    HINDI_DESIGNATION_FIELD,
    HINDI_NAME_FIELD,
    PHOTO_FIELD,
    SIGNATURE_FIELD,
    DocumentUpload,
)

DATE_OF_BIRTH = "1985-03-12"

FAMILY = [
    {"name": "Sita Devi", "relationship": "Wife", "dob": "1988-06-21", "bloodGroup": "B+", "identificationMarks": ""},
    {"name": "Ramesh Kumar", "relationship": "Self", "dob": DATE_OF_BIRTH, "bloodGroup": "O+", "identificationMarks": "Mole on left cheek"},
]


def make_png(color="red", size=(60, 80)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def storage(tmp_path, monkeypatch):
    """Documents go to a temporary directory; static card artwork is absent"""
    upload_dir = tmp_path / "uploads"
    monkeypatch.setattr(config, "UPLOAD_DIR", upload_dir)
    monkeypatch.setattr(config, "LOGO_PATH", tmp_path / "logo.png")
    monkeypatch.setattr(config, "AUTHORITY_SIGNATURE_PATH", tmp_path / "authority_signature.png")
    monkeypatch.setattr(config, "QR_MODE", "internal")
    return upload_dir


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def application_fields():
    """Factory of valid form fields (non-gazetted unless overridden)"""
    def factory(**overrides):
        fields = {
            "applicantType": "non-gazetted",
            "employeeName": "Ramesh Kumar",
            "designation": "Senior Clerk",
            "employeeNo": "50212345678",
            "dateOfBirth": DATE_OF_BIRTH,
            "department": "COMMERCIAL",
            "station": "Bhubaneswar",
            "billUnit": "3101001",
            "residentialAddress": "Qr No. 12/B, Railway Colony, Mancheswar, Bhubaneswar",
            "rlyContactNumber": "022-1234",
            "mobileNumber": "9876543210",
            "reasonForApplication": "New card",
            "emergencyContactName": "Sita Devi",
            "emergencyContactNumber": "9123456780",
            "familyMembersJson": json.dumps(FAMILY),
        }
        fields.update(overrides)
        return fields
    return factory


@pytest.fixture
def documents(png_bytes):
    """Factory of uploaded documents; hindi=True adds the Hindi images"""
    def factory(hindi=False):
        docs = {
            PHOTO_FIELD: DocumentUpload("photo.png", "image/png", png_bytes),
            SIGNATURE_FIELD: DocumentUpload("signature.png", "image/png", make_png("blue", (120, 40))),
        }
        if hindi:
            docs[HINDI_NAME_FIELD] = DocumentUpload("hindi_name.png", "image/png", make_png("green", (120, 30)))
            docs[HINDI_DESIGNATION_FIELD] = DocumentUpload("hindi_desig.png", "image/png", make_png("green", (120, 30)))
        return docs
    return factory
