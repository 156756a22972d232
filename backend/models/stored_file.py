# backend/models/stored_file.py
import uuid

from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base


class StoredFile(Base):
    """Uploaded applicant documents (photo, signature, Hindi images)"""

    __tablename__ = "stored_files"

    id = Column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)

    original_name = Column(String(255), nullable=True)
    content_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)
    path = Column(String(500), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
