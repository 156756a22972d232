# backend/database.py
"""
Database connection setup (SQLAlchemy).
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import logging
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("idcard-portal.database")

# Database URL
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./idcard_portal.db")

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, echo=False, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency for FastAPI endpoints"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Creates all tables"""
    from models.application import Application  # noqa: F401
    from models.stored_file import StoredFile  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("✅ Tables created")
