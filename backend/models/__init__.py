# backend/models/__init__.py
from models.application import Application, get_next_card_number, STATUSES
from models.stored_file import StoredFile

__all__ = [
    "Application",
    "StoredFile",
    "get_next_card_number",
    "STATUSES",
]
