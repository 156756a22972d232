# backend/core/errors.py
"""
Domain errors of the ID-card portal.

Routers translate them into HTTP responses; nothing here is fatal to the
process, every error is scoped to the single action that raised it.
"""

from typing import List, Optional


class PortalError(Exception):
    """Base class for portal errors"""


class ApplicationNotFoundError(PortalError):
    def __init__(self, application_id: str):
        super().__init__(f"Application {application_id} not found")
        self.application_id = application_id


class ApplicationValidationError(PortalError):
    """Submission or status-update data failed validation"""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class StatusTransitionError(PortalError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change status from {current} to {requested}")
        self.current = current
        self.requested = requested


class CardExportError(PortalError):
    """Rendering or PDF assembly of an ID card failed"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
