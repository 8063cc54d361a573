"""
Workboard error types

Raised by the calculator and services, translated to JSON error envelopes
by the exception handlers registered in main.py.
"""
from typing import Any, Optional


class WorkboardError(Exception):
    """Base class for all workboard errors"""

    code = "WORKBOARD_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(WorkboardError):
    """Input violates an invariant (distribution sum/length, bad date range, ...)"""

    code = "VALIDATION_ERROR"


class NotFoundError(WorkboardError):
    """Referenced entry, task, user or project does not exist"""

    code = "NOT_FOUND"

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} '{identifier}' not found", details={"kind": kind, "id": identifier})
        self.kind = kind
        self.identifier = identifier
