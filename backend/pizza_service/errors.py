# Overview: Service error taxonomy shared by services and the HTTP error handler.

"""
Service errors.

Every service-layer failure raises a ServiceError subclass. The Flask error
handler registered in create_app() renders them as {"message": ...} with the
subclass status code, so routes never build error responses by hand.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(ServiceError):
    """400-level input problem. Raised before any side effect."""

    status_code = 400


class Unauthorized(ServiceError):
    """Missing, invalid, expired or revoked credential."""

    status_code = 401


class Forbidden(ServiceError):
    """Valid identity without the required role or ownership."""

    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    """409-level duplicate unique key (e.g., email already registered)."""

    status_code = 409


class OrderSubmissionFailed(ServiceError):
    """The pizza factory rejected an order."""

    status_code = 500

    def __init__(self, message: str, report_url: str | None = None):
        super().__init__(message)
        self.report_url = report_url

    def to_dict(self) -> dict:
        return {"message": self.message, "followLinkToEndChaos": self.report_url}
