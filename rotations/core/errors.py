"""Domain errors raised by the service layer.

Every error is scoped to a single request. The API layer renders them as
``{"detail": ..., "error": <code>, "field": ...}`` with the status code
declared on the class; nothing here is retried automatically.
"""
from typing import Optional


class MarketplaceError(Exception):
    code = "marketplace_error"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        body = {"detail": self.message, "error": self.code}
        if self.field is not None:
            body["field"] = self.field
        return body


class ValidationError(MarketplaceError):
    """Malformed input; ``field`` names the offending attribute."""
    code = "validation_error"
    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message, field=field)


class NotFound(MarketplaceError):
    code = "not_found"
    status_code = 404


class PermissionDenied(MarketplaceError):
    code = "permission_denied"
    status_code = 403


class SeatUnavailable(MarketplaceError):
    code = "seat_unavailable"
    status_code = 409


class DuplicateApplication(MarketplaceError):
    code = "duplicate_application"
    status_code = 409


class ProgramInactive(MarketplaceError):
    code = "program_inactive"
    status_code = 409


class IllegalTransition(MarketplaceError):
    code = "illegal_transition"
    status_code = 409


class InvariantViolation(MarketplaceError):
    code = "invariant_violation"
    status_code = 409


class InvalidSectionPayload(MarketplaceError):
    code = "invalid_section_payload"
    status_code = 422
