"""
Typed failures raised by the connection manager, validators and services.

Each error carries the HTTP status it maps to and a message that is safe to
return to callers. Internal details (driver messages, tracebacks) stay in the
logs and never reach the response envelope.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from fastapi import status


@dataclass(frozen=True)
class FieldViolation:
    """One broken constraint on one field."""

    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class DevEventsError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def details(self) -> Optional[list[dict[str, Any]]]:
        return None


class DatabaseConnectionError(DevEventsError):
    """Backing store is misconfigured or unreachable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database unavailable"


class FieldValidationError(DevEventsError):
    """One or more fields violate their declared constraints."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    def __init__(self, violations: list[FieldViolation], message: Optional[str] = None):
        self.violations = list(violations)
        super().__init__(message)

    def details(self) -> list[dict[str, Any]]:
        return [v.as_dict() for v in self.violations]

    @property
    def fields(self) -> set[str]:
        return {v.field for v in self.violations}

    @classmethod
    def from_pydantic(cls, errors: Sequence[Mapping[str, Any]]) -> "FieldValidationError":
        """Build from pydantic's ``errors()`` list, dropping the request-body prefix."""
        violations = []
        for error in errors:
            loc = [str(part) for part in error.get("loc", ()) if part != "body"]
            violations.append(FieldViolation(".".join(loc) or "body", error.get("msg", "Invalid value")))
        return cls(violations)


class ReferentialIntegrityError(DevEventsError):
    """A reference field points at a record that does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Referenced record does not exist"


class ConflictError(DevEventsError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Record already exists"


class NotFoundError(DevEventsError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Record not found"


class UnexpectedError(DevEventsError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Unexpected server error"
