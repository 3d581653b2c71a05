# --- medtrack/utils/errors.py ---
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_INVALID = "token_invalid"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.TOKEN_EXPIRED: 401,
    ErrorKind.TOKEN_INVALID: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class Failure:
    """A classified error returned (not raised) by services and gates."""
    kind: ErrorKind
    message: str
    errors: Optional[List[dict]] = None

    @property
    def status(self) -> int:
        return STATUS_BY_KIND[self.kind]


def invalid(message, errors=None):
    return Failure(ErrorKind.VALIDATION, message, errors)


def unauthenticated(message):
    return Failure(ErrorKind.UNAUTHENTICATED, message)


def forbidden(message="Access denied. Insufficient permissions"):
    return Failure(ErrorKind.FORBIDDEN, message)


def not_found(message):
    return Failure(ErrorKind.NOT_FOUND, message)


def internal(message="Internal Server Error"):
    return Failure(ErrorKind.INTERNAL, message)


def from_validation_error(exc) -> Failure:
    """Flatten a pydantic ValidationError into field/message pairs."""
    details = []
    for e in exc.errors():
        field = ".".join(str(p) for p in e.get("loc", ())) or "body"
        if e.get("type") == "value_error" and e.get("ctx", {}).get("error") is not None:
            message = str(e["ctx"]["error"])
        else:
            message = e.get("msg", "Invalid value")
        details.append({"field": field, "message": message})
    return invalid("Validation error", details)
