"""Error taxonomy shared by every API module.

Every rejected façade call surfaces exactly one :class:`ApiError` whose
message reads ``"<context>: <detail>"``. Raw transport exceptions (httpx)
never leave the module boundary; they are classified by
:func:`adapters.error_normalizer.normalize` and re-raised as an ``ApiError``.

Kinds
-----
validation  bad input, no I/O attempted
not_found   valid request, empty result (or HTTP 404)
server      a response arrived with a non-2xx status
network     request sent, no response (timeout, connection lost)
unknown     anything else (e.g. the request could not be built)
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ValidationError


class ErrorKind(str, Enum):
    """Failure categories exposed to callers."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    SERVER = "server"
    NETWORK = "network"
    UNKNOWN = "unknown"


class ApiError(Exception):
    """Normalized failure of a façade operation."""

    def __init__(
        self,
        context: str,
        kind: ErrorKind,
        detail: str,
        *,
        status_code: int | None = None,
    ) -> None:
        self.context = context
        self.kind = kind
        self.detail = detail
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return f"{self.context}: {self.detail}"

    def __repr__(self) -> str:
        return f"ApiError(kind={self.kind.value!r}, message={self.message!r})"


def validation_error(context: str, detail: str) -> ApiError:
    return ApiError(context, ErrorKind.VALIDATION, detail)


def not_found(context: str, label: str) -> ApiError:
    return ApiError(context, ErrorKind.NOT_FOUND, f"{label.capitalize()} not found")


def is_positive_id(value: Any) -> bool:
    # bool is an int subclass; True must not pass as id 1.
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def require_positive_id(value: Any, context: str, name: str = "ID") -> int:
    """Return *value* when it is a positive integer, else raise a validation error."""

    if not is_positive_id(value):
        raise validation_error(context, f"Valid {name} is required")
    return value


def describe_validation_error(exc: ValidationError) -> str:
    """Collapse a pydantic error into one short human sentence."""

    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "__root__")
        kind = err.get("type", "")
        if kind == "missing" or kind == "string_too_short":
            return f"{loc} is required" if loc else "Required field missing"
        message = str(err.get("msg", "invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        return f"{loc}: {message}" if loc else message
    return "Invalid payload"
