"""Triage error taxonomy.

All errors are local validation failures: they are reported to the caller and
never retried. Store failures (SQLAlchemy ``OperationalError``) are not wrapped
here; they propagate unchanged.
"""

import enum
from typing import Any, Optional, Type, TypeVar

from litestar.exceptions import HTTPException
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

E = TypeVar("E", bound=enum.Enum)


class TriageError(HTTPException):
    """Base class for errors surfaced to triage callers."""

    status_code = HTTP_400_BAD_REQUEST
    error = "triage_error"


class FeedbackNotFound(TriageError):
    """Referenced feedback item does not exist."""

    status_code = HTTP_404_NOT_FOUND
    error = "not_found"

    def __init__(self, item_id: Any) -> None:
        self.item_id = item_id
        super().__init__(detail=f"Feedback item {item_id} not found")


class InvalidStatus(TriageError):
    """Disposition outside of escalate/backlog/duplicate/noise."""

    error = "invalid_status"


class InvalidInput(TriageError):
    """Malformed request payload."""

    error = "invalid_input"


def parse_choice(
    enum_cls: Type[E],
    value: Any,
    field: str,
    error_cls: Type[TriageError] = InvalidInput,
) -> Optional[E]:
    """
    Convert a raw value into a member of ``enum_cls``.

    ``None`` passes through. Anything that is not one of the enum's values raises
    ``error_cls`` listing the accepted values.
    """
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise error_cls(detail=f"Invalid {field} {value!r}; expected one of: {allowed}")
