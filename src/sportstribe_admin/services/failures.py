"""Classification of backing-store failures into the resource error taxonomy."""

from dataclasses import dataclass
from typing import Any

from sportstribe_admin.domain.errors import (
    PermissionDeniedError,
    ResourceError,
    ResourceMissingError,
    ResourceValidationError,
    UnknownResourceError,
)
from sportstribe_admin.services.registry import EntityDescriptor

# PostgreSQL SQLSTATE codes and PostgREST error codes.
_MISSING_CODES = frozenset({"42P01", "3F000", "PGRST204", "PGRST205"})
_DENIED_CODES = frozenset({"42501", "PGRST301", "PGRST302"})
_VALIDATION_CODES = frozenset({"PGRST102"})
_VALIDATION_CLASSES = ("22", "23")
_DENIED_STATUSES = frozenset({401, 403})
_VALIDATION_STATUSES = frozenset({409, 422})


class StoreFailure(Exception):
    """Neutral shape of a failure reported by the backing store."""

    def __init__(  # noqa: PLR0913
        self,
        message: str,
        code: str | None = None,
        details: str | None = None,
        hint: str | None = None,
        status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
        self.status = status


@dataclass(frozen=True)
class _Signal:
    code: str | None
    status: int | None
    diagnostic: str


def classify_failure(
    error: Exception, descriptor: EntityDescriptor[Any], action: str
) -> ResourceError:
    """Map a backend failure to exactly one classified resource error."""
    signal = _signal(error)
    subject = descriptor.title.lower()
    code = signal.code or ""

    if code in _MISSING_CODES:
        return ResourceMissingError(
            f"{descriptor.title} table does not exist.",
            entity=descriptor.name,
            diagnostic=signal.diagnostic,
        )
    if code in _DENIED_CODES or (not code and signal.status in _DENIED_STATUSES):
        return PermissionDeniedError(
            f"Permission denied: cannot {action} {subject}.",
            entity=descriptor.name,
            diagnostic=signal.diagnostic,
        )
    if (
        code in _VALIDATION_CODES
        or (len(code) == 5 and code.startswith(_VALIDATION_CLASSES))
        or (not code and signal.status in _VALIDATION_STATUSES)
    ):
        return ResourceValidationError(
            _validation_message(code, descriptor),
            entity=descriptor.name,
            diagnostic=signal.diagnostic,
        )
    return UnknownResourceError(
        f"Failed to {action} {subject}.",
        entity=descriptor.name,
        diagnostic=signal.diagnostic,
    )


def _signal(error: Exception) -> _Signal:
    if isinstance(error, StoreFailure):
        parts = [f"[{error.code}]" if error.code else "", error.message]
        if error.details:
            parts.append(f"details={error.details}")
        if error.hint:
            parts.append(f"hint={error.hint}")
        return _Signal(
            code=error.code,
            status=error.status,
            diagnostic=" ".join(part for part in parts if part),
        )
    return _Signal(
        code=None,
        status=None,
        diagnostic=f"{type(error).__name__}: {error}",
    )


def _validation_message(code: str, descriptor: EntityDescriptor[Any]) -> str:
    if code == "23505":
        return f"A {descriptor.label} with these values already exists."
    if code == "23502":
        return f"A required {descriptor.label} field is missing."
    if code == "23503":
        return f"The {descriptor.label} references a record that does not exist."
    return f"Invalid {descriptor.label} data."
