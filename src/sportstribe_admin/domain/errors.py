"""Classified failures raised by resource gateways.

Callers branch on ``kind`` (or on the subclass) and show ``message``.
The ``diagnostic`` keeps the backend's own wording for logs only.
"""

from enum import StrEnum


class ResourceErrorKind(StrEnum):
    """Stable taxonomy for backend failures."""

    RESOURCE_MISSING = "resource_missing"
    PERMISSION_DENIED = "permission_denied"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


class ResourceError(Exception):
    """Base class for classified gateway failures."""

    kind: ResourceErrorKind = ResourceErrorKind.UNKNOWN

    def __init__(self, message: str, entity: str, diagnostic: str | None = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.diagnostic = diagnostic

    def to_dict(self) -> dict[str, str]:
        """Return the caller-safe representation of the error."""
        return {"error": str(self.kind), "message": self.message}


class ResourceMissingError(ResourceError):
    """The table or schema backing an entity is not provisioned."""

    kind = ResourceErrorKind.RESOURCE_MISSING


class PermissionDeniedError(ResourceError):
    """A row-level or grant policy rejected the operation."""

    kind = ResourceErrorKind.PERMISSION_DENIED


class ResourceValidationError(ResourceError):
    """The input was malformed or conflicted with a data constraint."""

    kind = ResourceErrorKind.VALIDATION


class UnknownResourceError(ResourceError):
    """Any failure that does not fit the other kinds."""

    kind = ResourceErrorKind.UNKNOWN
