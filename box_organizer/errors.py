"""Error taxonomy shared by services and the HTTP layer.

Services raise these exceptions; routes never catch them. The handlers
registered in ``box_organizer.main`` translate them into JSON responses
using ``status_code`` and ``code``.
"""
from typing import Optional


class AppError(Exception):
    """Base class for application errors."""

    status_code = 500
    code = "internal_error"
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


# ============================================================================
# Validation
# ============================================================================

class ValidationError(AppError):
    """Malformed or out-of-range input, detected before any data access."""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid input"

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["details"] = [{"field": self.field, "reason": self.reason}]
        return data


class EmptySegmentError(ValidationError):
    """A location name that sanitizes to an empty path segment."""

    def __init__(self, field: str = "name"):
        super().__init__(field, "name must contain at least one letter or digit")


# ============================================================================
# Not found
# ============================================================================

class NotFoundError(AppError):
    """Referenced entity does not exist or is outside the caller's workspace."""

    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class WorkspaceNotFoundError(NotFoundError):
    default_message = "Workspace not found"


class LocationNotFoundError(NotFoundError):
    default_message = "Location not found"


class ParentNotFoundError(NotFoundError):
    default_message = "Parent location not found"


class BoxNotFoundError(NotFoundError):
    default_message = "Box not found"


class QrCodeNotFoundError(NotFoundError):
    default_message = "QR code not found"


class WorkspaceMismatchError(NotFoundError):
    """A reference points at an entity owned by another workspace."""

    def __init__(self, resource: str):
        super().__init__(f"{resource} belongs to a different workspace")
        self.resource = resource


# ============================================================================
# Conflicts
# ============================================================================

class ConflictError(AppError):
    """A unique value is already taken."""

    status_code = 409
    code = "conflict"
    default_message = "Resource conflict"


class SiblingConflictError(ConflictError):
    default_message = "A location with this name already exists at this level"


class QrCodeAlreadyAssignedError(ConflictError):
    default_message = "QR code is already assigned to another box"


class IdentifierExhaustedError(ConflictError):
    default_message = "Could not generate a unique identifier"


# ============================================================================
# Hierarchy, authorization, internal
# ============================================================================

class DepthExceededError(AppError):
    """Location hierarchy deeper than the allowed maximum."""

    status_code = 400
    code = "depth_exceeded"

    def __init__(self, max_depth: int):
        super().__init__(f"Locations can be nested at most {max_depth} levels deep")
        self.max_depth = max_depth


class AuthorizationError(AppError):
    """Raised by the external authorization layer; passed through unchanged."""

    status_code = 403
    code = "forbidden"
    default_message = "Not a member of this workspace"


class InternalError(AppError):
    """Unexpected database failure."""
