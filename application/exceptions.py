"""
Application-layer exceptions.

These exceptions are used across application and infrastructure layers.
Every failure of a structural operation is raised before the enclosing
transaction commits, so none of them leave a partial write behind.
The API layer maps each class to an HTTP status in backend.main.
"""

from typing import Any, Dict, Optional


class ProgramStructureError(Exception):
    """Base class for program structure and progression errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for an API response body."""
        return {"detail": self.message, "error": type(self).__name__}


class UnauthorizedError(ProgramStructureError):
    """Actor lacks the role or ownership required for the operation."""

    status_code = 403

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(ProgramStructureError):
    """A referenced id does not resolve to a stored record."""

    status_code = 404

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = str(resource_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "resource": self.resource,
            "id": self.resource_id,
        }


class CapacityExceededError(ProgramStructureError):
    """Adding a node would exceed the parent's capacity."""

    status_code = 409

    def __init__(self, resource: str, current: int, limit: int):
        super().__init__(
            f"Cannot add {resource}: {current} of {limit} already present"
        )
        self.resource = resource
        self.current = current
        self.limit = limit

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "resource": self.resource,
            "current": self.current,
            "limit": self.limit,
        }


class BelowCurrentCountError(ProgramStructureError):
    """Requested capacity is lower than the number of existing weeks."""

    status_code = 409

    def __init__(self, requested: int, current: int):
        super().__init__(
            f"total_weeks ({requested}) cannot be lower than the "
            f"current number of weeks ({current})"
        )
        self.requested = requested
        self.current = current

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "requested": self.requested,
            "current": self.current,
        }


class StructuralMismatchError(ProgramStructureError):
    """A child reference does not belong to the addressed parent."""

    status_code = 409


class InvalidAssignmentError(ProgramStructureError):
    """Exercise assignment parameters violate the assignment schema."""

    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class InvalidInputError(ProgramStructureError):
    """Request input is outside the accepted domain."""

    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class DuplicateLogError(ProgramStructureError):
    """A rest day was already logged for this day and date."""

    status_code = 409

    def __init__(self, message: str, log_id: Optional[str] = None):
        super().__init__(message)
        self.log_id = log_id

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "log_id": self.log_id}


class TreeWriteError(ProgramStructureError):
    """Error while committing a structural change set.

    Raised when the atomic write of a change set fails. This could be due
    to database errors, constraint violations, or RPC failures. Nothing
    from the change set is persisted. Callers may retry.
    """

    status_code = 503
