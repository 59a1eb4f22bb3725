"""
Application error hierarchy.

Every error raised by the positioning core, the realtime dispatcher and the
services derives from ``NoteboardError``. HTTP routes render them through the
handler registered in ``main``; the realtime dispatcher logs and drops them.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Error categories."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PERMISSION = "permission"
    PROTOCOL = "protocol"
    STORAGE = "storage"


_HTTP_STATUS = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.CONFLICT: 409,
    ErrorCategory.PERMISSION: 403,
    ErrorCategory.PROTOCOL: 400,
    ErrorCategory.STORAGE: 500,
}


class NoteboardError(Exception):
    """Base class for application errors."""

    code: str = "ERROR"
    category: ErrorCategory = ErrorCategory.STORAGE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    @property
    def http_status_code(self) -> int:
        return _HTTP_STATUS.get(self.category, 500)

    def to_dict(self) -> Dict[str, Any]:
        result = {"error": self.code, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(NoteboardError):
    """Missing or malformed input."""

    code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class InvalidOrderError(ValidationError):
    """Requested order index outside ``[0, count-1]``."""

    code = "INVALID_ORDER"

    def __init__(self, order: int, count: int):
        super().__init__(f"Order {order} is outside [0, {count - 1}]", field="order")
        self.order = order
        self.count = count


class NotFoundError(NoteboardError):
    """Resource absent."""

    code = "NOT_FOUND"
    category = ErrorCategory.NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            {"resource_type": resource_type, "resource_id": str(resource_id)},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(NoteboardError):
    """Caller does not own the resource it tries to mutate."""

    code = "FORBIDDEN"
    category = ErrorCategory.PERMISSION

    def __init__(self, message: str = "Not allowed to modify this resource"):
        super().__init__(message)


class ConflictError(NoteboardError):
    """Uniqueness clash, e.g. duplicate tag code."""

    code = "CONFLICT"
    category = ErrorCategory.CONFLICT


class StorageError(NoteboardError):
    """Persistence failure; the transaction has been rolled back."""

    code = "STORAGE_ERROR"
    category = ErrorCategory.STORAGE

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ProtocolError(NoteboardError):
    """Unparseable realtime frame or unknown message type."""

    code = "PROTOCOL_ERROR"
    category = ErrorCategory.PROTOCOL
