"""Application error hierarchy.

Every error carries a stable ``error_code`` that clients can branch on and the
HTTP status it maps to. Handlers in ``recipe_organizer.main`` turn these into
``{"detail": ..., "error": ...}`` responses.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base application exception"""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationFailed(AppError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class Unauthenticated(AppError):
    status_code = 401
    error_code = "UNAUTHENTICATED"


class Forbidden(AppError):
    status_code = 403
    error_code = "FORBIDDEN"


class NotFound(AppError):
    status_code = 404
    error_code = "NOT_FOUND"


class Conflict(AppError):
    status_code = 409
    error_code = "CONFLICT"


class ServiceUnavailable(AppError):
    status_code = 503
    error_code = "SERVICE_UNAVAILABLE"


# =============================================================================
# Family group errors
# =============================================================================

class SoleAdminViolation(ValidationFailed):
    """Mutation would leave a family group without an active admin"""

    error_code = "SOLE_ADMIN_REQUIRED"

    def __init__(self, message: str, group_id: Optional[str] = None, user_id: Optional[str] = None):
        super().__init__(message, {"group_id": group_id, "user_id": user_id})


class AlreadyMember(Conflict):
    error_code = "ALREADY_MEMBER"

    def __init__(self, message: str, group_id: Optional[str] = None, user_id: Optional[str] = None):
        super().__init__(message, {"group_id": group_id, "user_id": user_id})


class AdminGroupExists(Conflict):
    error_code = "ADMIN_GROUP_EXISTS"


class ConcurrentModification(Conflict):
    """The stored document changed between load and save"""

    error_code = "CONCURRENT_MODIFICATION"

    def __init__(self, message: str, group_id: Optional[str] = None, expected_version: Optional[int] = None):
        super().__init__(message, {"group_id": group_id, "expected_version": expected_version})


class InviteCodeUnavailable(ServiceUnavailable):
    error_code = "INVITE_CODE_UNAVAILABLE"

    def __init__(self, message: str, attempts: Optional[int] = None):
        super().__init__(message, {"attempts": attempts})
