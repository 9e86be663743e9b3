"""Typed errors raised by the services and rendered by the API layer.

Every error carries a human readable ``message``, a machine ``code`` and the
HTTP ``status_code`` the API responds with. Services raise them; the handler
registered in ``portal.main`` turns them into
``{"success": false, "error": ..., "code": ...}`` responses.
"""


class PortalError(Exception):
    status_code = 400
    code = "ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortalError):
    """Malformed input. Raised before any storage access."""

    status_code = 400
    code = "VALIDATION_ERROR"


class InvalidStepError(ValidationError):
    code = "INVALID_STEP"


class ForbiddenError(PortalError):
    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(PortalError):
    status_code = 404
    code = "NOT_FOUND"


class NotPendingError(PortalError):
    status_code = 409
    code = "NOT_PENDING"


class StepMismatchError(PortalError):
    """The persisted review step moved on; the caller should refresh and retry."""

    status_code = 409
    code = "STEP_MISMATCH"


class NotDraftError(PortalError):
    status_code = 409
    code = "NOT_DRAFT"


class StorageError(PortalError):
    status_code = 503
    code = "STORAGE_ERROR"
