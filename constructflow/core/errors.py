# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Domain errors, each carrying the HTTP status it maps to."""
from typing import Optional


class ServiceError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid request"


class MissingPayload(ValidationError):
    default_message = "Missing payload"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class BackendError(ServiceError):
    """The database call itself failed; ``detail`` carries the driver message."""
    status_code = 500
    default_message = "Database error"


class DeleteFailed(BackendError):
    default_message = "Delete failed"
