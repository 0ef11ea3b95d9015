"""Service-level exceptions and their HTTP status mapping.

Routes and services raise these; the exception handler registered in
`survey_service.main` turns them into `{"error": message}` JSON responses.
"""


class ServiceError(Exception):
    """Base class for errors reported to API callers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Raised when request input or a submitted answer is rejected."""

    status_code = 400


class NotActiveError(ServiceError):
    """Raised when a survey is not accepting responses."""

    status_code = 400

    def __init__(self, message: str = "Survey is not active"):
        super().__init__(message)


class ConflictError(ServiceError):
    """Raised when a unique resource already exists (e.g. email taken)."""

    status_code = 400


class AuthError(ServiceError):
    """Raised when a bearer credential is missing, invalid or expired."""

    status_code = 401


class NotFoundError(ServiceError):
    """Raised when a resource is absent or not owned by the caller."""

    status_code = 404


class InternalError(ServiceError):
    """Raised for storage or other unexpected failures."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
