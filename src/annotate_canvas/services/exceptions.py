from typing import Optional


class InternalException(Exception):
    """
    Raised when an internal error occurs.

    This is raised by default to the frontend when
    an unexpected error occurs in the backend.
    """
    def __init__(self, message: str = "An internal error occurred."):
        super().__init__(message)


class DomainException(Exception):
    """Base class for domain-specific exceptions."""
    def __init__(self, message: str, log_message: Optional[str] = None):
        super().__init__(message)
        self.log_message = log_message  # In case devs want to include extra log info.


class AnnotationNotFoundError(DomainException):
    """Raised when an annotation id is not owned by the caller or does not exist."""

    pass


class AuthorizationError(DomainException):
    """Raised when the session token is missing, expired or rejected."""

    pass


class InvalidCredentialsError(DomainException):
    """Raised when login or registration is refused by the auth service."""

    pass


class RemoteServiceError(DomainException):
    """Raised when the annotation service can't be reached or answers with an error."""

    def __init__(
        self,
        message: str,
        log_message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, log_message)
        self.status_code = status_code


class InvalidAnnotationError(DomainException):
    """Raised when annotation data does not follow the annotation model."""

    pass
