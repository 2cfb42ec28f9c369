class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when credentials are invalid or no credential was supplied."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a valid principal lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
