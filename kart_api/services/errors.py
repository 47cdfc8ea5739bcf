"""Service-level exceptions mapped to HTTP responses by the API layer."""


class ServiceError(Exception):
    """Base class for expected failures raised by service functions."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ServiceError):
    """Raised when request fields are missing or malformed."""

    status_code = 400


class NotLinkedError(ServiceError):
    """Raised when a category is not linked to the given restaurant."""

    status_code = 400


class ConflictError(ServiceError):
    """Raised when a precondition on existing state does not hold."""

    status_code = 400


class IncorrectOtpError(ServiceError):
    """Raised when a submitted OTP does not match the stored one."""

    status_code = 400


class NotFoundError(ServiceError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class StaleOrderError(NotFoundError):
    """Raised when an order changed since the caller last read it."""


class InternalFailureError(ServiceError):
    """Raised when the store or an external gateway fails."""

    status_code = 500


class UnauthorizedError(ServiceError):
    """Raised when a bearer token is missing, invalid or expired."""

    status_code = 401
