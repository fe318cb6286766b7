"""
Exception types raised by the API client and services.
"""


class ErrorCodes:
    """Error code constants."""

    NETWORK_ERROR = "NETWORK_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EMAIL_VERIFICATION_REQUIRED = "EMAIL_VERIFICATION_REQUIRED"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


class ApiError(Exception):
    """Base class for every failure surfaced by the client."""

    code = ErrorCodes.HTTP_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(ApiError):
    """No response was received (connection failure, timeout)."""

    code = ErrorCodes.NETWORK_ERROR


class ApiStatusError(ApiError):
    """
    The backend answered with an error status.

    Passed through to callers verbatim so they can handle page-specific
    cases such as a missing event.
    """

    def __init__(self, status_code: int, message: str, body: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body or {}


class MalformedResponseError(ApiError):
    """The backend answered 2xx but the body does not match the expected shape."""

    code = ErrorCodes.MALFORMED_RESPONSE


class AuthenticationError(ApiStatusError):
    """401 from an auth endpoint itself (wrong password, bad refresh token, ...)."""

    code = ErrorCodes.UNAUTHORIZED


class SessionExpiredError(ApiError):
    """Token refresh failed after a 401; the user must log in again."""

    code = ErrorCodes.SESSION_EXPIRED


class ValidationError(ApiError):
    """Client-side form validation failed."""

    code = ErrorCodes.VALIDATION_ERROR

    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(errors.values()))
        self.errors = errors


class EmailVerificationRequired(ApiError):
    """Signup is paused until the emailed verification code is submitted."""

    code = ErrorCodes.EMAIL_VERIFICATION_REQUIRED
