"""Custom exception hierarchy for better error handling."""
from enum import Enum

from fastapi import HTTPException, status

from shared.utils.constants import USER_NOT_FOUND, USERNAME_EXISTS


class OtpAuthException(Exception):
    """Base exception for all application errors."""
    pass


class AuthErrorKind(str, Enum):
    """Classification of auth service failures used by the retry policy."""
    USER_NOT_FOUND = "user_not_found"
    USERNAME_EXISTS = "username_exists"
    OTHER = "other"


_KIND_BY_CODE = {
    USER_NOT_FOUND: AuthErrorKind.USER_NOT_FOUND,
    USERNAME_EXISTS: AuthErrorKind.USERNAME_EXISTS,
}


class AuthServiceError(OtpAuthException):
    """Raised when a call to the authentication service fails."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

    @property
    def kind(self) -> AuthErrorKind:
        return _KIND_BY_CODE.get(self.code, AuthErrorKind.OTHER)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=self.message
        )


class InvalidStateTransition(OtpAuthException):
    """Raised when an operation is not legal in the current flow state."""

    def __init__(self, operation: str, state: str):
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} in '{state}' state")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(self)
        )


class AuthNotConfiguredError(OtpAuthException):
    """Raised when the Cognito app client is not configured."""

    def __init__(self):
        super().__init__("Cognito app client ID is not configured")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication not configured"
        )
