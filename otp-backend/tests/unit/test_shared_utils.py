"""Tests for the exception hierarchy and the filler password policy."""
import re

from auth.services.password_policy import generate_filler_password
from shared.utils.constants import USER_NOT_FOUND, USERNAME_EXISTS
from shared.utils.exceptions import (
    AuthErrorKind,
    AuthServiceError,
    InvalidStateTransition,
    OtpAuthException,
)


class TestAuthServiceError:

    def test_kind_by_code(self):
        assert AuthServiceError(USER_NOT_FOUND, "x").kind is AuthErrorKind.USER_NOT_FOUND
        assert AuthServiceError(USERNAME_EXISTS, "x").kind is AuthErrorKind.USERNAME_EXISTS
        assert AuthServiceError("LimitExceededException", "x").kind is AuthErrorKind.OTHER

    def test_message_and_http(self):
        error = AuthServiceError("LimitExceededException", "Attempt limit exceeded")

        assert isinstance(error, OtpAuthException)
        assert str(error) == "LimitExceededException: Attempt limit exceeded"
        http = error.to_http_exception()
        assert http.status_code == 502
        assert http.detail == "Attempt limit exceeded"


class TestInvalidStateTransition:

    def test_message(self):
        error = InvalidStateTransition("submit OTP", "signed_out")

        assert str(error) == "Cannot submit OTP in 'signed_out' state"
        assert error.to_http_exception().status_code == 409


class TestFillerPassword:

    def test_meets_default_cognito_policy(self):
        for _ in range(20):
            password = generate_filler_password()
            assert len(password) >= 8
            assert re.search(r"[A-Z]", password)
            assert re.search(r"[a-z]", password)
            assert re.search(r"[0-9]", password)
            assert re.search(r"[^A-Za-z0-9]", password)

    def test_is_random(self):
        assert generate_filler_password() != generate_filler_password()
