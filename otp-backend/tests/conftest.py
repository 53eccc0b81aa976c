"""Pytest configuration and shared fixtures."""
import time
from typing import Dict

import pytest

from config import reset_settings
from auth.api.auth_routes import reset_otp_flow_controller
from auth.models.domain import AuthenticatedUser, AuthTokens, SessionHandle
from auth.services.auth_service import AuthenticationService
from shared.utils.constants import NOT_AUTHENTICATED, USER_NOT_FOUND, USERNAME_EXISTS
from shared.utils.exceptions import AuthServiceError


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """
    Point settings at a fake Cognito pool for every test.

    Resets the cached settings and the process-wide controller so that
    tests never see each other's state.
    """
    monkeypatch.setenv("COGNITO_REGION", "us-east-1")
    monkeypatch.setenv("COGNITO_USER_POOL_ID", "us-east-1_TestPool")
    monkeypatch.setenv("COGNITO_APP_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("AUTH_PROBE_ON_STARTUP", "false")
    reset_settings()
    reset_otp_flow_controller()

    yield

    reset_settings()
    reset_otp_flow_controller()


def make_user(username: str = "+15550001111") -> AuthenticatedUser:
    """An authenticated user with a token set valid for an hour."""
    return AuthenticatedUser(
        username=username,
        sub="sub-" + username.lstrip("+"),
        phone_number=username,
        tokens=AuthTokens(
            access_token="access-token",
            id_token="id-token",
            refresh_token="refresh-token",
            expires_at=time.time() + 3600,
        ),
    )


class FakeAuthService(AuthenticationService):
    """
    In-memory stand-in for Cognito.

    Accounts live in `users`; the correct answer for every challenge is
    `expected_otp`. Errors queued in `sign_in_errors` / `sign_up_errors`
    are raised (in order) before the normal behaviour applies.
    """

    def __init__(self, expected_otp: str = "123456"):
        self.expected_otp = expected_otp
        self.users = set()
        self.calls = []
        self.sign_in_errors = []
        self.sign_up_errors = []
        self.sign_out_error = None
        self.current_user = None
        self._sessions = 0

    def sign_in(self, username: str) -> SessionHandle:
        self.calls.append(("sign_in", username))
        if self.sign_in_errors:
            raise self.sign_in_errors.pop(0)
        if username not in self.users:
            raise AuthServiceError(USER_NOT_FOUND, "User does not exist.")
        self._sessions += 1
        return SessionHandle(username=username, session=f"session-{self._sessions}")

    def sign_up(self, username: str, password: str, attributes: Dict[str, str]) -> None:
        self.calls.append(("sign_up", username, password, attributes))
        if self.sign_up_errors:
            raise self.sign_up_errors.pop(0)
        if username in self.users:
            raise AuthServiceError(USERNAME_EXISTS, "User already exists")
        self.users.add(username)

    def send_custom_challenge_answer(self, session_handle: SessionHandle, answer: str) -> AuthenticatedUser:
        self.calls.append(("answer", session_handle.session, answer))
        if answer != self.expected_otp:
            raise AuthServiceError("NotAuthorizedException", "Incorrect username or password.")
        self.current_user = make_user(session_handle.username)
        return self.current_user

    def sign_out(self) -> None:
        self.calls.append(("sign_out",))
        self.current_user = None
        if self.sign_out_error:
            raise self.sign_out_error

    def current_authenticated_user(self) -> AuthenticatedUser:
        self.calls.append(("current_user",))
        if self.current_user is None:
            raise AuthServiceError(NOT_AUTHENTICATED, "The user is not authenticated")
        return self.current_user

    def call_names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_auth():
    """A FakeAuthService with no accounts."""
    return FakeAuthService()


@pytest.fixture
def sample_phone():
    return "+15550001111"


@pytest.fixture
def user_factory():
    """Factory for AuthenticatedUser instances."""
    return make_user
