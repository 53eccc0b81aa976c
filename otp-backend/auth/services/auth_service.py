"""Auth service: the boundary between the OTP flow and Cognito."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from jose import jwt, JWTError

from config import get_settings
from auth.models.domain import AuthenticatedUser, AuthTokens, SessionHandle
from shared.utils.constants import (
    CODE_MISMATCH,
    CUSTOM_AUTH_FLOW,
    CUSTOM_CHALLENGE,
    NOT_AUTHENTICATED,
    REFRESH_TOKEN_FLOW,
)
from shared.utils.exceptions import AuthNotConfiguredError, AuthServiceError

logger = logging.getLogger("auth.service")


class AuthenticationService(ABC):
    """Operations the OTP flow needs from an authentication service.

    Every failure is raised as AuthServiceError carrying the service's error code.
    """

    @abstractmethod
    def sign_in(self, username: str) -> SessionHandle:
        """Start a custom auth attempt and return its session handle."""

    @abstractmethod
    def sign_up(self, username: str, password: str, attributes: Dict[str, str]) -> None:
        """Create an account."""

    @abstractmethod
    def send_custom_challenge_answer(self, session_handle: SessionHandle, answer: str) -> AuthenticatedUser:
        """Answer the pending challenge; returns the user once tokens are issued."""

    @abstractmethod
    def sign_out(self) -> None:
        """Invalidate the current user's session."""

    @abstractmethod
    def current_authenticated_user(self) -> AuthenticatedUser:
        """Return the signed-in user or raise if there is none."""


class CognitoAuthService(AuthenticationService):
    """
    Cognito implementation using the public app client API.

    Tokens from a successful challenge are kept on the instance so that
    sign_out and current_authenticated_user can act on them. Nothing is
    persisted.
    """

    def __init__(self, client=None):
        settings = get_settings()
        if not settings.cognito_app_client_id:
            raise AuthNotConfiguredError()

        self.client_id = settings.cognito_app_client_id
        self.client = client or boto3.client("cognito-idp", region_name=settings.cognito_region)
        self._user: Optional[AuthenticatedUser] = None

    def _call(self, operation: str, **kwargs) -> dict:
        """Invoke a cognito-idp operation, mapping botocore failures to AuthServiceError."""
        try:
            return getattr(self.client, operation)(**kwargs)
        except ClientError as e:
            error = e.response.get("Error", {})
            raise AuthServiceError(
                error.get("Code", "Unknown"),
                error.get("Message", str(e)),
            ) from e
        except BotoCoreError as e:
            # Connection, timeout and parameter errors never reach Cognito
            logger.error(f"cognito-idp {operation} failed: {e}")
            raise AuthServiceError(type(e).__name__, str(e)) from e

    def sign_in(self, username: str) -> SessionHandle:
        response = self._call(
            "initiate_auth",
            AuthFlow=CUSTOM_AUTH_FLOW,
            ClientId=self.client_id,
            AuthParameters={"USERNAME": username},
        )

        challenge = response.get("ChallengeName")
        if challenge != CUSTOM_CHALLENGE:
            raise AuthServiceError(
                "UnexpectedChallengeException",
                f"Expected {CUSTOM_CHALLENGE}, got {challenge}",
            )

        logger.info(f"Custom challenge issued for {username}")
        return SessionHandle(
            username=username,
            session=response["Session"],
            challenge_parameters=response.get("ChallengeParameters") or {},
        )

    def sign_up(self, username: str, password: str, attributes: Dict[str, str]) -> None:
        self._call(
            "sign_up",
            ClientId=self.client_id,
            Username=username,
            Password=password,
            UserAttributes=[{"Name": name, "Value": value} for name, value in attributes.items()],
        )
        logger.info(f"Signed up {username}")

    def send_custom_challenge_answer(self, session_handle: SessionHandle, answer: str) -> AuthenticatedUser:
        # Cognito reports the canonical username back in the challenge parameters
        cognito_username = session_handle.challenge_parameters.get("USERNAME", session_handle.username)

        response = self._call(
            "respond_to_auth_challenge",
            ClientId=self.client_id,
            ChallengeName=CUSTOM_CHALLENGE,
            Session=session_handle.session,
            ChallengeResponses={"USERNAME": cognito_username, "ANSWER": answer},
        )

        result = response.get("AuthenticationResult")
        if not result:
            # Wrong answer with attempts left: Cognito issues another challenge instead of failing
            raise AuthServiceError(CODE_MISMATCH, "Incorrect OTP, please try again")

        self._user = self._user_from_result(session_handle.username, result)
        return self._user

    def sign_out(self) -> None:
        user, self._user = self._user, None
        if user is None:
            return
        self._call("global_sign_out", AccessToken=user.tokens.access_token)
        logger.info(f"Signed out {user.username}")

    def current_authenticated_user(self) -> AuthenticatedUser:
        if self._user is None:
            raise AuthServiceError(NOT_AUTHENTICATED, "The user is not authenticated")

        if self._user.tokens.expires_at <= time.time():
            self._refresh()

        try:
            self._call("get_user", AccessToken=self._user.tokens.access_token)
        except AuthServiceError:
            self._user = None
            raise
        return self._user

    def _refresh(self) -> None:
        """Exchange the refresh token for a new access/id token pair."""
        user = self._user
        refresh_token = user.tokens.refresh_token
        if not refresh_token:
            self._user = None
            raise AuthServiceError(NOT_AUTHENTICATED, "Session expired")

        try:
            response = self._call(
                "initiate_auth",
                AuthFlow=REFRESH_TOKEN_FLOW,
                ClientId=self.client_id,
                AuthParameters={"REFRESH_TOKEN": refresh_token},
            )
        except AuthServiceError:
            self._user = None
            raise

        self._user = self._user_from_result(
            user.username, response["AuthenticationResult"], refresh_token=refresh_token
        )
        logger.info(f"Refreshed tokens for {user.username}")

    @staticmethod
    def _user_from_result(username: str, result: dict, refresh_token: Optional[str] = None) -> AuthenticatedUser:
        """
        Build an AuthenticatedUser from a Cognito AuthenticationResult.

        The ID token arrives directly from Cognito over TLS, so its claims
        are read without signature verification.
        """
        try:
            claims = jwt.get_unverified_claims(result["IdToken"])
        except JWTError as e:
            raise AuthServiceError("InvalidTokenException", f"Unreadable ID token: {e}") from e

        tokens = AuthTokens(
            access_token=result["AccessToken"],
            id_token=result["IdToken"],
            refresh_token=result.get("RefreshToken") or refresh_token,
            expires_at=time.time() + result.get("ExpiresIn", 3600),
        )
        return AuthenticatedUser(
            username=username,
            sub=claims.get("sub"),
            phone_number=claims.get("phone_number"),
            tokens=tokens,
        )
