"""
OTP flow controller: drives phone sign-up/sign-in and OTP confirmation.

State machine:
    SignedOut --submit_phone--> Verifying --> AwaitingOtp
    AwaitingOtp --submit_otp--> Verifying --> SignedIn
                                          +-> (sign-in restarted) AwaitingOtp or SignedOut
    SignedIn --sign_out--> SignedOut

Sign-in failures are recovered according to SIGN_IN_RECOVERY, keyed by the
kind of auth service error.
"""
import logging
from enum import Enum
from typing import Callable, Optional

from config import get_settings
from auth.models.domain import (
    AwaitingOtp,
    FlowState,
    SignedIn,
    SignedOut,
    Verifying,
)
from auth.services.auth_service import AuthenticationService
from auth.services.password_policy import generate_filler_password
from shared.utils.constants import (
    NOT_SIGNED_IN,
    SIGNED_IN,
    SIGNED_OUT,
    VERIFYING_NUMBER,
    WAITING_FOR_OTP,
    WELCOME,
)
from shared.utils.exceptions import AuthErrorKind, AuthServiceError, InvalidStateTransition

logger = logging.getLogger("auth.controller")


class Recovery(str, Enum):
    SIGN_UP_THEN_RETRY = "sign_up_then_retry"
    RETRY = "retry"
    ABANDON = "abandon"


SIGN_IN_RECOVERY = {
    AuthErrorKind.USER_NOT_FOUND: Recovery.SIGN_UP_THEN_RETRY,
    # Lost a race with a concurrent sign-up for the same number
    AuthErrorKind.USERNAME_EXISTS: Recovery.RETRY,
    AuthErrorKind.OTHER: Recovery.ABANDON,
}


class OtpFlowController:
    """Single-user OTP flow over an AuthenticationService."""

    def __init__(
        self,
        auth: AuthenticationService,
        password_factory: Callable[[], str] = generate_filler_password,
        max_sign_in_attempts: Optional[int] = None,
    ):
        self.auth = auth
        self.password_factory = password_factory
        if max_sign_in_attempts is None:
            max_sign_in_attempts = get_settings().otp_max_sign_in_attempts
        if max_sign_in_attempts < 1:
            raise ValueError(f"max_sign_in_attempts must be at least 1, got {max_sign_in_attempts}")
        self.max_sign_in_attempts = max_sign_in_attempts

        self.state: FlowState = SignedOut()
        self.message = WELCOME
        self.otp = ""
        self.last_error: Optional[str] = None

    def submit_phone(self, phone: str) -> FlowState:
        """Request an OTP for a phone number, creating the account if needed."""
        if isinstance(self.state, SignedIn):
            raise InvalidStateTransition("submit phone number", self.state.kind)

        self.state = Verifying(username=phone)
        self.message = VERIFYING_NUMBER

        for _ in range(self.max_sign_in_attempts):
            try:
                session_handle = self.auth.sign_in(phone)
            except AuthServiceError as e:
                if not self._recover(phone, e):
                    break
                continue

            self.state = AwaitingOtp(session_handle=session_handle)
            self.message = WAITING_FOR_OTP
            return self.state
        else:
            logger.error(f"Sign-in for {phone} still failing after {self.max_sign_in_attempts} attempts")

        # Unexpected errors leave the status message untouched
        self.state = SignedOut()
        return self.state

    def _recover(self, phone: str, error: AuthServiceError) -> bool:
        """Apply the recovery for a sign-in failure. Returns False when the attempt is abandoned."""
        recovery = SIGN_IN_RECOVERY[error.kind]

        if recovery is Recovery.ABANDON:
            logger.error(f"Sign-in failed for {phone}: {error.code}: {error.message}")
            return False

        if recovery is Recovery.SIGN_UP_THEN_RETRY:
            logger.info(f"No account for {phone}, signing up")
            try:
                self.auth.sign_up(phone, self.password_factory(), {"phone_number": phone})
            except AuthServiceError as e:
                if SIGN_IN_RECOVERY[e.kind] is not Recovery.RETRY:
                    logger.error(f"Sign-up failed for {phone}: {e.code}: {e.message}")
                    return False
                logger.info(f"{phone} was signed up concurrently, retrying sign-in")
            return True

        logger.info(f"{phone} already exists, retrying sign-in")
        self.message = WAITING_FOR_OTP
        return True

    def submit_otp(self, otp: str) -> FlowState:
        """Answer the pending challenge. A rejected OTP restarts sign-in for the same number."""
        if not isinstance(self.state, AwaitingOtp):
            raise InvalidStateTransition("submit OTP", self.state.kind)

        session_handle = self.state.session_handle
        self.otp = otp
        self.state = Verifying(username=session_handle.username)

        try:
            user = self.auth.send_custom_challenge_answer(session_handle, otp)
        except AuthServiceError as e:
            logger.warning(f"OTP rejected for {session_handle.username}: {e.code}")
            self.otp = ""
            self.submit_phone(session_handle.username)
            self.message = e.message
            self.last_error = e.message
            return self.state

        self.state = SignedIn(user=user)
        self.message = SIGNED_IN
        self.otp = ""
        self.last_error = None
        return self.state

    def sign_out(self) -> FlowState:
        if not isinstance(self.state, SignedIn):
            self.message = NOT_SIGNED_IN
            return self.state

        try:
            self.auth.sign_out()
        except AuthServiceError as e:
            logger.warning(f"Remote sign-out failed, clearing local session anyway: {e.code}")

        self.state = SignedOut()
        self.otp = ""
        self.last_error = None
        self.message = SIGNED_OUT
        return self.state

    def verify_auth(self) -> FlowState:
        """'Am I signed in?' probe against the auth service."""
        try:
            user = self.auth.current_authenticated_user()
        except AuthServiceError as e:
            logger.info(f"Not signed in: {e.message}")
            self.message = NOT_SIGNED_IN
            return self.state

        self.state = SignedIn(user=user)
        self.message = SIGNED_IN
        return self.state
