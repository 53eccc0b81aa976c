"""Domain models for the phone OTP flow."""
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SessionHandle(BaseModel):
    """Opaque token for an in-progress custom auth attempt."""
    model_config = ConfigDict(frozen=True)

    username: str
    session: str
    challenge_parameters: dict = Field(default_factory=dict)


class AuthTokens(BaseModel):
    """Token set issued by Cognito after a successful challenge."""
    model_config = ConfigDict(frozen=True)

    access_token: str
    id_token: str
    refresh_token: Optional[str] = None
    expires_at: float  # epoch seconds


class AuthenticatedUser(BaseModel):
    """A signed-in user, held in memory only."""
    model_config = ConfigDict(frozen=True)

    username: str
    sub: Optional[str] = None
    phone_number: Optional[str] = None
    tokens: AuthTokens


# ---------------------------------------------------------------------------
# Flow states: exactly one of these is current at any time
# ---------------------------------------------------------------------------

class SignedOut(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["signed_out"] = "signed_out"


class Verifying(BaseModel):
    """Transient state while a call to the auth service is in flight."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["verifying"] = "verifying"
    username: str


class AwaitingOtp(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["awaiting_otp"] = "awaiting_otp"
    session_handle: SessionHandle


class SignedIn(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["signed_in"] = "signed_in"
    user: AuthenticatedUser


FlowState = Union[SignedOut, Verifying, AwaitingOtp, SignedIn]


def state_username(state: FlowState) -> Optional[str]:
    """Username (phone number) associated with a state, if any."""
    if isinstance(state, Verifying):
        return state.username
    if isinstance(state, AwaitingOtp):
        return state.session_handle.username
    if isinstance(state, SignedIn):
        return state.user.username
    return None
