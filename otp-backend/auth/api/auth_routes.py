"""Auth API endpoints - drive the phone OTP flow."""

import logging

from fastapi import APIRouter, Depends

from auth.models.domain import state_username
from auth.models.schemas import FlowStatusResponse, OtpSubmitRequest, PhoneSubmitRequest
from auth.services.auth_service import CognitoAuthService
from auth.services.otp_flow_controller import OtpFlowController
from shared.utils.exceptions import OtpAuthException

logger = logging.getLogger("auth.routes")

router = APIRouter(prefix="/auth", tags=["auth"])

# One controller per process
_controller = None


def get_otp_flow_controller() -> OtpFlowController:
    """FastAPI dependency: the process-wide OTP flow controller."""
    global _controller
    if _controller is None:
        try:
            _controller = OtpFlowController(CognitoAuthService())
        except OtpAuthException as e:
            raise e.to_http_exception()
    return _controller


def reset_otp_flow_controller():
    """Drop the process-wide controller (useful for testing)."""
    global _controller
    _controller = None


def _status(controller: OtpFlowController) -> FlowStatusResponse:
    """Convert controller state to a FlowStatusResponse."""
    return FlowStatusResponse(
        state=controller.state.kind,
        message=controller.message,
        username=state_username(controller.state),
        last_error=controller.last_error,
    )


@router.get("/state", response_model=FlowStatusResponse)
def get_state(controller: OtpFlowController = Depends(get_otp_flow_controller)):
    """Current flow status, without contacting the auth service."""
    return _status(controller)


@router.post("/phone", response_model=FlowStatusResponse)
def submit_phone(
    body: PhoneSubmitRequest,
    controller: OtpFlowController = Depends(get_otp_flow_controller),
):
    """
    Start sign-in for a phone number.
    Creates the account on first use; the OTP is delivered by SMS.
    """
    try:
        controller.submit_phone(body.phone)
    except OtpAuthException as e:
        raise e.to_http_exception()
    return _status(controller)


@router.post("/otp", response_model=FlowStatusResponse)
def submit_otp(
    body: OtpSubmitRequest,
    controller: OtpFlowController = Depends(get_otp_flow_controller),
):
    """
    Answer the OTP challenge.
    A wrong code restarts sign-in; the error is returned in last_error.
    """
    try:
        controller.submit_otp(body.otp)
    except OtpAuthException as e:
        raise e.to_http_exception()
    return _status(controller)


@router.post("/verify", response_model=FlowStatusResponse)
def verify_auth(controller: OtpFlowController = Depends(get_otp_flow_controller)):
    """Am I signed in?"""
    controller.verify_auth()
    return _status(controller)


@router.post("/sign-out", response_model=FlowStatusResponse)
def sign_out(controller: OtpFlowController = Depends(get_otp_flow_controller)):
    controller.sign_out()
    return _status(controller)
