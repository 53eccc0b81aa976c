"""Pydantic request/response models for the OTP flow endpoints."""

from pydantic import BaseModel, Field
from typing import Literal, Optional


class PhoneSubmitRequest(BaseModel):
    """Request model for starting sign-in with a phone number."""
    phone: str = Field(..., min_length=1, description="Phone number with country code, e.g. +15551234567")


class OtpSubmitRequest(BaseModel):
    """Request model for answering the OTP challenge."""
    otp: str = Field(..., description="One-time passcode as received")


class FlowStatusResponse(BaseModel):
    """Response model describing where the OTP flow currently stands."""
    state: Literal["signed_out", "verifying", "awaiting_otp", "signed_in"]
    message: str
    username: Optional[str] = None
    last_error: Optional[str] = None
