"""
Create Auth Challenge Lambda trigger for the phone OTP flow.

On the first round, generates a 6-digit OTP and sends it by SMS (SNS) to the
user's phone_number. Retries within the same session reuse that code, read
back from the previous round's challengeMetadata, so the user is not sent a
new SMS for every wrong answer.

The expected code goes into privateChallengeParameters, which only the
Verify Auth Challenge trigger ever sees.
"""

import logging
import os
import secrets

import boto3

logger = logging.getLogger()
logger.setLevel(logging.INFO)

OTP_LENGTH = 6
METADATA_PREFIX = "OTP-"
DEFAULT_MESSAGE_TEMPLATE = "Your verification code is: {otp}"

_sns = None


def _get_sns():
    global _sns
    if _sns is None:
        _sns = boto3.client("sns")
    return _sns


def generate_otp() -> str:
    return str(secrets.randbelow(10 ** OTP_LENGTH)).zfill(OTP_LENGTH)


def _previous_otp(session):
    for entry in reversed(session or []):
        metadata = entry.get("challengeMetadata") or ""
        if metadata.startswith(METADATA_PREFIX):
            return metadata[len(METADATA_PREFIX):]
    return None


def handler(event, context):
    phone = event["request"]["userAttributes"].get("phone_number")
    if not phone:
        raise ValueError("User has no phone_number attribute")

    otp = _previous_otp(event["request"].get("session"))
    if otp is None:
        otp = generate_otp()
        template = os.environ.get("OTP_MESSAGE_TEMPLATE", DEFAULT_MESSAGE_TEMPLATE)
        _get_sns().publish(PhoneNumber=phone, Message=template.format(otp=otp))
        logger.info("Sent OTP to %s", event.get("userName", "<unknown>"))

    event["response"]["publicChallengeParameters"] = {"phone": phone}
    event["response"]["privateChallengeParameters"] = {"answer": otp}
    event["response"]["challengeMetadata"] = f"{METADATA_PREFIX}{otp}"

    return event
