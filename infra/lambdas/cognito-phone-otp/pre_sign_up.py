"""
Pre Sign-Up Lambda trigger for the phone OTP flow.

Phone sign-ups are confirmed on the spot and their number marked verified;
the OTP challenge that follows is the proof of possession. Sign-ups without
a phone number go through the pool's normal confirmation.
"""


def handler(event, context):
    attributes = event["request"].get("userAttributes") or {}
    if attributes.get("phone_number"):
        event["response"]["autoConfirmUser"] = True
        event["response"]["autoVerifyPhone"] = True

    return event
