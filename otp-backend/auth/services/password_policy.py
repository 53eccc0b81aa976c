"""Filler credentials for passwordless sign-up.

Cognito's SignUp call requires a password even though these users only
ever authenticate with an OTP. The password generated here only has to
satisfy the pool's password policy; nobody is meant to know or use it.
"""

import secrets


def generate_filler_password() -> str:
    """Random password meeting the default Cognito policy (upper, lower, digit, symbol)."""
    return f"P{secrets.token_urlsafe(16)}!1a"
