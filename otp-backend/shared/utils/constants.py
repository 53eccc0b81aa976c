"""Application constants - status messages and auth service error codes."""

# Status messages shown to the user
WELCOME = "Welcome to the phone OTP demo"
NOT_SIGNED_IN = "You are NOT logged in"
SIGNED_IN = "You have logged in successfully"
SIGNED_OUT = "You have logged out successfully"
WAITING_FOR_OTP = "Enter OTP number"
VERIFYING_NUMBER = "Verifying number (Country code +XX needed)"

# Auth service error codes the flow distinguishes
USER_NOT_FOUND = "UserNotFoundException"
USERNAME_EXISTS = "UsernameExistsException"
CODE_MISMATCH = "CodeMismatchException"
NOT_AUTHENTICATED = "NotAuthenticatedException"

# Cognito custom auth
CUSTOM_AUTH_FLOW = "CUSTOM_AUTH"
REFRESH_TOKEN_FLOW = "REFRESH_TOKEN_AUTH"
CUSTOM_CHALLENGE = "CUSTOM_CHALLENGE"
