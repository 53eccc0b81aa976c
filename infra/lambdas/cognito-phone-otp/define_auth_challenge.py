"""
Define Auth Challenge Lambda trigger for the phone OTP flow.

Looks at the challenge history in request.session and decides the next step:
- nothing answered yet → issue CUSTOM_CHALLENGE
- last answer correct → issue tokens
- MAX_CHALLENGE_ATTEMPTS wrong answers → fail authentication
- otherwise → issue another CUSTOM_CHALLENGE
"""

MAX_CHALLENGE_ATTEMPTS = 3


def _issue_challenge(response):
    response["issueTokens"] = False
    response["failAuthentication"] = False
    response["challengeName"] = "CUSTOM_CHALLENGE"


def handler(event, context):
    history = event["request"].get("session") or []
    response = event["response"]

    if not history:
        _issue_challenge(response)
        return event

    last = history[-1]
    if last.get("challengeName") == "CUSTOM_CHALLENGE" and last.get("challengeResult"):
        response["issueTokens"] = True
        response["failAuthentication"] = False
    elif len(history) >= MAX_CHALLENGE_ATTEMPTS:
        response["issueTokens"] = False
        response["failAuthentication"] = True
    else:
        _issue_challenge(response)

    return event
