"""
Verify Auth Challenge Response Lambda trigger for the phone OTP flow.

Sets response.answerCorrect to whether the submitted OTP equals the one
stored in privateChallengeParameters. The comparison is exact: no case,
whitespace or leading-zero normalisation ("1234" != "01234"). A mismatch
is a normal False result, never an error.
"""

import logging

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def handler(event, context):
    request = event["request"]
    expected = request["privateChallengeParameters"]["answer"]
    submitted = request["challengeAnswer"]

    answer_correct = expected == submitted
    event["response"]["answerCorrect"] = answer_correct

    # Never log either code
    logger.info(
        "Challenge answer for %s: %s",
        event.get("userName", "<unknown>"),
        "correct" if answer_correct else "incorrect",
    )
    return event
