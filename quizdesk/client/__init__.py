from quizdesk.client.api_client import QuizApiClient
from quizdesk.client.countdown import AttemptCountdown
from quizdesk.client.errors import TransportError, UnexpectedResponseError
from quizdesk.client.notifier import AttemptNotifier, LoggingNotifier
from quizdesk.client.session import (
    MAX_TAB_SWITCHES,
    QUIZ_TIME_BUDGET_SECONDS,
    AttemptSession,
    AttemptStatus,
    AttemptTrigger,
    start_attempt,
)

__all__ = [
    "MAX_TAB_SWITCHES",
    "QUIZ_TIME_BUDGET_SECONDS",
    "AttemptCountdown",
    "AttemptNotifier",
    "AttemptSession",
    "AttemptStatus",
    "AttemptTrigger",
    "LoggingNotifier",
    "QuizApiClient",
    "TransportError",
    "UnexpectedResponseError",
    "start_attempt",
]
