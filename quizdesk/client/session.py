from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import Protocol
from uuid import UUID

import structlog

from quizdesk.client.countdown import AttemptCountdown, Sleep
from quizdesk.client.errors import TransportError, UnexpectedResponseError
from quizdesk.client.notifier import AttemptNotifier, LoggingNotifier
from quizdesk.quizzes.cooldown import cooldown_rejection_message
from quizdesk.quizzes.errors import CooldownActiveError, QuizError
from quizdesk.quizzes.types import QuizView

logger = structlog.get_logger(__name__)

QUIZ_TIME_BUDGET_SECONDS = 2700
MAX_TAB_SWITCHES = 3

ConfirmSubmit = Callable[[], Awaitable[bool]]


class AttemptStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    TERMINATED = "TERMINATED"
    ABANDONED = "ABANDONED"


class AttemptTrigger(str, Enum):
    MANUAL = "MANUAL"
    TIMEOUT = "TIMEOUT"
    TAB_SWITCH = "TAB_SWITCH"


class SubmissionGateway(Protocol):
    async def submit(
        self,
        quiz_id: UUID,
        *,
        answers: Sequence[int | None],
        terminated: bool,
        restricted: bool,
    ) -> int: ...


class QuizSource(Protocol):
    async def fetch_quiz(self, quiz_id: UUID) -> QuizView: ...


class AttemptSession:
    """One in-progress quiz attempt on the student side.

    Three triggers can end the attempt: manual submit (after confirmation),
    countdown expiry, and the third loss of visibility. Every one of them goes
    through ``_finish``, the only place that posts answers, so a session sends
    at most one submission no matter how the triggers interleave. ``abandon``
    leaves ``IN_PROGRESS`` without posting.
    """

    def __init__(
        self,
        *,
        quiz: QuizView,
        gateway: SubmissionGateway,
        confirm_submit: ConfirmSubmit,
        notifier: AttemptNotifier | None = None,
        restricted: bool = False,
        time_budget_seconds: int = QUIZ_TIME_BUDGET_SECONDS,
        max_tab_switches: int = MAX_TAB_SWITCHES,
    ) -> None:
        self._quiz = quiz
        self._gateway = gateway
        self._confirm_submit = confirm_submit
        self._notifier: AttemptNotifier = notifier or LoggingNotifier()
        self._restricted = restricted
        self._max_tab_switches = max_tab_switches

        self._answers: list[int | None] = [None] * len(quiz.questions)
        self._status = AttemptStatus.IN_PROGRESS
        self._time_left_seconds = time_budget_seconds
        self._tab_switch_count = 0
        self._trigger: AttemptTrigger | None = None
        self._score: int | None = None
        self._delivery_error: Exception | None = None
        self._submissions_sent = 0
        self._countdown: AttemptCountdown | None = None

    @property
    def quiz(self) -> QuizView:
        return self._quiz

    @property
    def status(self) -> AttemptStatus:
        return self._status

    @property
    def is_in_progress(self) -> bool:
        return self._status is AttemptStatus.IN_PROGRESS

    @property
    def answers(self) -> tuple[int | None, ...]:
        return tuple(self._answers)

    @property
    def time_left_seconds(self) -> int:
        return self._time_left_seconds

    @property
    def tab_switch_count(self) -> int:
        return self._tab_switch_count

    @property
    def trigger(self) -> AttemptTrigger | None:
        return self._trigger

    @property
    def score(self) -> int | None:
        return self._score

    @property
    def delivery_error(self) -> Exception | None:
        return self._delivery_error

    @property
    def submissions_sent(self) -> int:
        return self._submissions_sent

    @property
    def countdown(self) -> AttemptCountdown | None:
        return self._countdown

    def format_time_left(self) -> str:
        minutes, seconds = divmod(self._time_left_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def start_countdown(
        self,
        *,
        interval_seconds: float = 1.0,
        sleep: Sleep | None = None,
    ) -> AttemptCountdown:
        if self._countdown is None:
            self._countdown = AttemptCountdown(
                self,
                interval_seconds=interval_seconds,
                sleep=sleep or asyncio.sleep,
            )
        if self.is_in_progress:
            self._countdown.start()
        return self._countdown

    def select_answer(self, question_index: int, option_index: int) -> bool:
        if not self.is_in_progress:
            return False
        if question_index < 0 or question_index >= len(self._answers):
            raise IndexError(f"question index out of range: {question_index}")
        self._answers[question_index] = option_index
        return True

    async def on_visibility_lost(self) -> AttemptStatus:
        if not self.is_in_progress:
            return self._status

        self._tab_switch_count += 1
        if self._tab_switch_count >= self._max_tab_switches:
            await self._finish(AttemptStatus.TERMINATED, AttemptTrigger.TAB_SWITCH)
        else:
            self._notifier.warn(
                f"Tab switch detected! ({self._tab_switch_count}/{self._max_tab_switches})"
            )
        return self._status

    async def tick(self, elapsed_seconds: int = 1) -> AttemptStatus:
        if not self.is_in_progress:
            return self._status

        self._time_left_seconds = max(0, self._time_left_seconds - elapsed_seconds)
        if self._time_left_seconds <= 0:
            await self._finish(AttemptStatus.SUBMITTED, AttemptTrigger.TIMEOUT)
        return self._status

    async def submit(self) -> bool:
        if not self.is_in_progress:
            return False
        if not await self._confirm_submit():
            return False
        # The countdown or visibility monitor may have ended the attempt while
        # the confirmation was pending.
        if not self.is_in_progress:
            return False
        return await self._finish(AttemptStatus.SUBMITTED, AttemptTrigger.MANUAL)

    def abandon(self) -> bool:
        """Drop an in-progress attempt without posting, e.g. when the host view closes."""
        if not self.is_in_progress:
            return False

        self._status = AttemptStatus.ABANDONED
        if self._countdown is not None:
            self._countdown.stop()
        logger.info(
            "quiz_attempt_abandoned",
            quiz_id=str(self._quiz.quiz_id),
            time_left_seconds=self._time_left_seconds,
            tab_switch_count=self._tab_switch_count,
        )
        return True

    async def _finish(self, status: AttemptStatus, trigger: AttemptTrigger) -> bool:
        if not self.is_in_progress:
            return False

        self._status = status
        self._trigger = trigger
        if self._countdown is not None:
            self._countdown.stop()

        terminated = status is AttemptStatus.TERMINATED
        if terminated:
            self._notifier.error(
                "Quiz Terminated",
                f"You switched tabs {self._max_tab_switches} times. Your answers have been submitted.",
            )

        answers = list(self._answers)
        self._submissions_sent += 1
        try:
            self._score = await self._gateway.submit(
                self._quiz.quiz_id,
                answers=answers,
                terminated=terminated,
                restricted=self._restricted,
            )
        except (TransportError, UnexpectedResponseError, QuizError) as exc:
            self._delivery_error = exc
            logger.warning(
                "quiz_attempt_delivery_failed",
                quiz_id=str(self._quiz.quiz_id),
                status=status.value,
                trigger=trigger.value,
                error=type(exc).__name__,
            )
            self._notifier.error(*self._failure_notice(trigger, exc))
            return True

        logger.info(
            "quiz_attempt_delivered",
            quiz_id=str(self._quiz.quiz_id),
            status=status.value,
            trigger=trigger.value,
            score=self._score,
            tab_switch_count=self._tab_switch_count,
        )
        if trigger is AttemptTrigger.TIMEOUT:
            self._notifier.info("Time's up!", "Your quiz has been auto-submitted.")
        elif trigger is AttemptTrigger.MANUAL:
            self._notifier.info("Submitted", "Answers submitted successfully!")
        return True

    @staticmethod
    def _failure_notice(trigger: AttemptTrigger, exc: Exception) -> tuple[str, str]:
        if isinstance(exc, CooldownActiveError):
            return "Submission rejected", cooldown_rejection_message(exc.retry_after_hours)
        if trigger is AttemptTrigger.TIMEOUT:
            return "Auto-submit failed", "Something went wrong. Please try again."
        if trigger is AttemptTrigger.TAB_SWITCH:
            return "Submission failed", "Your terminated attempt could not be saved. Please try again."
        return "Submission failed", "Unable to submit your quiz. Please try again."


async def start_attempt(
    source: QuizSource,
    quiz_id: UUID,
    *,
    gateway: SubmissionGateway,
    confirm_submit: ConfirmSubmit,
    notifier: AttemptNotifier | None = None,
    restricted: bool = False,
    time_budget_seconds: int = QUIZ_TIME_BUDGET_SECONDS,
    run_countdown: bool = True,
) -> AttemptSession:
    notifier = notifier or LoggingNotifier()
    try:
        quiz = await source.fetch_quiz(quiz_id)
    except (TransportError, UnexpectedResponseError, QuizError):
        notifier.error("Quiz unavailable", "Failed to load quiz")
        raise

    session = AttemptSession(
        quiz=quiz,
        gateway=gateway,
        confirm_submit=confirm_submit,
        notifier=notifier,
        restricted=restricted,
        time_budget_seconds=time_budget_seconds,
    )
    logger.info(
        "quiz_attempt_started",
        quiz_id=str(quiz_id),
        question_count=len(quiz.questions),
        time_budget_seconds=time_budget_seconds,
        restricted=restricted,
    )
    if run_countdown:
        session.start_countdown()
    return session
