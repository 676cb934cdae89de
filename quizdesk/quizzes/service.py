from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.models.quiz_attempts import QuizAttempt
from quizdesk.db.models.quizzes import Quiz
from quizdesk.db.repo.quiz_attempts_repo import QuizAttemptsRepo
from quizdesk.db.repo.quizzes_repo import QuizzesRepo
from quizdesk.quizzes.cooldown import allow_new_attempt, cooldown_status_message
from quizdesk.quizzes.errors import (
    CooldownActiveError,
    QuestionIndexError,
    QuizNotFoundError,
    SubmissionNotFoundError,
)
from quizdesk.quizzes.scoring import score_answers
from quizdesk.quizzes.types import (
    AttemptStatusView,
    QuizSummary,
    QuizView,
    SubmissionView,
    SubmitResult,
)
from quizdesk.quizzes.validation import load_stored_questions, parse_question, parse_questions

logger = structlog.get_logger(__name__)


def _quiz_view(quiz: Quiz) -> QuizView:
    return QuizView(
        quiz_id=quiz.id,
        title=quiz.title,
        questions=load_stored_questions(quiz.questions),
        creator_user_id=quiz.creator_user_id,
        created_at=quiz.created_at,
        updated_at=quiz.updated_at,
    )


def _submission_view(
    attempt: QuizAttempt,
    *,
    user_name: str | None = None,
    user_email: str | None = None,
) -> SubmissionView:
    return SubmissionView(
        attempt_id=int(attempt.id),
        quiz_id=attempt.quiz_id,
        user_id=int(attempt.user_id),
        answers=list(attempt.answers or []),
        score=int(attempt.score),
        terminated=bool(attempt.terminated),
        created_at=attempt.created_at,
        user_name=user_name,
        user_email=user_email,
    )


class QuizService:
    @staticmethod
    async def _get_quiz_or_raise(
        session: AsyncSession,
        quiz_id: UUID,
        *,
        for_update: bool = False,
    ) -> Quiz:
        if for_update:
            quiz = await QuizzesRepo.get_by_id_for_update(session, quiz_id)
        else:
            quiz = await QuizzesRepo.get_by_id(session, quiz_id)
        if quiz is None:
            raise QuizNotFoundError
        return quiz

    @staticmethod
    async def list_quizzes(session: AsyncSession) -> list[QuizView]:
        quizzes = await QuizzesRepo.list_all(session)
        return [_quiz_view(quiz) for quiz in quizzes]

    @staticmethod
    async def list_quiz_summaries(session: AsyncSession) -> list[QuizSummary]:
        quizzes = await QuizzesRepo.list_all(session)
        counts = await QuizAttemptsRepo.count_by_quiz_ids(session, [quiz.id for quiz in quizzes])
        return [
            QuizSummary(
                quiz_id=quiz.id,
                title=quiz.title,
                question_count=len(quiz.questions or []),
                submissions_count=counts.get(quiz.id, 0),
                created_at=quiz.created_at,
            )
            for quiz in quizzes
        ]

    @staticmethod
    async def get_quiz(session: AsyncSession, quiz_id: UUID) -> QuizView:
        quiz = await QuizService._get_quiz_or_raise(session, quiz_id)
        return _quiz_view(quiz)

    @staticmethod
    async def create_quiz(
        session: AsyncSession,
        *,
        title: str,
        questions: Any,
        creator_user_id: int | None,
        now_utc: datetime,
    ) -> QuizView:
        parsed = parse_questions(questions)
        quiz = await QuizzesRepo.create(
            session,
            quiz=Quiz(
                id=uuid4(),
                title=title,
                creator_user_id=creator_user_id,
                questions=[question.as_payload() for question in parsed],
                created_at=now_utc,
                updated_at=now_utc,
            ),
        )
        logger.info(
            "quiz_created",
            quiz_id=str(quiz.id),
            creator_user_id=creator_user_id,
            question_count=len(parsed),
        )
        return _quiz_view(quiz)

    @staticmethod
    async def update_quiz(
        session: AsyncSession,
        *,
        quiz_id: UUID,
        title: str | None,
        questions: Any | None,
        now_utc: datetime,
    ) -> QuizView:
        quiz = await QuizService._get_quiz_or_raise(session, quiz_id, for_update=True)
        if questions is not None:
            parsed = parse_questions(questions)
            quiz.questions = [question.as_payload() for question in parsed]
        if title is not None:
            quiz.title = title
        quiz.updated_at = now_utc
        await session.flush()
        return _quiz_view(quiz)

    @staticmethod
    async def delete_quiz(session: AsyncSession, *, quiz_id: UUID) -> None:
        deleted = await QuizzesRepo.delete_by_id(session, quiz_id)
        if not deleted:
            raise QuizNotFoundError
        logger.info("quiz_deleted", quiz_id=str(quiz_id))

    @staticmethod
    async def add_question(
        session: AsyncSession,
        *,
        quiz_id: UUID,
        question: Any,
        now_utc: datetime,
    ) -> QuizView:
        parsed = parse_question(question)
        quiz = await QuizService._get_quiz_or_raise(session, quiz_id, for_update=True)
        # JSONB columns are not mutation-tracked; assign a fresh list.
        quiz.questions = [*(quiz.questions or []), parsed.as_payload()]
        quiz.updated_at = now_utc
        await session.flush()
        return _quiz_view(quiz)

    @staticmethod
    async def delete_question(
        session: AsyncSession,
        *,
        quiz_id: UUID,
        index: int,
        now_utc: datetime,
    ) -> QuizView:
        quiz = await QuizService._get_quiz_or_raise(session, quiz_id, for_update=True)
        current = list(quiz.questions or [])
        if index < 0 or index >= len(current):
            raise QuestionIndexError
        del current[index]
        quiz.questions = current
        quiz.updated_at = now_utc
        await session.flush()
        return _quiz_view(quiz)

    @staticmethod
    async def list_submissions(session: AsyncSession, *, quiz_id: UUID) -> list[SubmissionView]:
        rows = await QuizAttemptsRepo.list_for_quiz_with_users(session, quiz_id=quiz_id)
        return [
            _submission_view(
                attempt,
                user_name=user.name if user is not None else None,
                user_email=user.email if user is not None else None,
            )
            for attempt, user in rows
        ]

    @staticmethod
    async def submit(
        session: AsyncSession,
        *,
        quiz_id: UUID,
        user_id: int,
        answers: Sequence[int | None],
        terminated: bool,
        restricted: bool,
        now_utc: datetime,
    ) -> SubmitResult:
        if restricted:
            last_attempt = await QuizAttemptsRepo.get_latest_for_user_quiz(
                session,
                user_id=user_id,
                quiz_id=quiz_id,
            )
            decision = allow_new_attempt(
                now_utc=now_utc,
                last_attempt_at=last_attempt.created_at if last_attempt is not None else None,
            )
            if not decision.allowed:
                retry_after_hours = int(decision.retry_after_hours or 0)
                logger.info(
                    "quiz_submission_cooldown_blocked",
                    quiz_id=str(quiz_id),
                    user_id=user_id,
                    retry_after_hours=retry_after_hours,
                )
                raise CooldownActiveError(retry_after_hours)

        quiz = await QuizService._get_quiz_or_raise(session, quiz_id)
        score = score_answers(load_stored_questions(quiz.questions), answers)

        attempt = await QuizAttemptsRepo.create(
            session,
            attempt=QuizAttempt(
                quiz_id=quiz_id,
                user_id=user_id,
                answers=list(answers),
                score=score,
                terminated=terminated,
                created_at=now_utc,
            ),
        )
        logger.info(
            "quiz_submission_recorded",
            quiz_id=str(quiz_id),
            user_id=user_id,
            attempt_id=attempt.id,
            score=score,
            question_count=len(quiz.questions or []),
            terminated=terminated,
            restricted=restricted,
        )
        return SubmitResult(attempt_id=int(attempt.id), score=score, terminated=terminated)

    @staticmethod
    async def get_last_submission(
        session: AsyncSession,
        *,
        quiz_id: UUID,
        user_id: int,
    ) -> SubmissionView:
        attempt = await QuizAttemptsRepo.get_latest_for_user_quiz(
            session,
            user_id=user_id,
            quiz_id=quiz_id,
        )
        if attempt is None:
            raise SubmissionNotFoundError
        return _submission_view(attempt)

    @staticmethod
    async def check_attempt(
        session: AsyncSession,
        *,
        quiz_id: UUID,
        user_id: int,
        now_utc: datetime,
    ) -> AttemptStatusView:
        attempt = await QuizAttemptsRepo.get_latest_for_user_quiz(
            session,
            user_id=user_id,
            quiz_id=quiz_id,
        )
        if attempt is None or attempt.created_at is None:
            return AttemptStatusView(attempted=False)

        decision = allow_new_attempt(now_utc=now_utc, last_attempt_at=attempt.created_at)
        if decision.allowed:
            return AttemptStatusView(attempted=False)

        retry_after_hours = int(decision.retry_after_hours or 0)
        return AttemptStatusView(
            attempted=True,
            message=cooldown_status_message(retry_after_hours),
            retry_after_hours=retry_after_hours,
        )
