from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from quizdesk.db.models.quiz_attempts import QuizAttempt
from quizdesk.db.repo.users_repo import UsersRepo
from quizdesk.db.session import SessionLocal
from quizdesk.quizzes.errors import CooldownActiveError, QuizNotFoundError
from quizdesk.quizzes.service import QuizService

UTC = timezone.utc
QUESTIONS = [
    {"question_text": "2 + 2", "options": ["3", "4"], "correct_answer": 1},
    {"question_text": "Capital of France", "options": ["Paris", "Rome"], "correct_answer": 0},
    {"question_text": "Largest planet", "options": ["Mars", "Venus", "Jupiter"], "correct_answer": 2},
]


async def _create_user(*, email: str, role: str = "student") -> int:
    async with SessionLocal.begin() as session:
        user = await UsersRepo.create(session, name=email.split("@")[0], email=email, role=role)
        return int(user.id)


async def _create_quiz(*, creator_user_id: int, now_utc: datetime):
    async with SessionLocal.begin() as session:
        return await QuizService.create_quiz(
            session,
            title="General knowledge",
            questions=QUESTIONS,
            creator_user_id=creator_user_id,
            now_utc=now_utc,
        )


async def _submit(*, quiz_id, user_id: int, answers, now_utc: datetime, restricted: bool = True):
    async with SessionLocal.begin() as session:
        return await QuizService.submit(
            session,
            quiz_id=quiz_id,
            user_id=user_id,
            answers=answers,
            terminated=False,
            restricted=restricted,
            now_utc=now_utc,
        )


@pytest.mark.integration
@pytest.mark.asyncio
async def test_restricted_submission_enforces_cooldown_window() -> None:
    now_utc = datetime(2026, 3, 10, 9, 0, tzinfo=UTC)
    admin_id = await _create_user(email="admin@example.com", role="admin")
    student_id = await _create_user(email="student@example.com")
    quiz = await _create_quiz(creator_user_id=admin_id, now_utc=now_utc)

    first = await _submit(quiz_id=quiz.quiz_id, user_id=student_id, answers=[1, 0, None], now_utc=now_utc)
    assert first.score == 2

    with pytest.raises(CooldownActiveError) as blocked:
        await _submit(
            quiz_id=quiz.quiz_id,
            user_id=student_id,
            answers=[1, 0, 2],
            now_utc=now_utc + timedelta(hours=5),
        )
    assert blocked.value.retry_after_hours == 19

    async with SessionLocal.begin() as session:
        status = await QuizService.check_attempt(
            session,
            quiz_id=quiz.quiz_id,
            user_id=student_id,
            now_utc=now_utc + timedelta(hours=5),
        )
    assert status.attempted is True
    assert status.message == "You can retake this quiz after 19 hours."

    retake = await _submit(
        quiz_id=quiz.quiz_id,
        user_id=student_id,
        answers=[1, 0, 2],
        now_utc=now_utc + timedelta(hours=24),
    )
    assert retake.score == 3

    async with SessionLocal.begin() as session:
        last = await QuizService.get_last_submission(session, quiz_id=quiz.quiz_id, user_id=student_id)
        attempts_total = await session.scalar(
            select(func.count(QuizAttempt.id)).where(QuizAttempt.quiz_id == quiz.quiz_id)
        )
    assert last.attempt_id == retake.attempt_id
    assert last.answers == [1, 0, 2]
    assert attempts_total == 2


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unrestricted_submission_skips_cooldown() -> None:
    now_utc = datetime(2026, 3, 10, 9, 0, tzinfo=UTC)
    student_id = await _create_user(email="retry@example.com")
    quiz = await _create_quiz(creator_user_id=student_id, now_utc=now_utc)

    await _submit(quiz_id=quiz.quiz_id, user_id=student_id, answers=[0], now_utc=now_utc, restricted=False)
    again = await _submit(
        quiz_id=quiz.quiz_id,
        user_id=student_id,
        answers=[1],
        now_utc=now_utc + timedelta(minutes=1),
        restricted=False,
    )

    assert again.score == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_deleting_quiz_removes_attempts_and_admin_listing() -> None:
    now_utc = datetime(2026, 3, 10, 9, 0, tzinfo=UTC)
    admin_id = await _create_user(email="owner@example.com", role="admin")
    student_id = await _create_user(email="taker@example.com")
    quiz = await _create_quiz(creator_user_id=admin_id, now_utc=now_utc)
    await _submit(quiz_id=quiz.quiz_id, user_id=student_id, answers=[1, 1, 1], now_utc=now_utc)

    async with SessionLocal.begin() as session:
        summaries = await QuizService.list_quiz_summaries(session)
        submissions = await QuizService.list_submissions(session, quiz_id=quiz.quiz_id)
    assert [(item.question_count, item.submissions_count) for item in summaries] == [(3, 1)]
    assert submissions[0].user_email == "taker@example.com"

    async with SessionLocal.begin() as session:
        await QuizService.delete_quiz(session, quiz_id=quiz.quiz_id)

    async with SessionLocal.begin() as session:
        attempts_total = await session.scalar(select(func.count(QuizAttempt.id)))
        with pytest.raises(QuizNotFoundError):
            await QuizService.get_quiz(session, quiz.quiz_id)
    assert attempts_total == 0
