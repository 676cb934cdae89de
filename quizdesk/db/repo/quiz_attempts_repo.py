from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.models.quiz_attempts import QuizAttempt
from quizdesk.db.models.users import User


class QuizAttemptsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, attempt: QuizAttempt) -> QuizAttempt:
        session.add(attempt)
        await session.flush()
        return attempt

    @staticmethod
    async def get_latest_for_user_quiz(
        session: AsyncSession,
        *,
        user_id: int,
        quiz_id: UUID,
    ) -> QuizAttempt | None:
        stmt = (
            select(QuizAttempt)
            .where(
                QuizAttempt.user_id == user_id,
                QuizAttempt.quiz_id == quiz_id,
            )
            .order_by(QuizAttempt.created_at.desc(), QuizAttempt.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_quiz_with_users(
        session: AsyncSession,
        *,
        quiz_id: UUID,
    ) -> list[tuple[QuizAttempt, User | None]]:
        stmt = (
            select(QuizAttempt, User)
            .outerjoin(User, QuizAttempt.user_id == User.id)
            .where(QuizAttempt.quiz_id == quiz_id)
            .order_by(QuizAttempt.created_at.asc(), QuizAttempt.id.asc())
        )
        result = await session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    @staticmethod
    async def count_by_quiz_ids(
        session: AsyncSession,
        quiz_ids: Sequence[UUID],
    ) -> dict[UUID, int]:
        ids = tuple(set(quiz_ids))
        if not ids:
            return {}
        stmt = (
            select(QuizAttempt.quiz_id, func.count(QuizAttempt.id))
            .where(QuizAttempt.quiz_id.in_(ids))
            .group_by(QuizAttempt.quiz_id)
        )
        result = await session.execute(stmt)
        return {quiz_id: int(count) for quiz_id, count in result.all()}
