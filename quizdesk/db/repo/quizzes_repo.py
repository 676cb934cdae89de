from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.models.quizzes import Quiz


class QuizzesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, quiz_id: UUID) -> Quiz | None:
        return await session.get(Quiz, quiz_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, quiz_id: UUID) -> Quiz | None:
        stmt = select(Quiz).where(Quiz.id == quiz_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(session: AsyncSession) -> list[Quiz]:
        stmt = select(Quiz).order_by(Quiz.created_at.asc(), Quiz.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(session: AsyncSession, *, quiz: Quiz) -> Quiz:
        session.add(quiz)
        await session.flush()
        return quiz

    @staticmethod
    async def delete_by_id(session: AsyncSession, quiz_id: UUID) -> bool:
        stmt = delete(Quiz).where(Quiz.id == quiz_id).returning(Quiz.id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
