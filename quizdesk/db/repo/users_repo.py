from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.models.users import User


class UsersRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        name: str,
        email: str,
        role: str = "student",
    ) -> User:
        user = User(name=name, email=email, role=role)
        session.add(user)
        await session.flush()
        return user
