from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quizdesk.client.session import AttemptSession

Sleep = Callable[[float], Awaitable[None]]


class AttemptCountdown:
    def __init__(
        self,
        session: AttemptSession,
        *,
        interval_seconds: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._session = session
        self._interval_seconds = interval_seconds
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    def stop(self) -> None:
        task = self._task
        if task is None or task.done():
            return
        # The timeout transition runs inside this task; it must finish its POST.
        if task is asyncio.current_task():
            return
        task.cancel()

    async def wait(self) -> None:
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _run(self) -> None:
        while self._session.is_in_progress:
            await self._sleep(self._interval_seconds)
            await self._session.tick()
