from __future__ import annotations

from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)


class AttemptNotifier(Protocol):
    def warn(self, message: str) -> None: ...

    def info(self, title: str, message: str) -> None: ...

    def error(self, title: str, message: str) -> None: ...


class LoggingNotifier:
    def warn(self, message: str) -> None:
        logger.warning("quiz_attempt_notice", level_hint="warn", message=message)

    def info(self, title: str, message: str) -> None:
        logger.info("quiz_attempt_notice", level_hint="info", title=title, message=message)

    def error(self, title: str, message: str) -> None:
        logger.error("quiz_attempt_notice", level_hint="error", title=title, message=message)
