from __future__ import annotations

import math
from datetime import datetime

from quizdesk.quizzes.types import CooldownDecision

ATTEMPT_COOLDOWN_HOURS = 24
SECONDS_PER_HOUR = 3600


def hours_since(*, now_utc: datetime, then_utc: datetime) -> float:
    return (now_utc - then_utc).total_seconds() / SECONDS_PER_HOUR


def allow_new_attempt(
    *,
    now_utc: datetime,
    last_attempt_at: datetime | None,
) -> CooldownDecision:
    if last_attempt_at is None:
        return CooldownDecision(allowed=True)

    elapsed_hours = hours_since(now_utc=now_utc, then_utc=last_attempt_at)
    if elapsed_hours >= ATTEMPT_COOLDOWN_HOURS:
        return CooldownDecision(allowed=True)

    return CooldownDecision(
        allowed=False,
        retry_after_hours=math.ceil(ATTEMPT_COOLDOWN_HOURS - elapsed_hours),
    )


def cooldown_rejection_message(retry_after_hours: int) -> str:
    return f"You can attempt this quiz again after {retry_after_hours} hours."


def cooldown_status_message(retry_after_hours: int) -> str:
    return f"You can retake this quiz after {retry_after_hours} hours."
