from __future__ import annotations

from datetime import datetime, timedelta, timezone

from quizdesk.quizzes.cooldown import (
    allow_new_attempt,
    cooldown_rejection_message,
    cooldown_status_message,
)

UTC = timezone.utc
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def test_first_attempt_is_allowed() -> None:
    decision = allow_new_attempt(now_utc=NOW, last_attempt_at=None)

    assert decision.allowed is True
    assert decision.retry_after_hours is None


def test_attempt_one_minute_short_of_window_waits_one_hour() -> None:
    decision = allow_new_attempt(now_utc=NOW, last_attempt_at=NOW - timedelta(hours=23, minutes=59))

    assert decision.allowed is False
    assert decision.retry_after_hours == 1


def test_attempt_exactly_at_window_boundary_is_allowed() -> None:
    decision = allow_new_attempt(now_utc=NOW, last_attempt_at=NOW - timedelta(hours=24))

    assert decision.allowed is True


def test_attempt_five_hours_ago_waits_nineteen_hours() -> None:
    decision = allow_new_attempt(now_utc=NOW, last_attempt_at=NOW - timedelta(hours=5))

    assert decision.allowed is False
    assert decision.retry_after_hours == 19


def test_partial_hours_round_up() -> None:
    decision = allow_new_attempt(now_utc=NOW, last_attempt_at=NOW - timedelta(hours=5, minutes=30))

    assert decision.allowed is False
    assert decision.retry_after_hours == 19


def test_attempt_just_now_waits_full_window() -> None:
    decision = allow_new_attempt(now_utc=NOW, last_attempt_at=NOW)

    assert decision.retry_after_hours == 24


def test_messages_include_hours() -> None:
    assert cooldown_rejection_message(19) == "You can attempt this quiz again after 19 hours."
    assert cooldown_status_message(3) == "You can retake this quiz after 3 hours."
