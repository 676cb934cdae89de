from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True, slots=True)
class QuestionSpec:
    question_text: str
    options: tuple[str, ...]
    correct_answer: int

    def as_payload(self) -> dict[str, Any]:
        return {
            "question_text": self.question_text,
            "options": list(self.options),
            "correct_answer": self.correct_answer,
        }


@dataclass(frozen=True, slots=True)
class QuizView:
    quiz_id: UUID
    title: str
    questions: tuple[QuestionSpec, ...]
    creator_user_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class QuizSummary:
    quiz_id: UUID
    title: str
    question_count: int
    submissions_count: int
    created_at: datetime


@dataclass(frozen=True, slots=True)
class CooldownDecision:
    allowed: bool
    retry_after_hours: int | None = None


@dataclass(slots=True)
class SubmitResult:
    attempt_id: int
    score: int
    terminated: bool


@dataclass(slots=True)
class AttemptStatusView:
    attempted: bool
    message: str | None = None
    retry_after_hours: int | None = None


@dataclass(slots=True)
class SubmissionView:
    attempt_id: int
    quiz_id: UUID
    user_id: int
    answers: list[int | None]
    score: int
    terminated: bool
    created_at: datetime
    user_name: str | None = None
    user_email: str | None = None
