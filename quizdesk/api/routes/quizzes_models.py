from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, StrictInt

from quizdesk.quizzes.types import QuizSummary, QuizView, SubmissionView


class QuestionResponse(BaseModel):
    question_text: str
    options: list[str]
    correct_answer: int | None = None


class QuizResponse(BaseModel):
    id: UUID
    title: str
    questions: list[QuestionResponse]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuizSummaryResponse(BaseModel):
    id: UUID
    title: str
    question_count: int = Field(ge=0)
    submissions_count: int = Field(ge=0)
    created_at: datetime


class QuizMutationResponse(BaseModel):
    message: str
    quiz: QuizResponse


class MessageResponse(BaseModel):
    message: str


class QuizCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=512)
    questions: list[Any] = Field(default_factory=list)


class QuizUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=512)
    questions: Any | None = None


class SubmitRequest(BaseModel):
    answers: list[StrictInt | None] = Field(default_factory=list)
    terminated: bool = False


class SubmitResponse(BaseModel):
    message: str
    score: int = Field(ge=0)


class SubmissionResponse(BaseModel):
    id: int
    quiz_id: UUID
    user_id: int
    answers: list[int | None]
    score: int = Field(ge=0)
    terminated: bool
    created_at: datetime
    user_name: str | None = None
    user_email: str | None = None


class AttemptStatusResponse(BaseModel):
    attempted: bool
    message: str | None = None
    retry_after_hours: int | None = None


def quiz_as_response(view: QuizView, *, include_correct_answers: bool) -> QuizResponse:
    return QuizResponse(
        id=view.quiz_id,
        title=view.title,
        questions=[
            QuestionResponse(
                question_text=question.question_text,
                options=list(question.options),
                correct_answer=question.correct_answer if include_correct_answers else None,
            )
            for question in view.questions
        ],
        created_at=view.created_at,
        updated_at=view.updated_at,
    )


def summary_as_response(summary: QuizSummary) -> QuizSummaryResponse:
    return QuizSummaryResponse(
        id=summary.quiz_id,
        title=summary.title,
        question_count=summary.question_count,
        submissions_count=summary.submissions_count,
        created_at=summary.created_at,
    )


def submission_as_response(view: SubmissionView) -> SubmissionResponse:
    return SubmissionResponse(
        id=view.attempt_id,
        quiz_id=view.quiz_id,
        user_id=view.user_id,
        answers=view.answers,
        score=view.score,
        terminated=view.terminated,
        created_at=view.created_at,
        user_name=view.user_name,
        user_email=view.user_email,
    )
