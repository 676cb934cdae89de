from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from quizdesk.quizzes.errors import QuestionValidationError
from quizdesk.quizzes.types import QuestionSpec


def parse_question(raw: Any) -> QuestionSpec:
    if not isinstance(raw, Mapping):
        raise QuestionValidationError

    question_text = raw.get("question_text")
    options = raw.get("options")
    correct_answer = raw.get("correct_answer")

    if not isinstance(question_text, str):
        raise QuestionValidationError
    if not isinstance(options, (list, tuple)) or not options:
        raise QuestionValidationError
    if not all(isinstance(option, str) for option in options):
        raise QuestionValidationError
    if not isinstance(correct_answer, int) or isinstance(correct_answer, bool):
        raise QuestionValidationError
    if correct_answer < 0 or correct_answer >= len(options):
        raise QuestionValidationError

    return QuestionSpec(
        question_text=question_text,
        options=tuple(options),
        correct_answer=correct_answer,
    )


def parse_questions(raw: Any) -> list[QuestionSpec]:
    if not isinstance(raw, (list, tuple)):
        raise QuestionValidationError("Questions must be an array")
    return [parse_question(item) for item in raw]


def load_stored_questions(payload: list[dict[str, Any]] | None) -> tuple[QuestionSpec, ...]:
    # Rows were validated on write; stored JSON is trusted here.
    return tuple(
        QuestionSpec(
            question_text=str(item.get("question_text", "")),
            options=tuple(item.get("options") or ()),
            correct_answer=int(item.get("correct_answer", -1)),
        )
        for item in (payload or [])
    )
