from __future__ import annotations

from collections.abc import Sequence

from quizdesk.quizzes.types import QuestionSpec


def _is_answer_index(value: object) -> bool:
    # bool is an int subclass; True must not match option 1.
    return isinstance(value, int) and not isinstance(value, bool)


def score_answers(
    questions: Sequence[QuestionSpec],
    answers: Sequence[int | None],
) -> int:
    score = 0
    for position, question in enumerate(questions):
        if position >= len(answers):
            break
        answer = answers[position]
        if _is_answer_index(answer) and answer == question.correct_answer:
            score += 1
    return score
