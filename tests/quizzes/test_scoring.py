from __future__ import annotations

import pytest

from quizdesk.quizzes.scoring import score_answers
from quizdesk.quizzes.types import QuestionSpec


def _question(correct_answer: int, option_count: int = 3) -> QuestionSpec:
    return QuestionSpec(
        question_text=f"Q{correct_answer}",
        options=tuple(f"opt-{index}" for index in range(option_count)),
        correct_answer=correct_answer,
    )


QUESTIONS = (_question(1), _question(0), _question(2))


def test_partial_match_scores_matching_positions() -> None:
    assert score_answers(QUESTIONS, [1, 0, 1]) == 2


def test_all_unanswered_scores_zero() -> None:
    assert score_answers(QUESTIONS, [None, None, None]) == 0


def test_all_correct_scores_question_count() -> None:
    assert score_answers(QUESTIONS, [1, 0, 2]) == len(QUESTIONS)


def test_short_answer_list_is_tolerated() -> None:
    assert score_answers(QUESTIONS, [1]) == 1
    assert score_answers(QUESTIONS, []) == 0


def test_extra_answers_are_ignored() -> None:
    assert score_answers(QUESTIONS, [1, 0, 2, 0, 0]) == 3


@pytest.mark.parametrize("answer", [-1, 3, 99])
def test_out_of_range_answers_never_score(answer: int) -> None:
    assert score_answers(QUESTIONS, [answer, answer, answer]) == 0


def test_boolean_answers_never_match_integer_indices() -> None:
    assert score_answers([_question(1), _question(0)], [True, False]) == 0


def test_empty_quiz_scores_zero() -> None:
    assert score_answers((), [0, 1]) == 0
