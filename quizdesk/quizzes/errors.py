from __future__ import annotations


class QuizError(Exception):
    pass


class QuizNotFoundError(QuizError):
    pass


class SubmissionNotFoundError(QuizError):
    pass


class CooldownActiveError(QuizError):
    def __init__(self, retry_after_hours: int) -> None:
        super().__init__(retry_after_hours)
        self.retry_after_hours = retry_after_hours


class QuestionValidationError(QuizError):
    def __init__(self, message: str = "Invalid question format") -> None:
        super().__init__(message)
        self.message = message


class QuestionIndexError(QuizError):
    pass
