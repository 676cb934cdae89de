from quizdesk.db.models.quiz_attempts import QuizAttempt
from quizdesk.db.models.quizzes import Quiz
from quizdesk.db.models.users import User

__all__ = [
    "Quiz",
    "QuizAttempt",
    "User",
]
