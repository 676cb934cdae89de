from quizdesk.db.repo.quiz_attempts_repo import QuizAttemptsRepo
from quizdesk.db.repo.quizzes_repo import QuizzesRepo
from quizdesk.db.repo.users_repo import UsersRepo

__all__ = [
    "QuizAttemptsRepo",
    "QuizzesRepo",
    "UsersRepo",
]
