from .question_service import QuestionService, build_question
from .question_views import build_question_resp, question_statistics
from .user_service import UserService, hash_password, verify_password
from .course_service import CourseService

__all__ = [
    "QuestionService",
    "build_question",
    "build_question_resp",
    "question_statistics",
    "UserService",
    "hash_password",
    "verify_password",
    "CourseService",
]
