from .base import Base
from .auth import User, same_user
from .course import Course, CourseGraph, Node, Lecture, course_student, course_teacher, node_lecture
from .question import Question, Choice, AnswerEntry, node_question

__all__ = [
    'Base',
    # Auth models
    'User',
    'same_user',
    # Course models
    'Course',
    'CourseGraph',
    'Node',
    'Lecture',
    'course_student',
    'course_teacher',
    'node_lecture',
    # Question models
    'Question',
    'Choice',
    'AnswerEntry',
    'node_question',
]
