"""Per-role projections of a hydrated question."""

from collections import Counter
from datetime import datetime, timezone
from typing import Callable, List, Optional

from coursegraph_backend.api.exceptions import PermissionDeniedException
from coursegraph_backend.interface.questions import (
    ChoiceGet,
    QuestionStatistics,
    QuestionType,
    StudentQuestionResp,
    TeacherQuestionResp,
)
from coursegraph_backend.interface.users import UserType
from coursegraph_backend.model.auth import User
from coursegraph_backend.model.question import AnswerEntry, Question


def _choices(question: Question) -> Optional[List[ChoiceGet]]:
    if question.question_type == QuestionType.MULTIPLE_CHOICE:
        return [ChoiceGet.model_validate(choice) for choice in question.choices]
    elif question.question_type == QuestionType.SHORT_ANSWER:
        return None
    raise ValueError(f"Unknown question type: {question.question_type}")


def question_statistics(question: Question) -> QuestionStatistics:
    entries = list(question.answer_entries)
    statistics = QuestionStatistics(
        answer_count=len(entries),
        student_count=len({entry.student_id for entry in entries}),
    )

    if question.question_type == QuestionType.MULTIPLE_CHOICE:
        counts = Counter(entry.answer for entry in entries)
        statistics.correct_count = counts.get(question.answer, 0)
        statistics.choice_counts = {choice.tag: counts.get(choice.tag, 0) for choice in question.choices}

    return statistics


def _submitted_at(entry: AnswerEntry) -> datetime:
    # SQLite hands timestamps back naive, fresh rows still carry UTC
    if entry.created_at.tzinfo is not None:
        return entry.created_at.astimezone(timezone.utc).replace(tzinfo=None)
    return entry.created_at


def teacher_view(question: Question, current_user: User) -> TeacherQuestionResp:
    return TeacherQuestionResp(
        id=question.id,
        description=question.description,
        question_type=question.question_type,
        course_id=question.course_id,
        choices=_choices(question),
        answer=question.answer,
        statistics=question_statistics(question),
    )


def student_view(question: Question, current_user: User) -> StudentQuestionResp:
    own: List[AnswerEntry] = sorted(
        (entry for entry in question.answer_entries if entry.student_id == current_user.id),
        key=lambda entry: (_submitted_at(entry), entry.id),
    )
    return StudentQuestionResp(
        id=question.id,
        description=question.description,
        question_type=question.question_type,
        course_id=question.course_id,
        choices=_choices(question),
        # The first submission is the one on record, later ones are history
        my_answer=own[0].answer if own else None,
        submission_count=len(own),
    )


def projection_for(current_user: User) -> Callable:
    """Pick the view matching the caller's role; any other role is rejected"""
    if current_user.user_type == UserType.TEACHER:
        return teacher_view
    elif current_user.user_type == UserType.STUDENT:
        return student_view
    raise PermissionDeniedException(f"No question view for user type {current_user.user_type}")


def build_question_resp(question: Question, current_user: User):
    return projection_for(current_user)(question, current_user)
