from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from coursegraph_backend.interface.questions import QuestionType
from coursegraph_backend.model.question import AnswerEntry, Question
from .base import BaseRepository, FULL_DEPTH


class QuestionRepository(BaseRepository[Question]):

    def __init__(self, db: Session):
        super().__init__(db, Question)

    def _load_options(self, depth: int) -> list:
        if depth == 0:
            return []
        if depth == FULL_DEPTH:
            return [
                selectinload(Question.choices),
                selectinload(Question.answer_entries),
                selectinload(Question.nodes),
            ]
        return [selectinload(Question.choices)]

    def find_by_id(self, question_id: int, depth: int = 1) -> Optional[Question]:
        return (
            self.db.query(Question)
            .options(*self._load_options(depth))
            .filter(Question.id == question_id)
            .first()
        )


class MultipleChoiceRepository(BaseRepository[Question]):
    """Restricted view on multiple choice questions, used to cascade their choices."""

    def __init__(self, db: Session):
        super().__init__(db, Question)

    def find_by_id(self, question_id: int) -> Optional[Question]:
        return (
            self.db.query(Question)
            .options(selectinload(Question.choices))
            .filter(
                Question.id == question_id,
                Question.question_type == QuestionType.MULTIPLE_CHOICE
            )
            .first()
        )


class AnswerEntryRepository(BaseRepository[AnswerEntry]):

    def __init__(self, db: Session):
        super().__init__(db, AnswerEntry)

    def find_by_student_and_question(self, student_id: int, question_id: int) -> List[AnswerEntry]:
        return (
            self.db.query(AnswerEntry)
            .filter(
                AnswerEntry.student_id == student_id,
                AnswerEntry.question_id == question_id
            )
            .order_by(AnswerEntry.created_at, AnswerEntry.id)
            .all()
        )
