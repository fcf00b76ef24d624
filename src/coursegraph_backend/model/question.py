from datetime import datetime, timezone
from sqlalchemy import (
    BigInteger, CheckConstraint, Column, DateTime, Enum,
    ForeignKey, Integer, String, Table, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship

from coursegraph_backend.interface.questions import QuestionType
from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


node_question = Table(
    'node_question',
    Base.metadata,
    Column('node_id', ForeignKey('node.id', ondelete='CASCADE'), primary_key=True),
    Column('question_id', ForeignKey('question.id', ondelete='CASCADE'), primary_key=True),
)


class Question(Base):
    """
    Both question variants share one table, ``question_type`` is the
    discriminant. ``choices`` and ``answer`` only carry data for
    multiple choice questions.
    """
    __tablename__ = 'question'
    __table_args__ = (
        CheckConstraint(
            "(question_type = 'MULTIPLE_CHOICE') OR (answer IS NULL)",
            name='ck_question_short_answer_has_no_answer'
        ),
    )

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    created_at = Column(DateTime(True), nullable=False, default=_utcnow)
    description = Column(Text, nullable=False)
    question_type = Column(Enum(QuestionType, name='question_type'), nullable=False)
    answer = Column(String(255))
    course_id = Column(ForeignKey('course.id', ondelete='CASCADE'), nullable=False, index=True)

    # Relationships
    choices = relationship("Choice", back_populates="question", uselist=True, cascade="all, delete-orphan", order_by="Choice.position")
    nodes = relationship("Node", secondary=node_question, back_populates="questions", uselist=True)
    answer_entries = relationship("AnswerEntry", back_populates="question", uselist=True, cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_multiple_choice(self) -> bool:
        return self.question_type == QuestionType.MULTIPLE_CHOICE

    def remove_choices(self) -> None:
        self.choices.clear()


class Choice(Base):
    __tablename__ = 'choice'
    __table_args__ = (
        UniqueConstraint('question_id', 'tag', name='uq_choice_question_tag'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(ForeignKey('question.id', ondelete='CASCADE'), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    tag = Column(String(32), nullable=False)
    content = Column(Text, nullable=False)

    question = relationship("Question", back_populates="choices")


class AnswerEntry(Base):
    __tablename__ = 'answer_entry'

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    created_at = Column(DateTime(True), nullable=False, default=_utcnow)
    student_id = Column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    question_id = Column(ForeignKey('question.id', ondelete='CASCADE'), nullable=False, index=True)
    answer = Column(Text, nullable=False)

    student = relationship("User", back_populates="answer_entries")
    question = relationship("Question", back_populates="answer_entries")
