from typing import Optional
from sqlalchemy import BigInteger, Column, Enum, String
from sqlalchemy.orm import relationship

from coursegraph_backend.interface.users import UserType
from .base import Base


class User(Base):
    """
    Students and teachers share one table, discriminated by ``user_type``.

    Role specific relationship sets live alongside: a student is linked to the
    courses it is enrolled in (STUDENT_OF), a teacher to the courses it owns
    (TEACHER_OF).
    """
    __tablename__ = 'user'

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, index=True)
    password = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True)
    user_type = Column(Enum(UserType, name='user_type'), nullable=False)

    # Relationships
    enrolled_courses = relationship("Course", secondary="course_student", back_populates="students", uselist=True, lazy="select")
    taught_courses = relationship("Course", secondary="course_teacher", back_populates="teachers", uselist=True, lazy="select")
    answer_entries = relationship("AnswerEntry", back_populates="student", uselist=True, lazy="select")

    @property
    def is_student(self) -> bool:
        return self.user_type == UserType.STUDENT

    @property
    def is_teacher(self) -> bool:
        return self.user_type == UserType.TEACHER

    def __repr__(self) -> str:
        return f"<User id={self.id} type={self.user_type}>"


def same_user(a: Optional[User], b: Optional[User]) -> bool:
    """Users are the same when their ids match, nothing else is compared"""
    if a is None or b is None:
        return False
    return a.id is not None and a.id == b.id
