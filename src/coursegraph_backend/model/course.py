from sqlalchemy import BigInteger, Column, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship

from .base import Base


course_student = Table(
    'course_student',
    Base.metadata,
    Column('course_id', ForeignKey('course.id', ondelete='CASCADE'), primary_key=True),
    Column('user_id', ForeignKey('user.id', ondelete='CASCADE'), primary_key=True),
)

course_teacher = Table(
    'course_teacher',
    Base.metadata,
    Column('course_id', ForeignKey('course.id', ondelete='CASCADE'), primary_key=True),
    Column('user_id', ForeignKey('user.id', ondelete='CASCADE'), primary_key=True),
)

node_lecture = Table(
    'node_lecture',
    Base.metadata,
    Column('node_id', ForeignKey('node.id', ondelete='CASCADE'), primary_key=True),
    Column('lecture_id', ForeignKey('lecture.id', ondelete='CASCADE'), primary_key=True),
)


class Course(Base):
    __tablename__ = 'course'

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, unique=True)
    code = Column(String(64), nullable=False, unique=True)

    # Relationships
    students = relationship("User", secondary=course_student, back_populates="enrolled_courses", uselist=True, lazy="select", order_by="User.name")
    teachers = relationship("User", secondary=course_teacher, back_populates="taught_courses", uselist=True, lazy="select")
    graphs = relationship("CourseGraph", back_populates="course", uselist=True, cascade="all, delete-orphan", order_by="CourseGraph.name")


class CourseGraph(Base):
    __tablename__ = 'course_graph'

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    description = Column(String(4096))
    course_id = Column(ForeignKey('course.id', ondelete='CASCADE'), nullable=False, index=True)

    # Relationships
    course = relationship("Course", back_populates="graphs")
    nodes = relationship("Node", back_populates="graph", uselist=True, cascade="all, delete-orphan")


class Node(Base):
    __tablename__ = 'node'

    id = Column(String(255), primary_key=True)
    name = Column(String(255))
    graph_id = Column(ForeignKey('course_graph.id', ondelete='CASCADE'), nullable=False, index=True)

    # Relationships
    graph = relationship("CourseGraph", back_populates="nodes")
    questions = relationship("Question", secondary="node_question", back_populates="nodes", uselist=True, order_by="Question.created_at")
    lectures = relationship("Lecture", secondary=node_lecture, uselist=True, order_by="Lecture.title")

    @property
    def course_id(self):
        # Two hops away: node -> graph -> course
        if self.graph is None:
            return None
        return self.graph.course_id

    def add_question(self, question) -> None:
        if question not in self.questions:
            self.questions.append(question)

    def remove_question(self, question) -> None:
        if question in self.questions:
            self.questions.remove(question)


class Lecture(Base):
    __tablename__ = 'lecture'

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    title = Column(String(255), nullable=False)
    link = Column(Text)
