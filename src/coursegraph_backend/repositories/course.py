from typing import List, Optional
from sqlalchemy.orm import Session

from coursegraph_backend.model.auth import User
from coursegraph_backend.model.course import Course, CourseGraph, course_student, course_teacher
from .base import BaseRepository


class CourseRepository(BaseRepository[Course]):
    """
    Courses and the STUDENT_OF / TEACHER_OF / GRAPH_OF relationships around them.
    """

    def __init__(self, db: Session):
        super().__init__(db, Course)

    def find_by_id(self, course_id: int) -> Optional[Course]:
        return self.get_by_id_optional(course_id)

    def find_by_name(self, name: str) -> Optional[Course]:
        return self.db.query(Course).filter(Course.name == name).first()

    def find_by_code(self, code: str) -> Optional[Course]:
        return self.db.query(Course).filter(Course.code == code).first()

    def find_students(self, course_id: int, limit: Optional[int] = None, offset: Optional[int] = None) -> List[User]:
        query = (
            self.db.query(User)
            .join(course_student, course_student.c.user_id == User.id)
            .filter(course_student.c.course_id == course_id)
            .order_by(User.name, User.id)
        )

        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        return query.all()

    def count_students(self, course_id: int) -> int:
        return (
            self.db.query(course_student.c.course_id)
            .filter(course_student.c.course_id == course_id)
            .count()
        )

    def find_teachers(self, course_id: int) -> List[User]:
        return (
            self.db.query(User)
            .join(course_teacher, course_teacher.c.user_id == User.id)
            .filter(course_teacher.c.course_id == course_id)
            .order_by(User.name, User.id)
            .all()
        )

    def find_graphs(self, course_id: int) -> List[CourseGraph]:
        return (
            self.db.query(CourseGraph)
            .filter(CourseGraph.course_id == course_id)
            .order_by(CourseGraph.name, CourseGraph.id)
            .all()
        )

    def is_student_of(self, user_id: int, course_id: int) -> bool:
        return (
            self.db.query(course_student.c.course_id)
            .filter(
                course_student.c.user_id == user_id,
                course_student.c.course_id == course_id
            )
            .count() > 0
        )

    def is_teacher_of(self, user_id: int, course_id: int) -> bool:
        return (
            self.db.query(course_teacher.c.course_id)
            .filter(
                course_teacher.c.user_id == user_id,
                course_teacher.c.course_id == course_id
            )
            .count() > 0
        )
