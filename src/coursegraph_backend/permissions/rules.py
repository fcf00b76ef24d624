from abc import ABC, abstractmethod

from coursegraph_backend.model.auth import User
from coursegraph_backend.repositories.course import CourseRepository


class CoursePermissionRule(ABC):
    """A single grant over ``{user, course}``; rules never deny, they only allow"""

    @abstractmethod
    def allows(self, user: User, course_id: int) -> bool:
        pass


class EnrolledStudentRule(CoursePermissionRule):
    """Grants access to students enrolled in the course (STUDENT_OF)"""

    def __init__(self, courses: CourseRepository):
        self.courses = courses

    def allows(self, user: User, course_id: int) -> bool:
        return self.courses.is_student_of(user.id, course_id)


class CourseTeacherRule(CoursePermissionRule):
    """Grants access to the teachers owning the course (TEACHER_OF)"""

    def __init__(self, courses: CourseRepository):
        self.courses = courses

    def allows(self, user: User, course_id: int) -> bool:
        return self.courses.is_teacher_of(user.id, course_id)
