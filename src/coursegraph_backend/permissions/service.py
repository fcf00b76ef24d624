import logging
from typing import List, Optional

from coursegraph_backend.model.auth import User
from coursegraph_backend.repositories.course import CourseRepository
from .rules import CoursePermissionRule, CourseTeacherRule, EnrolledStudentRule

logger = logging.getLogger(__name__)


class PermissionService:
    """
    Answers read/write questions for a user on a course.

    Both checks are pure predicates over the configured rules: access is
    granted as soon as one rule allows it. By default students of a course
    and its teachers may read, only its teachers may write. A course that does
    not exist is simply not granted, so callers cannot tell it apart from one
    they lack access to.
    """

    def __init__(
        self,
        courses: CourseRepository,
        read_rules: Optional[List[CoursePermissionRule]] = None,
        write_rules: Optional[List[CoursePermissionRule]] = None
    ):
        self.courses = courses
        self.read_rules = read_rules if read_rules is not None else [
            EnrolledStudentRule(courses),
            CourseTeacherRule(courses),
        ]
        self.write_rules = write_rules if write_rules is not None else [
            CourseTeacherRule(courses),
        ]

    def _evaluate(self, rules: List[CoursePermissionRule], user: Optional[User], course_id: Optional[int]) -> bool:
        if user is None or user.id is None or course_id is None:
            return False
        granted = any(rule.allows(user, course_id) for rule in rules)
        if not granted:
            logger.debug(f"No rule grants user {user.id} access to course {course_id}")
        return granted

    def check_read_perm_of_course(self, user: Optional[User], course_id: Optional[int]) -> bool:
        return self._evaluate(self.read_rules, user, course_id)

    def check_write_perm_of_course(self, user: Optional[User], course_id: Optional[int]) -> bool:
        return self._evaluate(self.write_rules, user, course_id)
