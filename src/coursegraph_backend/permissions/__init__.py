"""
Course permission checks.

Main components:
- rules: pluggable grants over a user and a course
- service: read/write predicates evaluated over the configured rules
"""

from .rules import CoursePermissionRule, EnrolledStudentRule, CourseTeacherRule
from .service import PermissionService

__all__ = [
    "CoursePermissionRule",
    "EnrolledStudentRule",
    "CourseTeacherRule",
    "PermissionService",
]
