import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from coursegraph_backend.api.exceptions import (
    CourseNotFoundException,
    NodeNotFoundException,
    PermissionDeniedException,
)
from coursegraph_backend.interface.courses import CourseGet, GraphMetaResp, LectureGet
from coursegraph_backend.interface.users import UserGet
from coursegraph_backend.model.auth import User
from coursegraph_backend.model.course import Course
from coursegraph_backend.permissions.service import PermissionService
from coursegraph_backend.repositories import CourseRepository, NodeRepository

logger = logging.getLogger(__name__)


class CourseService:
    """Read side of courses, graphs and lectures"""

    def __init__(self, db: Session, permission_service: Optional[PermissionService] = None):
        self.db = db
        self.course_repository = CourseRepository(db)
        self.node_repository = NodeRepository(db)
        self.permission_service = permission_service or PermissionService(self.course_repository)

    def _get_course_or_throw(self, course_id: int) -> Course:
        course = self.course_repository.find_by_id(course_id)
        if course is None:
            raise CourseNotFoundException()
        return course

    def _require_read(self, current_user: User, course_id: int) -> None:
        if not self.permission_service.check_read_perm_of_course(current_user, course_id):
            logger.warning(f"User {current_user.id} denied read access to course {course_id}")
            raise PermissionDeniedException()

    def get_course(self, current_user: User, course_id: int) -> CourseGet:
        course = self._get_course_or_throw(course_id)
        self._require_read(current_user, course.id)
        return CourseGet.model_validate(course)

    def list_graphs(self, current_user: User, course_id: int) -> List[GraphMetaResp]:
        course = self._get_course_or_throw(course_id)
        self._require_read(current_user, course.id)
        return [GraphMetaResp.model_validate(graph) for graph in self.course_repository.find_graphs(course.id)]

    def list_students(
        self,
        current_user: User,
        course_id: int,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> List[UserGet]:
        """Roster of a course, only visible to its teachers"""
        course = self._get_course_or_throw(course_id)

        if not self.permission_service.check_write_perm_of_course(current_user, course.id):
            logger.warning(f"User {current_user.id} denied the roster of course {course.id}")
            raise PermissionDeniedException()

        students = self.course_repository.find_students(course.id, limit=limit, offset=offset)
        return [UserGet.model_validate(student) for student in students]

    def get_lectures_of_node(self, current_user: User, node_id: str) -> List[LectureGet]:
        node = self.node_repository.find_by_id(node_id, 2)
        if node is None:
            raise NodeNotFoundException()

        self._require_read(current_user, node.course_id)
        return [LectureGet.model_validate(lecture) for lecture in node.lectures]
