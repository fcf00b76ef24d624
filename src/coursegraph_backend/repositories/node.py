from typing import Optional
from sqlalchemy.orm import Session, selectinload

from coursegraph_backend.model.course import CourseGraph, Node
from coursegraph_backend.model.question import Question
from .base import BaseRepository, FULL_DEPTH


class NodeRepository(BaseRepository[Node]):
    """
    Knowledge graph nodes.

    ``depth`` decides how many relationship hops are loaded eagerly:
    1 loads the graph and the question list, 2 additionally reaches the
    course, -1 hydrates the questions with their choices and answers.
    """

    def __init__(self, db: Session):
        super().__init__(db, Node)

    def _load_options(self, depth: int) -> list:
        if depth == 0:
            return []
        if depth == 1:
            return [selectinload(Node.graph), selectinload(Node.questions)]
        options = [
            selectinload(Node.graph).selectinload(CourseGraph.course),
            selectinload(Node.lectures),
        ]
        if depth == FULL_DEPTH:
            options.append(selectinload(Node.questions).selectinload(Question.choices))
            options.append(selectinload(Node.questions).selectinload(Question.answer_entries))
        else:
            options.append(selectinload(Node.questions))
        return options

    def find_by_id(self, node_id: str, depth: int = 1) -> Optional[Node]:
        return (
            self.db.query(Node)
            .options(*self._load_options(depth))
            .filter(Node.id == node_id)
            .first()
        )
