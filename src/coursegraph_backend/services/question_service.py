import logging
from typing import Iterable, List, Optional, Union

from pydantic import ValidationError
from sqlalchemy.orm import Session

from coursegraph_backend.api.exceptions import (
    BadRequestException,
    ConflictException,
    NodeNotFoundException,
    PermissionDeniedException,
    QuestionNotFoundException,
)
from coursegraph_backend.interface.questions import ChoiceCreate, QuestionResp, QuestionType
from coursegraph_backend.model.auth import User
from coursegraph_backend.model.question import AnswerEntry, Choice, Question
from coursegraph_backend.permissions.service import PermissionService
from coursegraph_backend.repositories import (
    FULL_DEPTH,
    AnswerEntryRepository,
    CourseRepository,
    MultipleChoiceRepository,
    NodeRepository,
    QuestionRepository,
    RandomIdGenerator,
)
from coursegraph_backend.settings import settings
from .question_views import build_question_resp, projection_for

logger = logging.getLogger(__name__)

# Node lookups need two hops to reach the course: node -> graph -> course
NODE_COURSE_DEPTH = 2

RESUBMISSION_APPEND = "append"
RESUBMISSION_REJECT = "reject"


def _parse_question_type(question_type: Union[QuestionType, str]) -> QuestionType:
    try:
        return QuestionType(question_type)
    except ValueError:
        raise BadRequestException(f"Unsupported question type: {question_type}")


def _parse_choices(choices: Optional[Iterable]) -> List[ChoiceCreate]:
    try:
        return [
            choice if isinstance(choice, ChoiceCreate) else ChoiceCreate.model_validate(choice)
            for choice in (choices or [])
        ]
    except ValidationError as e:
        raise BadRequestException(f"Invalid choice: {e.errors()}")


def build_question(
    question_type: Union[QuestionType, str],
    description: str,
    choices: Optional[Iterable],
    answer: Optional[str],
    course_id: int
) -> Question:
    """
    Construct the question variant dictated by ``question_type``.

    Multiple choice questions carry their choices and the tag of the correct
    one; short answer questions carry neither.
    """
    question_type = _parse_question_type(question_type)
    choices = _parse_choices(choices)

    if not description:
        raise BadRequestException("A question needs a description")

    if question_type == QuestionType.MULTIPLE_CHOICE:
        if not choices:
            raise BadRequestException("A multiple choice question needs at least one choice")

        tags = [choice.tag for choice in choices]
        if len(set(tags)) != len(tags):
            raise BadRequestException("Choice tags must be unique")

        if answer not in tags:
            raise BadRequestException("The answer must be the tag of one of the choices")

        return Question(
            description=description,
            question_type=question_type,
            answer=answer,
            course_id=course_id,
            choices=[
                Choice(position=position, tag=choice.tag, content=choice.content)
                for position, choice in enumerate(choices)
            ],
        )

    elif question_type == QuestionType.SHORT_ANSWER:
        if choices or answer is not None:
            raise BadRequestException("A short answer question takes no choices and no answer")

        return Question(
            description=description,
            question_type=question_type,
            course_id=course_id,
        )

    raise BadRequestException(f"Unsupported question type: {question_type}")


class QuestionService:
    """
    Question authoring and answering on knowledge graph nodes.

    Every public operation checks existence and permission before touching
    anything and runs in a single transaction of the given session.
    """

    def __init__(
        self,
        db: Session,
        permission_service: Optional[PermissionService] = None,
        id_generator: Optional[RandomIdGenerator] = None,
        resubmission_policy: Optional[str] = None
    ):
        self.db = db
        self.node_repository = NodeRepository(db)
        self.question_repository = QuestionRepository(db)
        self.multiple_choice_repository = MultipleChoiceRepository(db)
        self.answer_entry_repository = AnswerEntryRepository(db)
        self.permission_service = permission_service or PermissionService(CourseRepository(db))
        self.id_generator = id_generator or RandomIdGenerator()
        self.resubmission_policy = (resubmission_policy or settings.ANSWER_RESUBMISSION).lower()

        if self.resubmission_policy not in (RESUBMISSION_APPEND, RESUBMISSION_REJECT):
            raise ValueError(f"Unknown answer resubmission policy: {self.resubmission_policy}")

    def _require_read(self, current_user: User, course_id: int) -> None:
        if not self.permission_service.check_read_perm_of_course(current_user, course_id):
            logger.warning(f"User {current_user.id} denied read access to course {course_id}")
            raise PermissionDeniedException()

    def _require_write(self, current_user: User, course_id: int) -> None:
        if not self.permission_service.check_write_perm_of_course(current_user, course_id):
            logger.warning(f"User {current_user.id} denied write access to course {course_id}")
            raise PermissionDeniedException()

    def _get_question_or_throw(self, question_id: int, depth: int = FULL_DEPTH) -> Question:
        question = self.question_repository.find_by_id(question_id, depth)
        if question is None:
            raise QuestionNotFoundException()
        return question

    def get_all_questions_of_node(self, current_user: User, node_id: str) -> List[QuestionResp]:
        """
        List the questions of a node.

        Teachers get statistics over all answers, students get their own
        answer (None where they have not answered yet).
        """
        node = self.node_repository.find_by_id(node_id, NODE_COURSE_DEPTH)
        if node is None:
            raise NodeNotFoundException()

        self._require_read(current_user, node.course_id)
        project = projection_for(current_user)

        responses = []
        for shallow_question in node.questions:
            question = self._get_question_or_throw(shallow_question.id, FULL_DEPTH)
            responses.append(project(question, current_user))

        return responses

    def get_question(self, current_user: User, question_id: int) -> QuestionResp:
        question = self._get_question_or_throw(question_id, FULL_DEPTH)

        self._require_read(current_user, question.course_id)

        return build_question_resp(question, current_user)

    def create_question(
        self,
        current_user: User,
        node_id: str,
        description: str,
        question_type: Union[QuestionType, str],
        choices: Optional[Iterable] = None,
        answer: Optional[str] = None
    ) -> QuestionResp:
        """
        Create a question and attach it to a node of the course graph.

        Raises:
            NodeNotFoundException: If the node does not exist
            PermissionDeniedException: If the user may not write the node's course
            BadRequestException: If the variant payload is invalid
        """
        node = self.node_repository.find_by_id(node_id, NODE_COURSE_DEPTH)
        if node is None:
            raise NodeNotFoundException()

        course_id = node.course_id
        self._require_write(current_user, course_id)

        question = build_question(question_type, description, choices, answer, course_id)

        try:
            self.id_generator.insert_with_unique_id(self.db, question)
            node.add_question(question)
            self.node_repository.save(node)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"User {current_user.id} created {question.question_type.value} question {question.id} on node {node_id}")

        return build_question_resp(question, current_user)

    def _delete_question(self, question: Question) -> None:
        if question.question_type == QuestionType.MULTIPLE_CHOICE:
            multiple_choice = self.multiple_choice_repository.find_by_id(question.id)
            if multiple_choice is None:
                raise QuestionNotFoundException()
            # Choices go first, the question row only afterwards
            multiple_choice.remove_choices()
            self.multiple_choice_repository.save(multiple_choice)

        for node in list(question.nodes):
            node.remove_question(question)

        self.question_repository.delete(question)

    def delete_question(self, current_user: User, question_id: int) -> None:
        question = self._get_question_or_throw(question_id, FULL_DEPTH)

        self._require_write(current_user, question.course_id)

        try:
            self._delete_question(question)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"User {current_user.id} deleted question {question_id}")

    def create_answer_entry(self, current_user: User, question_id: int, answer: str) -> AnswerEntry:
        """
        Record the answer of the current user.

        Answering only needs read access to the course; writing is reserved
        for authoring.
        """
        question = self._get_question_or_throw(question_id, 0)

        self._require_read(current_user, question.course_id)

        if answer is None:
            raise BadRequestException("An answer is required")

        if self.resubmission_policy == RESUBMISSION_REJECT:
            previous = self.answer_entry_repository.find_by_student_and_question(current_user.id, question.id)
            if previous:
                raise ConflictException("Question already answered")

        entry = AnswerEntry(student_id=current_user.id, question_id=question.id, answer=answer)

        try:
            self.id_generator.insert_with_unique_id(self.db, entry)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"User {current_user.id} answered question {question_id}")
        return entry
