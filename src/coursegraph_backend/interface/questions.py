from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    SHORT_ANSWER = "SHORT_ANSWER"


class ChoiceCreate(BaseModel):
    tag: str = Field(min_length=1, max_length=32)
    content: str


class ChoiceGet(BaseModel):
    tag: str
    content: str

    model_config = ConfigDict(from_attributes=True)


class QuestionStatistics(BaseModel):
    """Aggregates over all answer entries of a question"""
    answer_count: int = 0
    student_count: int = 0
    # Only filled for multiple choice questions
    correct_count: Optional[int] = None
    choice_counts: Dict[str, int] = Field(default_factory=dict)


class QuestionRespBase(BaseModel):
    id: int
    description: str
    question_type: QuestionType
    course_id: int
    choices: Optional[List[ChoiceGet]] = None


class TeacherQuestionResp(QuestionRespBase):
    view: Literal["TEACHER"] = "TEACHER"
    answer: Optional[str] = None
    statistics: QuestionStatistics


class StudentQuestionResp(QuestionRespBase):
    view: Literal["STUDENT"] = "STUDENT"
    my_answer: Optional[str] = None
    submission_count: int = 0


QuestionResp = Annotated[
    Union[TeacherQuestionResp, StudentQuestionResp],
    Field(discriminator="view")
]
