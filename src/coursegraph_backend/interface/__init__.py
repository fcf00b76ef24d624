from .users import UserType, UserCreate, UserGet
from .tokens import TokenEntry
from .courses import CourseGet, GraphMetaResp, LectureGet
from .questions import (
    QuestionType,
    ChoiceCreate,
    ChoiceGet,
    QuestionStatistics,
    TeacherQuestionResp,
    StudentQuestionResp,
    QuestionResp
)
