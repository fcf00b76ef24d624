from typing import Optional
from pydantic import BaseModel, ConfigDict


class CourseGet(BaseModel):
    id: int
    name: str
    code: str

    model_config = ConfigDict(from_attributes=True)


class GraphMetaResp(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LectureGet(BaseModel):
    id: int
    title: str
    link: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
