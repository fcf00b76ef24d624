from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from coursegraph_backend.api.exceptions import IllegalUserTypeException


class UserType(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_text(cls, text: Optional[str]) -> "UserType":
        for user_type in cls:
            if str(user_type) == text:
                return user_type
        raise IllegalUserTypeException(f"Illegal user type: {text}")


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1)
    user_type: UserType


class UserGet(BaseModel):
    id: int
    name: str
    email: str
    user_type: UserType

    model_config = ConfigDict(from_attributes=True)
