"""
Repository pattern implementation for direct database access.

This package provides the store contracts consumed by the services: nodes,
questions, answer entries, users and courses in the database, tokens in the
Redis cache.
"""

from .base import (
    BaseRepository,
    RepositoryError,
    NotFoundError,
    DuplicateError,
    FULL_DEPTH
)
from .ids import RandomIdGenerator, IdAllocationError
from .node import NodeRepository
from .question import QuestionRepository, MultipleChoiceRepository, AnswerEntryRepository
from .user import UserRepository
from .course import CourseRepository
from .token import RedisTokenRepository

__all__ = [
    "BaseRepository",
    "RepositoryError", 
    "NotFoundError",
    "DuplicateError",
    "FULL_DEPTH",
    "RandomIdGenerator",
    "IdAllocationError",
    "NodeRepository",
    "QuestionRepository",
    "MultipleChoiceRepository",
    "AnswerEntryRepository",
    "UserRepository",
    "CourseRepository",
    "RedisTokenRepository"
]
