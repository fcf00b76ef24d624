"""
Store contracts shared by all repositories.

Repositories add and flush but never commit. The calling service owns the
transaction, so a create and the attach-to-node that follows it become
visible together or not at all.
"""

from abc import ABC
from typing import Any, Dict, Generic, Optional, Type, TypeVar
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

T = TypeVar('T')

# Depth value that asks a repository to hydrate everything reachable
FULL_DEPTH = -1


class RepositoryError(Exception):
    """Base exception for repository operations."""
    pass


class NotFoundError(RepositoryError):
    """Raised by ``get_by_id`` when no row has the id."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateError(RepositoryError):
    """Raised when a flush violates a unique or check constraint."""

    def __init__(self, entity_type: str, criteria: Dict[str, Any]):
        super().__init__(f"{entity_type} conflicts with an existing row: {criteria}")
        self.entity_type = entity_type
        self.criteria = criteria


class BaseRepository(ABC, Generic[T]):
    """
    Lookups by primary key plus flushing writes for one mapped class.

    Subclasses add the domain specific finders, e.g. depth controlled
    loading of nodes and questions.
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: Any) -> T:
        """
        Raises:
            NotFoundError: If no entity has this id
        """
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise NotFoundError(self.model.__name__, entity_id)
        return entity

    def get_by_id_optional(self, entity_id: Any) -> Optional[T]:
        return self.db.get(self.model, entity_id)

    def save(self, entity: T) -> T:
        """
        Stage ``entity`` and flush so constraint violations surface here.

        Raises:
            DuplicateError: If the flush violates a constraint
            RepositoryError: If the flush fails otherwise
        """
        try:
            self.db.add(entity)
            self.db.flush()
            return entity
        except IntegrityError as e:
            raise DuplicateError(self.model.__name__, self._column_values(entity)) from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to save {self.model.__name__}: {str(e)}") from e

    def delete(self, entity: T) -> None:
        try:
            self.db.delete(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to delete {self.model.__name__}: {str(e)}") from e

    def _column_values(self, entity: T) -> Dict[str, Any]:
        mapper = inspect(type(entity))
        return {
            column.key: getattr(entity, column.key, None)
            for column in mapper.column_attrs
        }
