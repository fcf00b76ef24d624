import logging
import secrets
from typing import Any, Optional, Type
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursegraph_backend.settings import settings
from .base import RepositoryError, DuplicateError

logger = logging.getLogger(__name__)


class IdAllocationError(RepositoryError):
    """Raised when no free id was found within the attempt budget."""

    def __init__(self, entity_type: str, attempts: int):
        super().__init__(f"Could not allocate an id for {entity_type} after {attempts} attempts")
        self.entity_type = entity_type
        self.attempts = attempts


class RandomIdGenerator:
    """
    Hands out random positive 63 bit ids and inserts entities with them.

    A candidate is probed against the store first; the insert itself runs in
    a SAVEPOINT, so when a concurrent writer took the same id in between the
    primary key constraint rejects the row and another candidate is drawn.
    """

    def __init__(self, max_attempts: Optional[int] = None, bits: int = 63):
        self.max_attempts = settings.ID_ALLOCATION_ATTEMPTS if max_attempts is None else max_attempts
        self.bits = bits

    def generate_random_long_id(self) -> int:
        value = 0
        while value == 0:
            value = secrets.randbits(self.bits)
        return value

    def is_taken(self, db: Session, model: Type[Any], candidate: int) -> bool:
        return db.get(model, candidate) is not None

    def insert_with_unique_id(self, db: Session, entity: Any) -> Any:
        """
        Assign a free id to ``entity`` and flush it.

        Raises:
            IdAllocationError: If every attempt collided
            DuplicateError: If a constraint other than the primary key failed
        """
        model = type(entity)

        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generate_random_long_id()

            if self.is_taken(db, model, candidate):
                logger.debug(f"{model.__name__} id {candidate} in use (attempt {attempt})")
                continue

            entity.id = candidate
            try:
                with db.begin_nested():
                    db.add(entity)
            except IntegrityError as e:
                if self.is_taken(db, model, candidate):
                    logger.debug(f"{model.__name__} id {candidate} taken concurrently (attempt {attempt})")
                    continue
                raise DuplicateError(model.__name__, {"id": candidate}) from e

            return entity

        logger.error(f"Id allocation for {model.__name__} exhausted after {self.max_attempts} attempts")
        raise IdAllocationError(model.__name__, self.max_attempts)
