from typing import List, Optional
from sqlalchemy.orm import Session

from coursegraph_backend.model.auth import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):

    def __init__(self, db: Session):
        super().__init__(db, User)

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.get_by_id_optional(user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_name(self, name: str) -> List[User]:
        return self.db.query(User).filter(User.name == name).order_by(User.id).all()
