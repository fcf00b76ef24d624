"""
Account workflow on top of the user table and the token store.

Passwords are kept as bcrypt hashes, sessions are the tokens issued by
``RedisTokenRepository``.
"""

import logging
from typing import Optional

import bcrypt
from pydantic import ValidationError
from sqlalchemy.orm import Session

from coursegraph_backend.api.exceptions import (
    BadRequestException,
    ConflictException,
    UnauthorizedException,
    UserNotFoundException,
)
from coursegraph_backend.interface.users import UserCreate, UserType
from coursegraph_backend.model.auth import User
from coursegraph_backend.repositories import (
    DuplicateError,
    RandomIdGenerator,
    RedisTokenRepository,
    UserRepository,
)
from coursegraph_backend.settings import settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False


class UserService:

    def __init__(
        self,
        db: Session,
        tokens: Optional[RedisTokenRepository] = None,
        id_generator: Optional[RandomIdGenerator] = None
    ):
        self.db = db
        self.user_repository = UserRepository(db)
        self.tokens = tokens or RedisTokenRepository()
        self.id_generator = id_generator or RandomIdGenerator()

    def get_user(self, user_id: int) -> User:
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            raise UserNotFoundException()
        return user

    def register(self, name: str, email: str, password: str, user_type) -> User:
        """
        Create a student or teacher account.

        ``user_type`` may be the enum or its text form.

        Raises:
            BadRequestException: If a field is missing or malformed
            ConflictException: If the email is already registered
        """
        if not isinstance(user_type, UserType):
            user_type = UserType.from_text(user_type)

        try:
            payload = UserCreate(name=name, email=email, password=password, user_type=user_type)
        except ValidationError as e:
            raise BadRequestException(e.errors())

        if self.user_repository.find_by_email(payload.email) is not None:
            raise ConflictException("Email already registered")

        user = User(
            name=payload.name,
            email=payload.email,
            password=hash_password(payload.password),
            user_type=payload.user_type,
        )

        try:
            self.id_generator.insert_with_unique_id(self.db, user)
            self.db.commit()
        except DuplicateError:
            self.db.rollback()
            raise ConflictException("Email already registered")
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Registered {user.user_type} {user.id}")
        return user

    async def login(self, email: str, password: str) -> str:
        """Check the credentials and return the wire form of a fresh token"""
        user = self.user_repository.find_by_email(email)

        if user is None or not verify_password(password, user.password):
            logger.warning(f"Failed login for {email}")
            raise UnauthorizedException("Invalid email or password")

        token_entry = await self.tokens.create_token(user.id)
        return self.tokens.get_authentication(token_entry)

    async def logout(self, user: User) -> None:
        await self.tokens.delete_token(user.id)

    async def authenticate(self, authentication: Optional[str]) -> Optional[User]:
        """
        Resolve a presented token to its user.

        Malformed, unknown or expired tokens give None; so does a valid token
        whose user no longer exists.
        """
        token_entry = self.tokens.get_token(authentication)
        if token_entry is None:
            return None

        if not await self.tokens.check_token(token_entry):
            return None

        return self.user_repository.find_by_id(token_entry.user_id)

    def update_profile(self, user: User, name: Optional[str] = None, password: Optional[str] = None) -> User:
        if name is not None:
            if not name.strip():
                raise BadRequestException("Name must not be empty")
            user.name = name

        if password is not None:
            if not password:
                raise BadRequestException("Password must not be empty")
            user.password = hash_password(password)

        try:
            self.user_repository.save(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Updated profile of user {user.id}")
        return user
