"""
Tests for registration, login/logout and token authentication.
"""

import pytest

from coursegraph_backend.api.exceptions import (
    BadRequestException,
    ConflictException,
    IllegalUserTypeException,
    UnauthorizedException,
    UserNotFoundException,
)
from coursegraph_backend.interface.users import UserType
from coursegraph_backend.model import User
from coursegraph_backend.services import UserService, hash_password, verify_password

from .conftest import PASSWORD


@pytest.fixture
def users(session, tokens):
    return UserService(session, tokens=tokens)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("correct horse")

        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed) is True
        assert verify_password("wrong horse", hashed) is False

    def test_garbage_hash_does_not_verify(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestUserType:

    def test_from_text(self):
        assert UserType.from_text("STUDENT") == UserType.STUDENT
        assert UserType.from_text("TEACHER") == UserType.TEACHER
        assert str(UserType.TEACHER) == "TEACHER"

    @pytest.mark.parametrize("text", ["student", "ADMIN", "", None])
    def test_illegal_text(self, text):
        with pytest.raises(IllegalUserTypeException) as e:
            UserType.from_text(text)
        assert e.value.status_code == 400


class TestRegister:

    def test_register_student(self, session, users):
        user = users.register("Nina New", "nina@example.org", "pw-nina", "STUDENT")

        stored = session.get(User, user.id)
        assert stored.user_type == UserType.STUDENT
        assert stored.password != "pw-nina"
        assert verify_password("pw-nina", stored.password)

    def test_register_teacher_with_enum(self, users):
        assert users.register("Tom New", "tom@example.org", "pw-tom", UserType.TEACHER).is_teacher

    def test_duplicate_email(self, session, users):
        with pytest.raises(ConflictException):
            users.register("Sam Again", "student@example.org", "pw", UserType.STUDENT)
        assert session.query(User).count() == 4

    def test_illegal_user_type(self, users):
        with pytest.raises(IllegalUserTypeException):
            users.register("Ada Admin", "ada@example.org", "pw", "ADMIN")

    @pytest.mark.parametrize("name,email,password", [
        ("", "empty-name@example.org", "pw"),
        ("No Password", "nopw@example.org", ""),
        ("Bad Mail", "x", "pw"),
    ])
    def test_invalid_fields(self, users, name, email, password):
        with pytest.raises(BadRequestException):
            users.register(name, email, password, UserType.STUDENT)


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_and_authenticate(self, users, student):
        authentication = await users.login("student@example.org", PASSWORD)

        assert authentication.startswith(f"{student.id}_")
        assert (await users.authenticate(authentication)).id == student.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, users):
        with pytest.raises(UnauthorizedException):
            await users.login("student@example.org", "not the password")

    @pytest.mark.asyncio
    async def test_unknown_email(self, users):
        with pytest.raises(UnauthorizedException):
            await users.login("nobody@example.org", PASSWORD)

    @pytest.mark.asyncio
    async def test_logout(self, users, student):
        authentication = await users.login("student@example.org", PASSWORD)

        await users.logout(student)

        assert await users.authenticate(authentication) is None

    @pytest.mark.asyncio
    async def test_login_again_invalidates_previous_session(self, users):
        old = await users.login("student@example.org", PASSWORD)
        new = await users.login("student@example.org", PASSWORD)

        assert await users.authenticate(old) is None
        assert await users.authenticate(new) is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("authentication", [None, "", "garbage", "1002_0123456789abcdef0123456789abcdef"])
    async def test_authenticate_rejects(self, users, authentication):
        assert await users.authenticate(authentication) is None

    @pytest.mark.asyncio
    async def test_expired_session(self, users, mock_cache):
        authentication = await users.login("teacher@example.org", PASSWORD)

        mock_cache.advance(users.tokens.ttl_seconds + 1)

        assert await users.authenticate(authentication) is None

    @pytest.mark.asyncio
    async def test_token_of_missing_user(self, users, tokens):
        entry = await tokens.create_token(987654)
        assert await users.authenticate(tokens.get_authentication(entry)) is None


class TestProfile:

    def test_get_user(self, users, student):
        assert users.get_user(student.id).email == "student@example.org"
        with pytest.raises(UserNotFoundException):
            users.get_user(987654)

    @pytest.mark.asyncio
    async def test_update_name_and_password(self, session, users, student):
        users.update_profile(student, name="Samira Student", password="new-password")

        stored = session.get(User, student.id)
        assert stored.name == "Samira Student"
        assert verify_password("new-password", stored.password)

        with pytest.raises(UnauthorizedException):
            await users.login("student@example.org", PASSWORD)
        assert await users.login("student@example.org", "new-password")

    def test_update_nothing(self, users, student):
        assert users.update_profile(student).name == "Sam Student"

    @pytest.mark.parametrize("name,password", [("   ", None), (None, "")])
    def test_invalid_update(self, users, student, name, password):
        with pytest.raises(BadRequestException):
            users.update_profile(student, name=name, password=password)
