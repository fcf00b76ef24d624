"""
Tests for the ``get_current_user`` FastAPI dependency.
"""

import asyncio

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from coursegraph_backend.api.auth import get_current_user, get_user_service, parse_authorization_header
from coursegraph_backend.model import User
from coursegraph_backend.services import UserService

from .conftest import PASSWORD


@pytest.fixture
def users(session, tokens):
    return UserService(session, tokens=tokens)


@pytest.fixture
def client(users):
    app = FastAPI()

    @app.get("/me")
    async def me(user: User = Depends(get_current_user)):
        return {"id": user.id, "type": str(user.user_type)}

    app.dependency_overrides[get_user_service] = lambda: users
    return TestClient(app)


class TestParseAuthorizationHeader:

    def test_bearer_and_bare(self):
        assert parse_authorization_header("Bearer 1_abc") == "1_abc"
        assert parse_authorization_header("bearer 1_abc") == "1_abc"
        assert parse_authorization_header("1_abc") == "1_abc"

    @pytest.mark.parametrize("value", [None, "", "Bearer", "Bearer ", "   "])
    def test_empty(self, value):
        assert parse_authorization_header(value) is None


class TestCurrentUser:

    def test_bearer_token(self, client, users, student):
        authentication = asyncio.run(users.login("student@example.org", PASSWORD))

        response = client.get("/me", headers={"Authorization": f"Bearer {authentication}"})

        assert response.status_code == 200
        assert response.json() == {"id": student.id, "type": "STUDENT"}

    def test_bare_token(self, client, users, teacher):
        authentication = asyncio.run(users.login("teacher@example.org", PASSWORD))

        response = client.get("/me", headers={"Authorization": authentication})

        assert response.status_code == 200
        assert response.json()["id"] == teacher.id

    def test_missing_header(self, client):
        assert client.get("/me").status_code == 401

    @pytest.mark.parametrize("header", ["garbage", "Bearer garbage", "Bearer 1002_0123456789abcdef0123456789abcdef"])
    def test_invalid_token(self, client, header):
        assert client.get("/me", headers={"Authorization": header}).status_code == 401

    def test_logged_out(self, client, users, student):
        authentication = asyncio.run(users.login("student@example.org", PASSWORD))
        asyncio.run(users.logout(student))

        response = client.get("/me", headers={"Authorization": f"Bearer {authentication}"})

        assert response.status_code == 401
