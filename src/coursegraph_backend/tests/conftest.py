"""
Pytest configuration and fixtures for all tests.

Every test gets its own in-memory SQLite database with a small course world:
one course taught by ``teacher``, with ``student`` enrolled, plus an
``outsider`` student and an ``other_teacher`` that have nothing to do with it.
"""

import os
import sys
import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure coursegraph_backend is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from coursegraph_backend.database import create_db_engine, init_db
from coursegraph_backend.interface.users import UserType
from coursegraph_backend.model import Course, CourseGraph, Lecture, Node, User
from coursegraph_backend.repositories import RedisTokenRepository
from coursegraph_backend.services.user_service import hash_password
from coursegraph_backend.settings import settings

TEACHER_ID = 1001
STUDENT_ID = 1002
OUTSIDER_ID = 1003
OTHER_TEACHER_ID = 1004
COURSE_ID = 2001
GRAPH_ID = 3001
NODE_ID = "node-recursion"
PASSWORD = "secret-password"


class MockCache:
    """Mock Redis cache with a clock that only moves when told to"""

    def __init__(self):
        self.now = 0.0
        self._data = {}
        self._call_log = []

    def _live_entry(self, key):
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self.now:
            del self._data[key]
            return None
        return entry

    async def get(self, key):
        self._call_log.append(('get', key))
        entry = self._live_entry(key)
        return entry[0] if entry else None

    async def set(self, key, value, ttl=None):
        self._call_log.append(('set', key, ttl))
        self._data[key] = (value, self.now + ttl if ttl else None)
        return True

    async def expire(self, key, ttl):
        self._call_log.append(('expire', key, ttl))
        entry = self._live_entry(key)
        if entry is None:
            return False
        self._data[key] = (entry[0], self.now + ttl)
        return True

    async def delete(self, key):
        self._call_log.append(('delete', key))
        return 1 if self._data.pop(key, None) is not None else 0

    def advance(self, seconds):
        self.now += seconds

    def remaining_ttl(self, key):
        entry = self._live_entry(key)
        if entry is None or entry[1] is None:
            return None
        return entry[1] - self.now

    @property
    def call_log(self):
        return self._call_log


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """bcrypt's minimum cost keeps the suite fast"""
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def engine():
    """Create a fresh in-memory database engine."""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def Session(engine):
    """Create session factory."""
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def session(Session, world):
    """Create a new database session for a test."""
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def world(Session):
    """Seed the course world and commit it."""
    password = hash_password(PASSWORD)

    with Session() as seed:
        teacher = User(id=TEACHER_ID, name="Tanja Teacher", email="teacher@example.org", password=password, user_type=UserType.TEACHER)
        student = User(id=STUDENT_ID, name="Sam Student", email="student@example.org", password=password, user_type=UserType.STUDENT)
        outsider = User(id=OUTSIDER_ID, name="Olga Outsider", email="outsider@example.org", password=password, user_type=UserType.STUDENT)
        other_teacher = User(id=OTHER_TEACHER_ID, name="Otto Other", email="other@example.org", password=password, user_type=UserType.TEACHER)

        course = Course(id=COURSE_ID, name="Data Structures", code="CS-201")
        course.teachers.append(teacher)
        course.students.append(student)

        graph = CourseGraph(id=GRAPH_ID, name="Main graph", description="Everything in CS-201", course=course)
        node = Node(id=NODE_ID, name="Recursion", graph=graph)
        node.lectures.append(Lecture(id=4001, title="Recursion basics", link="https://example.org/lectures/recursion"))

        seed.add_all([teacher, student, outsider, other_teacher, course, graph, node])
        seed.commit()

    return {
        "teacher_id": TEACHER_ID,
        "student_id": STUDENT_ID,
        "outsider_id": OUTSIDER_ID,
        "other_teacher_id": OTHER_TEACHER_ID,
        "course_id": COURSE_ID,
        "graph_id": GRAPH_ID,
        "node_id": NODE_ID,
    }


@pytest.fixture
def teacher(session):
    return session.get(User, TEACHER_ID)


@pytest.fixture
def student(session):
    return session.get(User, STUDENT_ID)


@pytest.fixture
def outsider(session):
    return session.get(User, OUTSIDER_ID)


@pytest.fixture
def other_teacher(session):
    return session.get(User, OTHER_TEACHER_ID)


@pytest.fixture
def mock_cache():
    """Fixture for mock cache"""
    return MockCache()


@pytest.fixture
def tokens(mock_cache):
    return RedisTokenRepository(cache=mock_cache, expires_hour=1)
