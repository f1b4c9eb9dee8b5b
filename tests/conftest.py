# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-agentboards")

from agentboards.core.security import hash_password
from agentboards.db.session import Base, build_engine
from agentboards.db.session import get_db as app_get_session
from agentboards.main import app as fastapi_app
from agentboards.models import Agent, BetaCode, Board, Post, User
from agentboards.services import throttle as throttle_module
from agentboards.services.agents import AgentService
from agentboards.services.boards import BoardService
from agentboards.services.posts import PostService
from agentboards.services.tokens import TokenAuthority

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database per test."""
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture(autouse=True)
def reset_throttle() -> Iterator[None]:
    throttle_module.get_request_throttle().reset()
    yield
    throttle_module.get_request_throttle().reset()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def tokens() -> TokenAuthority:
    return TokenAuthority(secret_key=os.environ["SECRET_KEY"])


@pytest.fixture(scope="session")
def password_hash() -> str:
    """Hash the shared test password once; bcrypt is deliberately slow."""
    return hash_password(TEST_PASSWORD)


def make_user(db: Session, email: str, password_hash: str, name: str = "Test User") -> User:
    user = User(email=email, password_hash=password_hash, name=name)
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def test_user(db_session: Session, password_hash: str) -> User:
    """Create and return a persisted account."""
    return make_user(db_session, "owner@example.com", password_hash)


@pytest.fixture()
def other_user(db_session: Session, password_hash: str) -> User:
    return make_user(db_session, "other@example.com", password_hash, name="Other User")


@pytest.fixture()
def agent(db_session: Session, test_user: User) -> Agent:
    """Create and return an agent owned by ``test_user``."""
    return AgentService(db_session).create_agent(test_user.id, "alpha", "first agent")


@pytest.fixture()
def other_agent(db_session: Session, other_user: User) -> Agent:
    return AgentService(db_session).create_agent(other_user.id, "beta", "second agent")


@pytest.fixture()
def board(db_session: Session, agent: Agent) -> Board:
    return BoardService(db_session).create_board(agent.id, "General", "Anything goes")


@pytest.fixture()
def post(db_session: Session, board: Board, agent: Agent) -> Post:
    """Create a post authored by ``agent`` (consumes one unit of its quota)."""
    return PostService(db_session).create_post(board.id, agent.id, "Hello, boards")


@pytest.fixture()
def invite_code(db_session: Session) -> str:
    beta_code = BetaCode(code="WELCOME12345")
    db_session.add(beta_code)
    db_session.commit()
    return beta_code.code


@pytest.fixture()
def auth_headers(test_user: User, tokens: TokenAuthority) -> dict[str, str]:
    """Return authorization headers for ``test_user``."""
    pair = tokens.issue_pair(test_user.id)
    return {"Authorization": f"Bearer {pair.access_token}"}


@pytest.fixture()
def agent_headers(agent: Agent) -> dict[str, str]:
    return {"X-API-Key": agent.api_key}


@pytest.fixture()
def other_agent_headers(other_agent: Agent) -> dict[str, str]:
    return {"X-API-Key": other_agent.api_key}


@pytest.fixture()
def test_password() -> str:
    return TEST_PASSWORD
