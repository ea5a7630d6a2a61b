import asyncio
import os
import tempfile
from types import SimpleNamespace

import pytest

_db_dir = tempfile.mkdtemp(prefix="flashstudy-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'app.db')}")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from flashstudy.auth.service import AuthService
from flashstudy.database import create_tables, get_db
from flashstudy.dependencies import get_openai_client
from flashstudy.main import app
from flashstudy.study.engine import StudyCard
from flashstudy.study.store import StudySessionStore


class FakeCompletions:
    """Stands in for client.chat.completions."""

    def __init__(self):
        self.content = '{"cards": []}'
        self.error = None
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def cards():
    return [
        StudyCard(id=1, front="A front", back="A back"),
        StudyCard(id=2, front="B front", back="B back"),
        StudyCard(id=3, front="C front", back="C back"),
    ]


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def client(tmp_path, fake_openai):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    asyncio.run(create_tables(engine))
    session_maker = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_openai_client] = lambda: fake_openai
    app.state.study_store = StudySessionStore()

    yield TestClient(app)

    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


@pytest.fixture
def auth_headers():
    service = AuthService()

    def _headers(user_id="user-1", features=()):
        token = service.create_access_token(user_id, features=features)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_deck(client, auth_headers):
    """Create a deck (and optionally cards) through the API; returns the deck id."""

    def _make(name="Deck", description=None, cards=(), user_id="user-1"):
        headers = auth_headers(user_id, features=["unlimited_decks"])
        resp = client.post(
            "/api/v1/decks",
            json={"name": name, "description": description},
            headers=headers,
        )
        assert resp.status_code == 201, resp.text
        deck_id = resp.json()["id"]
        for front, back in cards:
            r = client.post(
                f"/api/v1/decks/{deck_id}/cards",
                json={"front": front, "back": back},
                headers=headers,
            )
            assert r.status_code == 201, r.text
        return deck_id

    return _make
