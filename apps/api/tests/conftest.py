import json

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config import settings
from database import Base, get_db
from main import app
from services import upstream


@pytest.fixture(autouse=True)
def provider_keys(monkeypatch):
    """Configure fake upstream credentials; individual tests blank them as needed."""
    monkeypatch.setattr(settings, "DEEPSEEK_API_KEY", "test-deepseek-key")
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "test-openai-key")
    monkeypatch.setattr(settings, "TOGETHER_AI_KEY", "test-together-key")
    monkeypatch.setattr(settings, "ADMIN_EMAILS", ["root-admin@example.com"])
    monkeypatch.setattr(settings, "INTERNAL_WIDGET_SYSTEM_CODE", "SYS_INTERNAL_WIDGET")


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    db_path = tmp_path / "coach.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield maker

    await engine.dispose()


@pytest_asyncio.fixture
async def coach_client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.pop(get_db, None)


class FakeUpstream:
    """Records upstream chat requests and answers with a canned stream."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.chunks = [b'data: {"choices":[{"delta":{"content":"Hi"}}]}\n\n', b"data: [DONE]\n\n"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(
            {
                "url": str(request.url),
                "authorization": request.headers.get("authorization"),
                "json": json.loads(request.content),
            }
        )
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"error": {"message": "upstream exploded"}})
        return httpx.Response(
            self.status_code,
            content=b"".join(self.chunks),
            headers={"content-type": "text/event-stream"},
        )


@pytest.fixture
def fake_upstream(monkeypatch):
    fake = FakeUpstream()
    monkeypatch.setattr(
        upstream,
        "create_upstream_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(fake.handler)),
    )
    return fake
