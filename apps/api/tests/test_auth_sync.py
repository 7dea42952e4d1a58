import pytest
from sqlalchemy import func
from sqlalchemy.future import select

from models.global_settings import GlobalSettings
from models.user import UserAccount
from services.accounts import sync_identity
from services.identity_token import create_identity_token


SYNC_HEADER = {"Authorization": f"Bearer {create_identity_token('new-user', 'new@example.com')['token']}"}


@pytest.mark.asyncio
async def test_sync_creates_once_then_reports_existing(coach_client, session_maker):
    first = await coach_client.post("/auth/sync", headers=SYNC_HEADER)
    assert first.status_code == 200
    assert first.json() == {"success": True, "status": "created", "provider": "DeepSeek"}

    second = await coach_client.post("/auth/sync", headers=SYNC_HEADER)
    assert second.json() == {"success": True, "status": "existing", "provider": "DeepSeek"}

    async with session_maker() as session:
        count = (await session.execute(select(func.count()).select_from(UserAccount))).scalar_one()
        account = await session.get(UserAccount, "new-user")
    assert count == 1
    assert account.email == "new@example.com"
    assert account.credit_balance == 0
    assert account.account_type == "standard"
    assert account.role == "user"


@pytest.mark.asyncio
async def test_provider_is_captured_at_creation_time(session_maker):
    async with session_maker() as session:
        session.add(GlobalSettings(id="global", default_provider="OpenAI", internal_widget_provider="DeepSeek"))
        await session.commit()

    async with session_maker() as session:
        assert await sync_identity(session, "early", "early@example.com") == {"status": "created", "provider": "OpenAI"}

    async with session_maker() as session:
        row = await session.get(GlobalSettings, "global")
        row.default_provider = "Together"
        await session.commit()

    async with session_maker() as session:
        assert await sync_identity(session, "early", "early@example.com") == {"status": "existing", "provider": "OpenAI"}
        assert await sync_identity(session, "late", None) == {"status": "created", "provider": "Together"}


@pytest.mark.asyncio
async def test_sync_requires_a_valid_token(coach_client):
    missing = await coach_client.post("/auth/sync")
    assert missing.status_code == 401
    assert missing.json()["error"] == "unauthorized"

    bad = await coach_client.post("/auth/sync", headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401
    assert bad.json()["error"] == "invalid_credential"


@pytest.mark.asyncio
async def test_me_returns_balance_after_sync(coach_client):
    not_synced = await coach_client.get("/auth/me", headers=SYNC_HEADER)
    assert not_synced.status_code == 404

    await coach_client.post("/auth/sync", headers=SYNC_HEADER)
    me = await coach_client.get("/auth/me", headers=SYNC_HEADER)
    assert me.status_code == 200
    payload = me.json()
    assert payload["id"] == "new-user"
    assert payload["credit_balance"] == 0
    assert payload["assigned_provider"] == "DeepSeek"
    assert payload["recent_transactions"] == []
