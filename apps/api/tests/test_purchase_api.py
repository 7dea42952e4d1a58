import pytest
from sqlalchemy.future import select

from models.package import Package
from models.transaction import LedgerTransaction
from models.user import UserAccount
from services.identity_token import create_identity_token


BUYER_HEADER = {"Authorization": f"Bearer {create_identity_token('buyer', 'buyer@example.com')['token']}"}


@pytest.mark.asyncio
async def test_purchase_endpoint_tops_up_negative_balance(coach_client, session_maker):
    async with session_maker() as session:
        session.add(UserAccount(id="buyer", email="buyer@example.com", credit_balance=-1))
        session.add(Package(id="pkg-starter", name="Starter", price=10, credits=100, features=[]))
        await session.commit()

    response = await coach_client.post("/user/purchase", json={"packageId": "pkg-starter"}, headers=BUYER_HEADER)

    assert response.status_code == 200
    assert response.json() == {"success": True, "creditsAdded": 100}
    async with session_maker() as session:
        account = await session.get(UserAccount, "buyer")
        entries = (await session.execute(select(LedgerTransaction))).scalars().all()
    assert account.credit_balance == 99
    assert [(e.type, e.credits_added, e.amount_paid, e.package_name) for e in entries] == [
        ("purchase", 100, 10, "Starter")
    ]

    me = await coach_client.get("/auth/me", headers=BUYER_HEADER)
    assert me.json()["recent_transactions"][0]["creditsAdded"] == 100


@pytest.mark.asyncio
async def test_purchase_validation_and_not_found(coach_client, session_maker):
    async with session_maker() as session:
        session.add(UserAccount(id="buyer", credit_balance=0))
        await session.commit()

    unauthenticated = await coach_client.post("/user/purchase", json={"packageId": "x"})
    assert unauthenticated.status_code == 401

    missing_field = await coach_client.post("/user/purchase", json={}, headers=BUYER_HEADER)
    assert missing_field.status_code == 422

    unknown = await coach_client.post("/user/purchase", json={"packageId": "nope"}, headers=BUYER_HEADER)
    assert unknown.status_code == 404
    assert unknown.json() == {"error": "not_found", "detail": "Package not found"}


@pytest.mark.asyncio
async def test_package_catalogue_sorted_by_price(coach_client, session_maker):
    async with session_maker() as session:
        session.add_all(
            [
                Package(id="pro", name="Pro", price=49, credits=1000, features=["priority"]),
                Package(id="starter", name="Starter", price=10, credits=100, features=[]),
                Package(id="plus", name="Plus", price=20, credits=300, features=[]),
            ]
        )
        await session.commit()

    response = await coach_client.get("/packages", headers=BUYER_HEADER)
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == ["starter", "plus", "pro"]
    assert response.json()[2]["features"] == ["priority"]
