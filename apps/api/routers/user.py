"""End-user purchase and package catalogue router."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.auth_scope import AuthContext, get_auth_context
from services.ledger import purchase
from services.packages import list_packages, serialize_package

router = APIRouter()


class PurchaseRequest(BaseModel):
    packageId: str = Field(min_length=1)


@router.post("/user/purchase")
async def purchase_package(
    request: PurchaseRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    # Trusted-client purchase: no payment gateway verification happens here.
    result = await purchase(db, auth.user_id, request.packageId)
    return {"success": True, "creditsAdded": result["creditsAdded"]}


@router.get("/packages")
async def available_packages(
    _auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Packages offered to users, cheapest first."""
    packages = await list_packages(db, order_by_price=True)
    return [serialize_package(package) for package in packages]
