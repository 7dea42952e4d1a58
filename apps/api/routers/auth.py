"""
Authentication router for identity sync and current-profile retrieval.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.auth_scope import AuthContext, get_auth_context
from services.accounts import get_user_account, serialize_account, sync_identity
from services.errors import NotFoundError
from services.ledger import list_transactions, serialize_transaction

router = APIRouter()


class SyncIdentityResponse(BaseModel):
    success: bool = True
    status: str
    provider: Optional[str] = None


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    account_type: str
    credit_balance: int
    assigned_provider: Optional[str] = None
    role: str
    createdAt: Optional[str] = None
    recent_transactions: List[dict] = []


@router.post("/sync", response_model=SyncIdentityResponse)
async def sync_session(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Provision the caller's account on first login; no-op afterwards."""
    result = await sync_identity(db, auth.user_id, auth.email)
    return SyncIdentityResponse(status=result["status"], provider=result["provider"])


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Get current account, balance and latest ledger entries."""
    account = await get_user_account(db, auth.user_id)
    if account is None:
        raise NotFoundError("User profile not found. Please relogin.")

    entries = await list_transactions(db, account.id, limit=20)
    return CurrentUserResponse(
        **serialize_account(account),
        recent_transactions=[serialize_transaction(entry) for entry in entries],
    )
