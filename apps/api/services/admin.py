"""Admin operations: account edits, admin registry and usage analytics."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.admin import ADMIN_ROLES, AdminAccount
from models.transaction import LedgerTransaction
from models.user import ACCOUNT_TYPES, UserAccount
from services.accounts import get_user_account
from services.errors import NotFoundError
from services.providers import is_known_provider, known_providers

logger = logging.getLogger(__name__)

ANALYTICS_BUCKETS = ("deepseek", "openai", "together")
ERROR_STATUSES = frozenset({"error", "failed"})


async def list_user_accounts(db: AsyncSession) -> List[UserAccount]:
    result = await db.execute(select(UserAccount).order_by(UserAccount.created_at.desc()))
    return list(result.scalars().all())


async def update_user_account(
    db: AsyncSession,
    uid: str,
    *,
    account_type: Optional[str] = None,
    credit_balance: Optional[int] = None,
    assigned_provider: Optional[str] = None,
) -> UserAccount:
    """Apply an operator edit. ``credit_balance`` is an absolute override."""
    account = await get_user_account(db, uid)
    if account is None:
        raise NotFoundError("User not found")

    if account_type is not None:
        if account_type not in ACCOUNT_TYPES:
            raise HTTPException(status_code=422, detail=f"account_type must be one of: {', '.join(ACCOUNT_TYPES)}")
        account.account_type = account_type
    if credit_balance is not None:
        account.credit_balance = int(credit_balance)
    if assigned_provider is not None:
        if not is_known_provider(assigned_provider):
            raise HTTPException(
                status_code=422,
                detail=f"assigned_provider must be one of: {', '.join(known_providers())}",
            )
        account.assigned_provider = assigned_provider

    await db.commit()
    await db.refresh(account)
    logger.info("Admin updated account %s", uid)
    return account


async def register_admin(
    db: AsyncSession,
    *,
    email: str,
    role: str = "user_admin",
    created_by: str = "system",
) -> AdminAccount:
    """Create or reactivate an admin record keyed by lower-cased email."""
    if role not in ADMIN_ROLES:
        raise HTTPException(status_code=422, detail=f"role must be one of: {', '.join(ADMIN_ROLES)}")
    normalized = email.strip().lower()
    result = await db.execute(select(AdminAccount).where(AdminAccount.email == normalized))
    admin = result.scalar_one_or_none()
    if admin is None:
        admin = AdminAccount(email=normalized, created_by=created_by)
        db.add(admin)
    admin.role = role
    admin.is_active = True
    await db.commit()
    await db.refresh(admin)
    logger.info("Admin %s registered by %s", normalized, created_by)
    return admin


def normalize_provider_bucket(provider: Optional[str]) -> str:
    key = str(provider or "").lower()
    if "deepseek" in key:
        return "deepseek"
    if "openai" in key or "gpt" in key:
        return "openai"
    if "together" in key or "mistral" in key or "grok" in key:
        return "together"
    return "deepseek"


async def provider_analytics(db: AsyncSession) -> Dict[str, Dict[str, Any]]:
    """Per-provider request and error counts, token totals and last use (epoch ms) over generation entries."""
    stats: Dict[str, Dict[str, Any]] = {
        bucket: {"requests": 0, "errors": 0, "tokensIn": 0, "tokensOut": 0, "lastUsed": None}
        for bucket in ANALYTICS_BUCKETS
    }
    result = await db.execute(
        select(LedgerTransaction.provider, LedgerTransaction.status, LedgerTransaction.timestamp).where(
            LedgerTransaction.type != "purchase"
        )
    )
    for provider, status, timestamp in result.all():
        bucket = stats[normalize_provider_bucket(provider)]
        bucket["requests"] += 1
        if status in ERROR_STATUSES:
            bucket["errors"] += 1
        if isinstance(timestamp, datetime):
            if timestamp.tzinfo is None:
                # SQLite hands timestamps back naive; they are stored as UTC.
                timestamp = timestamp.replace(tzinfo=timezone.utc)
            millis = int(timestamp.timestamp() * 1000)
            if bucket["lastUsed"] is None or millis > bucket["lastUsed"]:
                bucket["lastUsed"] = millis
    return stats
