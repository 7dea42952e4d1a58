"""UserAccount provisioning and lookups."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.user import UserAccount
from services.global_settings import get_global_settings

logger = logging.getLogger(__name__)


async def get_user_account(db: AsyncSession, user_id: str) -> Optional[UserAccount]:
    result = await db.execute(select(UserAccount).where(UserAccount.id == user_id))
    return result.scalar_one_or_none()


async def sync_identity(db: AsyncSession, identity: str, email: Optional[str]) -> Dict[str, Any]:
    """Create the account on first sight of a verified identity.

    The assigned provider is the global default at creation time; later
    changes to the default do not touch existing accounts.
    """
    existing = await get_user_account(db, identity)
    if existing is not None:
        return {"status": "existing", "provider": existing.assigned_provider}

    global_settings = await get_global_settings(db)
    account = UserAccount(
        id=identity,
        email=email,
        account_type="standard",
        credit_balance=0,
        assigned_provider=global_settings.default_provider,
        role="user",
    )
    db.add(account)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        existing = await get_user_account(db, identity)
        if existing is None:
            raise
        return {"status": "existing", "provider": existing.assigned_provider}

    logger.info("Provisioned account %s with provider %s", identity, account.assigned_provider)
    return {"status": "created", "provider": account.assigned_provider}


def serialize_account(account: UserAccount) -> Dict[str, Any]:
    return {
        "id": account.id,
        "email": account.email,
        "account_type": account.account_type,
        "credit_balance": int(account.credit_balance or 0),
        "assigned_provider": account.assigned_provider,
        "role": account.role,
        "createdAt": account.created_at.isoformat() if account.created_at else None,
    }
