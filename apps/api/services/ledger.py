"""Transaction ledger writes and the credit purchase flow."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.package import Package
from models.transaction import LedgerTransaction, SYSTEM_USER_ID, TRANSACTION_STATUSES
from models.user import UserAccount
from services.accounts import get_user_account
from services.billing import BillingDecision
from services.errors import NotFoundError

logger = logging.getLogger(__name__)


def record_generation(db: AsyncSession, decision: BillingDecision, provider: str) -> LedgerTransaction:
    """Stage the ``initiated`` entry for a chat call. The caller commits."""
    entry = LedgerTransaction(
        id=str(uuid.uuid4()),
        user_id=decision.user_id,
        provider=provider,
        type=decision.transaction_type,
        status="initiated",
    )
    db.add(entry)
    return entry


async def mark_transaction_status(db: AsyncSession, transaction_id: str, status: str) -> None:
    if status not in TRANSACTION_STATUSES:
        raise ValueError(f"Unknown transaction status: {status}")
    await db.execute(
        update(LedgerTransaction)
        .where(LedgerTransaction.id == transaction_id)
        .values(status=status)
        .execution_options(synchronize_session=False)
    )
    await db.commit()


def _purchase_entry(user_id: str, package: Package, credits: int, amount: float) -> LedgerTransaction:
    return LedgerTransaction(
        user_id=user_id,
        provider=SYSTEM_USER_ID,
        type="purchase",
        status="completed",
        package_id=package.id,
        package_name=package.name,
        credits_added=credits,
        amount_paid=amount,
    )


async def purchase(db: AsyncSession, user_id: str, package_id: str) -> Dict[str, Any]:
    """Credit a package to the account and log it, all-or-nothing.

    Payment is not verified here; callers are trusted.
    """
    result = await db.execute(select(Package).where(Package.id == package_id))
    package = result.scalar_one_or_none()
    if package is None:
        raise NotFoundError("Package not found")

    if await get_user_account(db, user_id) is None:
        raise NotFoundError("User profile not found. Please relogin.")

    credits = int(package.credits or 0)
    amount = float(package.price or 0)

    try:
        await db.execute(
            update(UserAccount)
            .where(UserAccount.id == user_id)
            .values(credit_balance=UserAccount.credit_balance + credits)
            .execution_options(synchronize_session=False)
        )
        db.add(_purchase_entry(user_id, package, credits, amount))
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Purchase of package %s credited %s credits to %s", package.id, credits, user_id)
    return {"creditsAdded": credits}


async def list_transactions(db: AsyncSession, user_id: str, limit: int = 30) -> list:
    result = await db.execute(
        select(LedgerTransaction)
        .where(LedgerTransaction.user_id == user_id)
        .order_by(LedgerTransaction.timestamp.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


def serialize_transaction(entry: LedgerTransaction) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": entry.id,
        "userId": entry.user_id,
        "provider": entry.provider,
        "type": entry.type,
        "status": entry.status,
        "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
    }
    if entry.type == "purchase":
        payload.update(
            {
                "packageId": entry.package_id,
                "packageName": entry.package_name,
                "creditsAdded": entry.credits_added,
                "amountPaid": entry.amount_paid,
            }
        )
    return payload
