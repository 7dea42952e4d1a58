"""Billing decision engine for generation requests.

Decides, per request, whether the call is billable, which provider it should
be routed to, and applies the one-credit debit for metered accounts.

Balance policy: metered (standard/pro) accounts are only blocked once their
balance is already negative, so a balance of 0 admits one last request that
takes it to -1. The debit is a single conditional ``UPDATE`` evaluated by the
database, never a write-back of a locally read value, so concurrent requests
for the same account cannot lose updates or overdraw twice.

The debit is issued inside the caller's unit of work. It becomes durable only
when the caller commits it together with the ledger entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from models.global_settings import GlobalSettings
from models.transaction import SYSTEM_USER_ID
from models.user import UserAccount
from services.accounts import get_user_account
from services.errors import InsufficientCreditError, NotFoundError, UnauthorizedError
from services.providers import DEFAULT_PROVIDER

CREDITS_PER_REQUEST = 1
EXEMPT_ACCOUNT_TYPES = frozenset({"exclusive"})


@dataclass(frozen=True)
class BillingDecision:
    provider: str
    billable: bool
    user_id: str
    transaction_type: str  # user_chat | internal_widget
    account_type: Optional[str] = None


async def debit_credits(db: AsyncSession, user_id: str, amount: int = CREDITS_PER_REQUEST) -> bool:
    """Atomically subtract ``amount`` unless the balance is already negative.

    Returns False when no row qualified.
    """
    result = await db.execute(
        update(UserAccount)
        .where(UserAccount.id == user_id, UserAccount.credit_balance >= 0)
        .values(credit_balance=UserAccount.credit_balance - int(amount))
        .execution_options(synchronize_session=False)
    )
    return (result.rowcount or 0) > 0


async def decide_billing(
    db: AsyncSession,
    user_id: Optional[str],
    is_internal_system_call: bool,
    global_settings: GlobalSettings,
) -> BillingDecision:
    """Resolve provider and billing outcome for one generation request."""
    if is_internal_system_call:
        return BillingDecision(
            provider=global_settings.internal_widget_provider or DEFAULT_PROVIDER,
            billable=False,
            user_id=SYSTEM_USER_ID,
            transaction_type="internal_widget",
        )

    if not user_id:
        raise UnauthorizedError()

    account = await get_user_account(db, user_id)
    if account is None:
        raise NotFoundError("User profile not found. Please relogin.")

    account_type = account.account_type or "standard"
    provider = account.assigned_provider or DEFAULT_PROVIDER

    if account_type in EXEMPT_ACCOUNT_TYPES:
        return BillingDecision(
            provider=provider,
            billable=False,
            user_id=account.id,
            transaction_type="user_chat",
            account_type=account_type,
        )

    if int(account.credit_balance or 0) < 0:
        raise InsufficientCreditError()

    if not await debit_credits(db, account.id):
        # Another request took the balance negative after our read.
        raise InsufficientCreditError()

    return BillingDecision(
        provider=provider,
        billable=True,
        user_id=account.id,
        transaction_type="user_chat",
        account_type=account_type,
    )
