"""LedgerTransaction model for generation and purchase events."""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, Float, Index, Integer, String

from database import Base


TRANSACTION_STATUSES = ("initiated", "completed", "error", "failed")
SYSTEM_USER_ID = "system"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerTransaction(Base):
    """Append-only ledger entry. Only ``status`` changes after insert."""

    __tablename__ = "aicoach_transactions"
    __table_args__ = (
        Index("ix_aicoach_transactions_user_timestamp", "user_id", "timestamp"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)  # Identity or "system"
    provider = Column(String, nullable=False)
    type = Column(String, nullable=False)
    status = Column(String, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    # Purchase snapshot; null for chat entries
    package_id = Column(String, nullable=True)
    package_name = Column(String, nullable=True)
    credits_added = Column(Integer, nullable=True)
    amount_paid = Column(Float, nullable=True)
