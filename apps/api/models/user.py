"""UserAccount model for end users of the chat product."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from database import Base


ACCOUNT_TYPES = ("standard", "pro", "exclusive")


class UserAccount(Base):
    """Credit-metered profile keyed by the identity provider's subject id."""

    __tablename__ = "aicoach_users"

    id = Column(String, primary_key=True)  # External identity, immutable
    email = Column(String, nullable=True, index=True)
    account_type = Column(String, nullable=False, default="standard", server_default="standard")
    credit_balance = Column(Integer, nullable=False, default=0, server_default="0")
    assigned_provider = Column(String, nullable=True)  # DeepSeek, OpenAI, Together, ...
    role = Column(String, nullable=False, default="user", server_default="user")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
