"""AdminAccount model for operator access."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import func

from database import Base


ADMIN_ROLES = ("super_admin", "user_admin")


class AdminAccount(Base):
    """Operator allowed into the admin API. Credentials live with the identity provider."""

    __tablename__ = "aicoach_admins"

    email = Column(String, primary_key=True)
    role = Column(String, nullable=False, default="user_admin")
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String, nullable=False, default="system")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
