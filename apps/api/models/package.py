"""Package model for purchasable credit bundles."""

import uuid

from sqlalchemy import Column, DateTime, Float, Integer, JSON, String, Text
from sqlalchemy.sql import func

from database import Base


class Package(Base):
    """Credit package offered on the upgrade page."""

    __tablename__ = "aicoach_packages"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False, default=0.0)
    credits = Column(Integer, nullable=False)
    description = Column(Text, nullable=False, default="")
    features = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
