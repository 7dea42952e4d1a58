"""GlobalSettings singleton row."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from database import Base


GLOBAL_SETTINGS_ID = "global"
DEFAULT_PROVIDER = "DeepSeek"


class GlobalSettings(Base):
    """Provider routing defaults shared by every request."""

    __tablename__ = "aicoach_settings"

    id = Column(String, primary_key=True, default=GLOBAL_SETTINGS_ID)
    default_provider = Column(String, nullable=False, default=DEFAULT_PROVIDER)
    internal_widget_provider = Column(String, nullable=False, default=DEFAULT_PROVIDER)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
