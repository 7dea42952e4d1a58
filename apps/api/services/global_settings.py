"""GlobalSettings loading and admin updates."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.global_settings import DEFAULT_PROVIDER, GLOBAL_SETTINGS_ID, GlobalSettings
from services.providers import is_known_provider, known_providers

logger = logging.getLogger(__name__)


async def get_global_settings(db: AsyncSession) -> GlobalSettings:
    """Load the settings singleton, creating it with defaults on first read."""
    result = await db.execute(select(GlobalSettings).where(GlobalSettings.id == GLOBAL_SETTINGS_ID))
    row = result.scalar_one_or_none()
    if row is not None:
        return row

    row = GlobalSettings(
        id=GLOBAL_SETTINGS_ID,
        default_provider=DEFAULT_PROVIDER,
        internal_widget_provider=DEFAULT_PROVIDER,
    )
    db.add(row)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent first read created it.
        await db.rollback()
        result = await db.execute(select(GlobalSettings).where(GlobalSettings.id == GLOBAL_SETTINGS_ID))
        return result.scalar_one()
    logger.info("Created global settings with default provider %s", DEFAULT_PROVIDER)
    return row


def _validate_provider(field: str, value: str) -> str:
    name = str(value or "").strip()
    if not is_known_provider(name):
        raise HTTPException(
            status_code=422,
            detail=f"{field} must be one of: {', '.join(known_providers())}",
        )
    return name


async def update_global_settings(
    db: AsyncSession,
    *,
    default_provider: Optional[str] = None,
    internal_widget_provider: Optional[str] = None,
) -> GlobalSettings:
    """Merge a partial update into the singleton."""
    row = await get_global_settings(db)
    if default_provider is not None:
        row.default_provider = _validate_provider("defaultProvider", default_provider)
    if internal_widget_provider is not None:
        row.internal_widget_provider = _validate_provider("internalWidgetProvider", internal_widget_provider)
    await db.commit()
    await db.refresh(row)
    return row


def serialize_global_settings(row: GlobalSettings) -> dict:
    return {
        "defaultProvider": row.default_provider,
        "internalWidgetProvider": row.internal_widget_provider,
    }
