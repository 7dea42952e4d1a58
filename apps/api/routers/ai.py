"""AI generation proxy router."""

from __future__ import annotations

import hmac
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from routers.auth_scope import auth_scheme, resolve_auth_context
from services.billing import decide_billing
from services.errors import CoachAPIError, ConfigurationError
from services.global_settings import get_global_settings
from services.ledger import mark_transaction_status, record_generation
from services.providers import resolve_provider
from services.upstream import open_upstream_stream, relay_stream

router = APIRouter()
logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    systemPrompt: Optional[str] = None
    systemCode: Optional[str] = None


def is_internal_system_call(system_code: Optional[str]) -> bool:
    """True when the request carries the internal widget sentinel."""
    expected = settings.INTERNAL_WIDGET_SYSTEM_CODE or ""
    if not system_code or not expected:
        return False
    return hmac.compare_digest(system_code.encode("utf-8"), expected.encode("utf-8"))


@router.post("/generate")
async def generate(
    request: GenerateRequest,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(auth_scheme),
    db: AsyncSession = Depends(get_db),
):
    """Bill the caller, log the call, and stream the provider's reply back verbatim."""
    internal = is_internal_system_call(request.systemCode)
    auth = None if internal else resolve_auth_context(credentials)

    global_settings = await get_global_settings(db)
    decision = await decide_billing(db, auth.user_id if auth else None, internal, global_settings)

    try:
        route = resolve_provider(decision.provider)
    except ConfigurationError as exc:
        # Nothing is committed yet: the debit is discarded and no ledger entry exists.
        await db.rollback()
        logger.error("Missing API key for provider %s: %s", decision.provider, exc.message)
        raise

    entry = record_generation(db, decision, route.name)
    await db.commit()

    try:
        response, client = await open_upstream_stream(route, request.messages, request.systemPrompt)
    except CoachAPIError:
        await mark_transaction_status(db, entry.id, "error")
        raise
    except Exception as exc:
        await mark_transaction_status(db, entry.id, "error")
        logger.exception("Generation via %s failed before streaming", route.name)
        raise CoachAPIError() from exc

    return StreamingResponse(
        relay_stream(response, client),
        status_code=response.status_code,
        media_type=response.headers.get("content-type", "text/event-stream"),
    )
