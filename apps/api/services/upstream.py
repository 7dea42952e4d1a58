"""Streaming relay to upstream chat-completion providers."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import httpx

from config import settings
from services.errors import UpstreamError
from services.providers import ProviderRoute

logger = logging.getLogger(__name__)


def create_upstream_client() -> httpx.AsyncClient:
    timeout = httpx.Timeout(float(settings.UPSTREAM_TIMEOUT_SECONDS), connect=10.0)
    return httpx.AsyncClient(timeout=timeout)


def build_chat_payload(
    route: ProviderRoute,
    messages: List[Dict[str, Any]],
    system_prompt: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "model": route.model,
        "messages": [
            {"role": "system", "content": system_prompt or settings.DEFAULT_SYSTEM_PROMPT},
            *messages,
        ],
        "stream": True,
    }


async def open_upstream_stream(
    route: ProviderRoute,
    messages: List[Dict[str, Any]],
    system_prompt: Optional[str] = None,
) -> Tuple[httpx.Response, httpx.AsyncClient]:
    """POST the chat request and return the open streaming response.

    The caller owns the returned response and client and must close both,
    normally by draining them through ``relay_stream``.
    """
    client = create_upstream_client()
    try:
        request = client.build_request(
            "POST",
            route.endpoint,
            json=build_chat_payload(route, messages, system_prompt),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {route.api_key}",
            },
        )
        response = await client.send(request, stream=True)
    except httpx.HTTPError as exc:
        await client.aclose()
        logger.error("AI provider %s unreachable: %s", route.name, exc)
        raise UpstreamError() from exc
    except Exception:
        await client.aclose()
        raise

    if not response.is_success:
        try:
            body = await response.aread()
        finally:
            await response.aclose()
            await client.aclose()
        logger.error(
            "AI provider %s error %s: %s",
            route.name,
            response.status_code,
            body.decode("utf-8", errors="replace")[:500],
        )
        raise UpstreamError(status_code=response.status_code if response.status_code >= 400 else 502)

    return response, client


async def relay_stream(response: httpx.Response, client: httpx.AsyncClient) -> AsyncIterator[bytes]:
    """Yield upstream bytes unchanged; closing the generator aborts the upstream call."""
    try:
        async for chunk in response.aiter_raw():
            yield chunk
    finally:
        await response.aclose()
        await client.aclose()
