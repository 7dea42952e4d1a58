"""Upstream provider routing table.

Provider names are an open set of tags: adding a vendor means registering one
more ``ProviderSpec`` here. Unknown names route to the default entry instead
of failing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from config import require_provider_api_key

DEFAULT_PROVIDER = "DeepSeek"


@dataclass(frozen=True)
class ProviderSpec:
    name: str
    endpoint: str
    model: str
    credential_env_var: str


@dataclass(frozen=True)
class ProviderRoute:
    """Concrete upstream call parameters for one request."""

    name: str
    endpoint: str
    model: str
    credential_env_var: str
    api_key: str


_PROVIDERS: Dict[str, ProviderSpec] = {}


def register_provider(spec: ProviderSpec) -> None:
    _PROVIDERS[spec.name] = spec


def known_providers() -> List[str]:
    return list(_PROVIDERS)


def is_known_provider(name: str) -> bool:
    return name in _PROVIDERS


def lookup_provider(name: str | None) -> ProviderSpec:
    """Return the routing entry for ``name``, falling back to DeepSeek."""
    spec = _PROVIDERS.get(str(name or ""))
    if spec is None:
        spec = _PROVIDERS[DEFAULT_PROVIDER]
    return spec


def resolve_provider(name: str | None) -> ProviderRoute:
    """Resolve a logical provider name into endpoint, model and credential.

    Raises ``ConfigurationError`` when the credential is not configured.
    """
    spec = lookup_provider(name)
    api_key = require_provider_api_key(spec.credential_env_var)
    return ProviderRoute(
        name=spec.name,
        endpoint=spec.endpoint,
        model=spec.model,
        credential_env_var=spec.credential_env_var,
        api_key=api_key,
    )


register_provider(
    ProviderSpec(
        name="DeepSeek",
        endpoint="https://api.deepseek.com/v1/chat/completions",
        model="deepseek-chat",
        credential_env_var="DEEPSEEK_API_KEY",
    )
)
register_provider(
    ProviderSpec(
        name="OpenAI",
        endpoint="https://api.openai.com/v1/chat/completions",
        model="gpt-4",
        credential_env_var="OPENAI_API_KEY",
    )
)
register_provider(
    ProviderSpec(
        name="Together",
        endpoint="https://api.together.xyz/v1/chat/completions",
        model="mistralai/Mixtral-8x7B-Instruct-v0.1",
        credential_env_var="TOGETHER_AI_KEY",
    )
)
