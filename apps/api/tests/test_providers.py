import pytest

from config import settings
from services.errors import ConfigurationError
from services.providers import (
    ProviderSpec,
    known_providers,
    lookup_provider,
    register_provider,
    resolve_provider,
)
from services import providers


def test_routing_table_matches_known_vendors():
    deepseek = resolve_provider("DeepSeek")
    assert deepseek.endpoint == "https://api.deepseek.com/v1/chat/completions"
    assert deepseek.model == "deepseek-chat"
    assert deepseek.api_key == "test-deepseek-key"

    openai = resolve_provider("OpenAI")
    assert openai.endpoint == "https://api.openai.com/v1/chat/completions"
    assert openai.model == "gpt-4"
    assert openai.credential_env_var == "OPENAI_API_KEY"

    together = resolve_provider("Together")
    assert together.endpoint == "https://api.together.xyz/v1/chat/completions"
    assert together.model == "mistralai/Mixtral-8x7B-Instruct-v0.1"
    assert together.credential_env_var == "TOGETHER_AI_KEY"


@pytest.mark.parametrize("name", ["Grok", "", None, "deepseek"])
def test_unrecognized_names_fall_back_to_deepseek(name):
    route = resolve_provider(name)
    assert route.name == "DeepSeek"
    assert route.model == "deepseek-chat"
    assert route.credential_env_var == "DEEPSEEK_API_KEY"


def test_missing_credential_raises_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "   ")
    with pytest.raises(ConfigurationError) as exc_info:
        resolve_provider("OpenAI")
    assert "OPENAI_API_KEY" in exc_info.value.message
    assert exc_info.value.public_message == "Service configuration error"


def test_new_vendor_is_added_through_the_table_alone(monkeypatch):
    monkeypatch.setattr(providers, "_PROVIDERS", dict(providers._PROVIDERS))
    register_provider(
        ProviderSpec(
            name="OpenAICompat",
            endpoint="https://llm.internal.example/v1/chat/completions",
            model="local-model",
            credential_env_var="OPENAI_API_KEY",
        )
    )
    assert "OpenAICompat" in known_providers()
    assert lookup_provider("OpenAICompat").model == "local-model"
    assert resolve_provider("OpenAICompat").api_key == "test-openai-key"
