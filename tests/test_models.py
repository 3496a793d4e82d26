"""Tests for provider resolution and the chat model factory."""

import pytest

from cvhjelper.agents.models import (
    MODEL_OPTIONS,
    create_chat_model,
    is_provider_available,
    resolve_provider,
    supports_structured_output,
)
from cvhjelper.config import settings
from cvhjelper.exceptions import ProviderError


@pytest.fixture(autouse=True)
def provider_keys(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "test-openai")
    monkeypatch.setattr(settings, "anthropic_api_key", "test-anthropic")
    monkeypatch.setattr(settings, "deepseek_api_key", "")
    monkeypatch.setattr(settings, "mistral_api_key", "test-mistral")
    monkeypatch.setattr(settings, "default_provider", "openai")


class TestResolveProvider:
    """Tests for resolve_provider."""

    def test_supported_provider(self):
        assert resolve_provider("anthropic") == "anthropic"

    def test_provider_is_normalized(self):
        assert resolve_provider("  OpenAI ") == "openai"

    def test_default_provider(self):
        assert resolve_provider(None) == "openai"
        assert resolve_provider("") == "openai"

    def test_recognised_but_unsupported(self):
        with pytest.raises(ProviderError, match="Unsupported model provider: mistral"):
            resolve_provider("mistral")

    def test_unknown_provider(self):
        with pytest.raises(ProviderError, match="Unknown model provider: llama"):
            resolve_provider("llama")

    def test_missing_api_key(self):
        with pytest.raises(ProviderError, match="deepseek API key is not configured"):
            resolve_provider("deepseek")


def test_availability_follows_keys():
    assert is_provider_available("openai")
    assert not is_provider_available("deepseek")
    # A key alone does not make an unsupported provider available
    assert not is_provider_available("mistral")


def test_anthropic_uses_text_evaluation():
    assert not supports_structured_output("anthropic")
    assert supports_structured_output("openai")
    assert supports_structured_output("deepseek")


def test_model_options_shape():
    for option in MODEL_OPTIONS:
        assert set(option) == {"provider", "model", "displayName", "supportsPDF"}
    assert all(not o["supportsPDF"] for o in MODEL_OPTIONS if o["provider"] in ("mistral", "google"))


def test_create_openai_model():
    from langchain_openai import ChatOpenAI

    model = create_chat_model("openai", "gpt-4o-mini", temperature=0.7)
    assert isinstance(model, ChatOpenAI)
    assert model.model_name == "gpt-4o-mini"
    assert model.temperature == 0.7


def test_reasoning_model_sends_no_temperature():
    model = create_chat_model("openai", "o4-mini", temperature=0.7)
    payload = model._get_request_payload([("user", "hi")])

    assert payload["model"] == "o4-mini"
    assert "temperature" not in payload


def test_create_anthropic_model_defaults():
    from langchain_anthropic import ChatAnthropic

    model = create_chat_model("anthropic")
    assert isinstance(model, ChatAnthropic)
    assert model.model == "claude-3-7-sonnet-20250219"
    assert model.max_tokens == 8192


def test_create_model_rejects_unconfigured_provider():
    with pytest.raises(ProviderError):
        create_chat_model("deepseek")
