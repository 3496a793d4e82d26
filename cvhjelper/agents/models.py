"""
Chat model factory.

Maps the provider/model strings sent by the client onto a LangChain chat
model. Providers are imported lazily so a missing key for one provider never
blocks the others.
"""

import logging
import re
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel

from cvhjelper.config import settings
from cvhjelper.exceptions import ProviderError

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "anthropic", "deepseek")
KNOWN_PROVIDERS = SUPPORTED_PROVIDERS + ("mistral", "google")

# o-series reasoning models only accept the default temperature
REASONING_MODEL_PATTERN = re.compile(r"^o\d")

DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-3-7-sonnet-20250219",
    "deepseek": "deepseek-chat",
}

# Options shown in the model selector
MODEL_OPTIONS = [
    {"provider": "openai", "model": "gpt-4o", "displayName": "GPT-4o", "supportsPDF": True},
    {"provider": "openai", "model": "o4-mini", "displayName": "GPT-o4-mini", "supportsPDF": True},
    {
        "provider": "anthropic",
        "model": "claude-3-7-sonnet-20250219",
        "displayName": "Claude 3.7 Sonnet",
        "supportsPDF": True,
    },
    {
        "provider": "anthropic",
        "model": "claude-3-5-sonnet-20241022",
        "displayName": "Claude 3.5 Sonnet",
        "supportsPDF": True,
    },
    {"provider": "deepseek", "model": "deepseek-chat", "displayName": "DeepSeek Chat", "supportsPDF": True},
    {"provider": "mistral", "model": "mistral-large-latest", "displayName": "Mistral Large", "supportsPDF": False},
    {"provider": "mistral", "model": "mistral-medium-latest", "displayName": "Mistral Medium", "supportsPDF": False},
    {"provider": "mistral", "model": "mistral-small-latest", "displayName": "Mistral Small", "supportsPDF": False},
    {"provider": "google", "model": "gemini-1.5-pro", "displayName": "Gemini 1.5 Pro", "supportsPDF": False},
]


def _api_key(provider: str) -> str:
    return getattr(settings, f"{provider}_api_key", "")


def is_provider_available(provider: str) -> bool:
    """True when the provider is supported and has an API key."""
    return provider in SUPPORTED_PROVIDERS and bool(_api_key(provider))


def supports_structured_output(provider: str) -> bool:
    """Anthropic gets a plain-text evaluation that is parsed afterwards."""
    return provider != "anthropic"


def resolve_provider(provider: str | None) -> str:
    """Normalize and validate a provider string.

    Raises:
        ProviderError: unknown, unsupported or unconfigured provider
    """
    name = (provider or settings.default_provider).strip().lower()
    if name not in KNOWN_PROVIDERS:
        raise ProviderError(f"Unknown model provider: {name}")
    if name not in SUPPORTED_PROVIDERS:
        raise ProviderError(f"Unsupported model provider: {name}")
    if not _api_key(name):
        raise ProviderError(f"{name} API key is not configured")
    return name


def create_chat_model(
    provider: str | None = None,
    model_name: str | None = None,
    **kwargs: Any,
) -> BaseChatModel:
    """Build a chat model for the given provider and model name."""
    name = resolve_provider(provider)
    model = model_name or DEFAULT_MODELS.get(name, settings.default_model)

    opts = {
        "temperature": settings.llm_temperature,
        "timeout": settings.llm_timeout,
    }
    opts.update(kwargs)
    if name == "openai" and REASONING_MODEL_PATTERN.match(model):
        opts.pop("temperature", None)

    logger.info(f"Creating {name} chat model {model}")

    match name:
        case "openai":
            from langchain_openai import ChatOpenAI

            return ChatOpenAI(model=model, api_key=settings.openai_api_key, **opts)
        case "anthropic":
            from langchain_anthropic import ChatAnthropic

            opts.setdefault("max_tokens", 8192)
            return ChatAnthropic(model=model, api_key=settings.anthropic_api_key, **opts)
        case "deepseek":
            from langchain_deepseek import ChatDeepSeek

            return ChatDeepSeek(model=model, api_key=settings.deepseek_api_key, **opts)
        case _:
            raise ProviderError(f"Unsupported model provider: {name}")
