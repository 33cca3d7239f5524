"""
LLM Client Factory

Creates the adapter for a provider from settings and a resolved API key.
"""

import logging

import httpx

from codeforge.config import Settings, get_settings
from codeforge.models.enums import Provider
from codeforge.services.llm.anthropic_client import AnthropicClient
from codeforge.services.llm.base import BaseLLMClient, ProviderConfig
from codeforge.services.llm.google_client import GoogleAIClient
from codeforge.services.llm.groq_client import GroqClient
from codeforge.services.llm.openai_client import OpenAIClient
from codeforge.services.model_catalog import ModelDescriptor, get_models_by_provider

logger = logging.getLogger(__name__)

LLM_CLIENTS: dict[Provider, type[BaseLLMClient]] = {
    Provider.OPENAI: OpenAIClient,
    Provider.ANTHROPIC: AnthropicClient,
    Provider.GOOGLE: GoogleAIClient,
    Provider.GROQ: GroqClient,
}

_missing = set(Provider) - set(LLM_CLIENTS)
if _missing:
    raise RuntimeError(f"No LLM client registered for: {sorted(p.value for p in _missing)}")


def _base_url(provider: Provider, settings: Settings) -> str:
    return {
        Provider.OPENAI: settings.openai_base_url,
        Provider.ANTHROPIC: settings.anthropic_base_url,
        Provider.GOOGLE: settings.google_base_url,
        Provider.GROQ: settings.groq_base_url,
    }[provider]


def _default_model(provider: Provider) -> ModelDescriptor:
    models = get_models_by_provider(provider)
    if not models:
        raise ValueError(f"No catalog model for provider: {provider.value}")
    return models[0]


def create_llm_client(
    provider: Provider | str,
    api_key: str,
    *,
    model: ModelDescriptor | None = None,
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> BaseLLMClient:
    """
    Create the adapter for a provider.

    Args:
        provider: Provider to dispatch to
        api_key: Resolved secret for the provider
        model: Catalog model to use (defaults to the provider's catalog entry)
        settings: Settings override (defaults to get_settings())
        http_client: Shared httpx client; a per-call client is used when omitted

    Returns:
        Configured adapter instance

    Raises:
        ValueError: If the provider is unknown or the model belongs to another provider
    """
    try:
        provider = Provider(provider)
    except ValueError:
        raise ValueError(f"Unknown LLM provider: {provider}") from None

    settings = settings or get_settings()
    model = model or _default_model(provider)
    if model.provider != provider:
        raise ValueError(f"Model {model.id} is not served by {provider.value}")

    extra_headers: dict[str, str] = {}
    if provider == Provider.ANTHROPIC:
        extra_headers["anthropic-version"] = settings.anthropic_version

    config = ProviderConfig(
        api_key=api_key,
        model=model.vendor_model,
        display_name=model.name,
        base_url=_base_url(provider, settings),
        default_temperature=settings.default_temperature,
        default_max_tokens=settings.default_max_tokens,
        timeout=settings.request_timeout_seconds,
        extra_headers=extra_headers,
    )

    logger.debug(f"Creating {provider.value} client for model {model.vendor_model}")
    return LLM_CLIENTS[provider](config, http_client=http_client)
