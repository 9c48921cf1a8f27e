# src/llm/client_factory.py — v3
"""Factory: instantiate LLM clients from provider names.

Used by LegalAIService to build the ordered fallback chain from
llm/config.py resolution.
"""

from __future__ import annotations

import importlib
import logging

from lexassist.config.settings import Settings
from lexassist.llm.base_client import BaseLLMClient
from lexassist.llm.config import resolve_provider_chain

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "lexassist.llm.adapters.openai_adapter.OpenAIAdapter",
    "anthropic": "lexassist.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "deepseek": "lexassist.llm.adapters.deepseek_adapter.DeepSeekAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (openai, anthropic, deepseek).
        model: Model name (e.g. gpt-4o).
        settings: Application settings (API keys, timeouts, defaults).
        **kwargs: Additional provider-specific arguments.

    Returns:
        Configured BaseLLMClient instance.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model

    if settings is not None:
        init_kwargs.setdefault("timeout_s", settings.llm_request_timeout_s)
        init_kwargs.setdefault("default_temperature", settings.llm_default_temperature)
        init_kwargs.setdefault("default_max_tokens", settings.llm_default_max_tokens)
        if provider == "openai":
            init_kwargs.setdefault("api_key", settings.openai_api_key)
        elif provider == "anthropic":
            init_kwargs.setdefault("api_key", settings.anthropic_api_key)
        elif provider == "deepseek":
            init_kwargs.setdefault("api_key", settings.deepseek_api_key)
            init_kwargs.setdefault("base_url", settings.deepseek_base_url)

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def create_provider_chain(settings: Settings) -> list[BaseLLMClient]:
    """Build clients for every provider in the configured chain, in order.

    Unregistered providers are skipped with a warning.
    """
    clients: list[BaseLLMClient] = []
    for assignment in resolve_provider_chain(settings):
        try:
            clients.append(create_llm_client(assignment.provider, assignment.model, settings))
        except UnsupportedProviderError as e:
            logger.warning("Skipping provider %s: %s", assignment.key, e)
    if not clients:
        raise UnsupportedProviderError("No usable provider in AI_PROVIDER_CHAIN")
    return clients


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s → %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
