# src/llm/client_factory.py - v3
"""Factory: instantiate the LLM client backing the classify/extract agents."""

from __future__ import annotations

import importlib
import logging

from leaseorganizer.config.settings import Settings
from leaseorganizer.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name -> adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "anthropic": "leaseorganizer.llm.adapters.anthropic_adapter.AnthropicAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    settings: Settings | None = None,
    provider: str = "anthropic",
    model: str | None = None,
) -> BaseLLMClient:
    """Instantiate the adapter for a provider.

    Args:
        settings: Application settings (API key, default model).
        provider: Provider identifier.
        model: Model name; defaults to LLM_DEFAULT_MODEL.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )
    settings = settings or Settings()
    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])
    model = model or settings.llm_default_model

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(model=model, api_key=settings.anthropic_api_key or None)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter implementing BaseLLMClient."""
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s -> %s", name, class_path)


def _import_class(class_path: str) -> type:
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
