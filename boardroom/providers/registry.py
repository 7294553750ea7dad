"""Provider registry: bindings keyed by provider id, built once from config."""

import logging
from collections.abc import Iterator

from config.config_loader import AppConfig
from boardroom.providers.anthropic import AnthropicProvider
from boardroom.providers.base import ProviderBinding, ProviderError
from boardroom.providers.gemini import GeminiProvider
from boardroom.providers.openai_compatible import OpenAICompatibleProvider
from boardroom.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[ProviderBinding]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "openai_compatible": OpenAICompatibleProvider,
    "gemini": GeminiProvider,
}


class ProviderRegistry:
    """Read-only after construction; safe to share across concurrent dispatches."""

    def __init__(self) -> None:
        self._bindings: dict[str, ProviderBinding] = {}

    def register(self, provider_id: str, binding: ProviderBinding) -> None:
        if provider_id in self._bindings:
            raise ValueError(f"Provider '{provider_id}' is already registered")
        self._bindings[provider_id] = binding

    def get(self, provider_id: str) -> ProviderBinding | None:
        return self._bindings.get(provider_id)

    def ids(self) -> list[str]:
        return list(self._bindings)

    def as_dict(self) -> dict[str, ProviderBinding]:
        return dict(self._bindings)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)


def build_registry(config: AppConfig) -> ProviderRegistry:
    """Construct one binding per configured provider that has credentials.

    Providers without an API key are left out; that is not an error.
    """
    registry = ProviderRegistry()
    for name, provider_cfg in config.providers.items():
        if name not in config.available_providers:
            logger.info("Provider '%s' not registered (no credentials)", name)
            continue
        binding_cls = PROVIDER_CLASSES[provider_cfg.sdk]
        try:
            binding = binding_cls(provider_cfg)
        except ProviderError as exc:
            logger.warning("Failed to instantiate provider '%s': %s", name, exc)
            continue
        registry.register(name, binding)
        logger.debug("Registered provider '%s' (%s, %s)", name, provider_cfg.sdk, provider_cfg.model)
    return registry
