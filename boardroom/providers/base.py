"""Abstract base for all completion provider bindings."""

import logging
from abc import ABC, abstractmethod

from boardroom.models import CompletionRequest, CompletionResponse, Message

logger = logging.getLogger(__name__)

_PROBE_PROMPT = "Reply with the word OK only."
_PROBE_MAX_TOKENS = 10


class ProviderError(Exception):
    """Raised when a provider call fails."""

    def __init__(
        self,
        provider_name: str,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.provider_name = provider_name
        self.code = code
        self.status_code = status_code
        super().__init__(f"[{provider_name}] {message}")


class ProviderBinding(ABC):
    """Uniform completion capability over one backend service."""

    @abstractmethod
    def name(self) -> str:
        """Return the provider id (e.g. 'anthropic', 'openai')."""
        ...

    @abstractmethod
    def model_string(self) -> str:
        """Return the default model identifier string."""
        ...

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Run one chat completion.

        Args:
            request: Ordered turns plus sampling options.

        Returns:
            CompletionResponse with content, usage and latency.

        Raises:
            ProviderError: On API failure, timeout, or invalid response.
        """
        ...

    async def health_check(self) -> bool:
        """Send a minimal low-token probe. Never raises."""
        probe = CompletionRequest(
            messages=[Message(role="user", content=_PROBE_PROMPT)],
            max_tokens=_PROBE_MAX_TOKENS,
        )
        try:
            response = await self.complete(probe)
        except Exception as exc:
            logger.debug("Health probe failed for %s: %s", self.name(), exc)
            return False
        return bool(response.content)
