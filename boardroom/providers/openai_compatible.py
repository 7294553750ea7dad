"""OpenAI-compatible binding (Hugging Face router, Groq, Together, xAI) via openai SDK."""

import os

from openai import AsyncOpenAI

from config.config_loader import ProviderConfig
from boardroom.models import CompletionRequest, CompletionResponse
from boardroom.providers.base import ProviderBinding, ProviderError
from boardroom.providers.openai_provider import chat_completion


class OpenAICompatibleProvider(ProviderBinding):
    """Any vendor exposing an OpenAI-style /chat/completions endpoint."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        if not config.base_url:
            raise ProviderError(config.name, "base_url is required for OpenAI-compatible providers")
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=config.base_url,
            max_retries=config.max_retries,
        )

    def name(self) -> str:
        return self._config.name

    def model_string(self) -> str:
        return self._config.model

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        return await chat_completion(self._client, self._config, request, self._config.name)
