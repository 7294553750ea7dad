"""OpenAI binding using openai SDK with native async."""

import asyncio
import logging
import os
import time

import openai
from openai import AsyncOpenAI

from config.config_loader import ProviderConfig
from boardroom.models import CompletionRequest, CompletionResponse, TokenUsage
from boardroom.providers.base import ProviderBinding, ProviderError

logger = logging.getLogger(__name__)


async def chat_completion(
    client: AsyncOpenAI,
    config: ProviderConfig,
    request: CompletionRequest,
    label: str,
) -> CompletionResponse:
    """Run a chat completion against any endpoint speaking the OpenAI wire format."""
    model = request.model or config.model
    start = time.monotonic()
    try:
        response = await asyncio.wait_for(
            client.chat.completions.create(
                model=model,
                messages=[{"role": m.role, "content": m.content} for m in request.messages],
                max_tokens=request.max_tokens or config.max_tokens,
                temperature=request.temperature,
            ),
            timeout=config.timeout_sec,
        )
    except TimeoutError as exc:
        raise ProviderError(config.name, f"Request timed out after {config.timeout_sec}s") from exc
    except openai.APIStatusError as exc:
        raise ProviderError(
            config.name,
            f"API error: {exc.message}",
            code=exc.code,
            status_code=exc.status_code,
        ) from exc
    except Exception as exc:
        raise ProviderError(config.name, f"API call failed: {exc}") from exc

    latency_ms = int((time.monotonic() - start) * 1000)

    choice = response.choices[0] if response.choices else None
    if not choice or not choice.message.content:
        raise ProviderError(config.name, "Empty response content")

    usage = TokenUsage()
    if response.usage:
        usage = TokenUsage(
            prompt_tokens=response.usage.prompt_tokens,
            completion_tokens=response.usage.completion_tokens,
            total_tokens=response.usage.total_tokens,
        )

    logger.info("%s %s: %dms, %d tokens", label, model, latency_ms, usage.total_tokens)

    return CompletionResponse(
        content=choice.message.content,
        model=response.model or model,
        usage=usage,
        provider=config.name,
        latency_ms=latency_ms,
    )


class OpenAIProvider(ProviderBinding):
    """OpenAI binding via openai SDK."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
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
        return await chat_completion(self._client, self._config, request, "OpenAI")
