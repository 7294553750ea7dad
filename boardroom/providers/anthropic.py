"""Anthropic Claude binding using anthropic SDK with native async."""

import asyncio
import logging
import os
import time

import anthropic as anthropic_sdk

from config.config_loader import ProviderConfig
from boardroom.models import CompletionRequest, CompletionResponse, TokenUsage
from boardroom.providers.base import ProviderBinding, ProviderError

logger = logging.getLogger(__name__)


def _split_system(request: CompletionRequest) -> tuple[str | None, list[dict[str, str]]]:
    """Anthropic takes system text as a parameter, not as a turn."""
    system_parts = [m.content for m in request.messages if m.role == "system"]
    turns = [
        {"role": m.role, "content": m.content}
        for m in request.messages
        if m.role != "system"
    ]
    return ("\n\n".join(system_parts) if system_parts else None), turns


class AnthropicProvider(ProviderBinding):
    """Anthropic Claude binding via anthropic SDK."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = anthropic_sdk.AsyncAnthropic(
            api_key=api_key,
            base_url=config.base_url,
            max_retries=config.max_retries,
        )

    def name(self) -> str:
        return self._config.name

    def model_string(self) -> str:
        return self._config.model

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        system, turns = _split_system(request)
        kwargs: dict = {
            "model": request.model or self._config.model,
            "max_tokens": request.max_tokens or self._config.max_tokens,
            "temperature": request.temperature,
            "messages": turns,
        }
        if system:
            kwargs["system"] = system

        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.messages.create(**kwargs),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except anthropic_sdk.APIStatusError as exc:
            raise ProviderError(
                self._config.name,
                f"API error: {exc.message}",
                code=type(exc).__name__,
                status_code=exc.status_code,
            ) from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency_ms = int((time.monotonic() - start) * 1000)

        text_blocks = [b.text for b in (response.content or []) if b.type == "text"]
        if not text_blocks:
            raise ProviderError(self._config.name, "No text blocks in response")

        usage = TokenUsage()
        if response.usage:
            usage = TokenUsage(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            )

        logger.info("Anthropic %s: %dms, %d tokens", response.model, latency_ms, usage.total_tokens)

        return CompletionResponse(
            content="\n".join(text_blocks),
            model=response.model or kwargs["model"],
            usage=usage,
            provider=self._config.name,
            latency_ms=latency_ms,
        )
