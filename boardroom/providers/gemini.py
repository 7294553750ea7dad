"""Google Gemini binding using google-genai SDK with native async."""

import asyncio
import logging
import os
import time

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from config.config_loader import ProviderConfig
from boardroom.models import CompletionRequest, CompletionResponse, TokenUsage
from boardroom.providers.base import ProviderBinding, ProviderError

logger = logging.getLogger(__name__)

# Gemini calls the assistant side of a conversation "model".
_ROLE_MAP = {"user": "user", "assistant": "model"}


def _to_contents(request: CompletionRequest) -> tuple[str | None, list[genai_types.Content]]:
    system_parts = [m.content for m in request.messages if m.role == "system"]
    contents = [
        genai_types.Content(role=_ROLE_MAP[m.role], parts=[genai_types.Part(text=m.content)])
        for m in request.messages
        if m.role != "system"
    ]
    return ("\n\n".join(system_parts) if system_parts else None), contents


class GeminiProvider(ProviderBinding):
    """Google Gemini binding via google-genai SDK."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = genai.Client(api_key=api_key)

    def name(self) -> str:
        return self._config.name

    def model_string(self) -> str:
        return self._config.model

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        model = request.model or self._config.model
        system, contents = _to_contents(request)

        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=model,
                    contents=contents,
                    config=genai_types.GenerateContentConfig(
                        system_instruction=system,
                        temperature=request.temperature,
                        max_output_tokens=request.max_tokens or self._config.max_tokens,
                    ),
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except genai_errors.APIError as exc:
            raise ProviderError(
                self._config.name,
                f"API error: {exc.message}",
                code=exc.status,
                status_code=exc.code,
            ) from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency_ms = int((time.monotonic() - start) * 1000)

        if not response.text:
            raise ProviderError(self._config.name, "Empty response text")

        usage = TokenUsage()
        meta = response.usage_metadata
        if meta:
            usage = TokenUsage(
                prompt_tokens=meta.prompt_token_count or 0,
                completion_tokens=meta.candidates_token_count or 0,
                total_tokens=meta.total_token_count or 0,
            )

        logger.info("Gemini %s: %dms, %d tokens", model, latency_ms, usage.total_tokens)

        return CompletionResponse(
            content=response.text,
            model=response.model_version or model,
            usage=usage,
            provider=self._config.name,
            latency_ms=latency_ms,
        )
