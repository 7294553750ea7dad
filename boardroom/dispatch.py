"""Concurrent dispatch: batched member calls with provider fallback."""

import asyncio
import logging
import time
from datetime import datetime, timezone

from boardroom.models import BoardMember, BoardResponse, CompletionRequest, Message
from boardroom.providers.base import ProviderBinding, ProviderError
from boardroom.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def _batches(members: list[BoardMember], size: int) -> list[list[BoardMember]]:
    return [members[i:i + size] for i in range(0, len(members), size)]


def _provider_chain(member: BoardMember) -> list[str]:
    """Preferred provider then fallbacks, in listed order, without repeats."""
    chain: list[str] = []
    for provider_id in (member.preferred_provider, *member.fallback_providers):
        if provider_id not in chain:
            chain.append(provider_id)
    return chain


class BatchDispatcher:
    """Runs candidates in consecutive batches of at most `max_concurrent` members.

    Every member in a batch settles (answer or give up) before the next batch
    starts. Each health probe and completion is bounded by `call_timeout_sec`.
    """

    def __init__(self, providers: ProviderRegistry, call_timeout_sec: float) -> None:
        self._providers = providers
        self._call_timeout_sec = call_timeout_sec

    async def _is_healthy(self, provider_id: str, binding: ProviderBinding) -> bool:
        try:
            return await asyncio.wait_for(binding.health_check(), timeout=self._call_timeout_sec)
        except TimeoutError:
            logger.warning("Health check for %s timed out after %ss", provider_id, self._call_timeout_sec)
            return False
        except Exception as exc:
            logger.warning("Health check for %s raised: %s", provider_id, exc)
            return False

    async def resolve_provider(self, member: BoardMember) -> ProviderBinding | None:
        """Walk the member's fallback chain; return the first healthy binding."""
        for provider_id in _provider_chain(member):
            binding = self._providers.get(provider_id)
            if binding is None:
                logger.debug("Provider %s not registered, skipping for %s", provider_id, member.name)
                continue
            if await self._is_healthy(provider_id, binding):
                return binding
            logger.warning("Provider %s unhealthy for %s, trying next", provider_id, member.name)
        return None

    async def _member_response(self, member: BoardMember, query: str) -> BoardResponse | None:
        """Resolve a provider and ask one member. Never raises."""
        binding = await self.resolve_provider(member)
        if binding is None:
            logger.warning("No available provider for %s, omitting from discussion", member.name)
            return None

        request = CompletionRequest(
            messages=[
                Message(role="system", content=member.system_prompt),
                Message(role="user", content=query),
            ],
            temperature=member.temperature,
        )

        start = time.monotonic()
        try:
            completion = await asyncio.wait_for(
                binding.complete(request),
                timeout=self._call_timeout_sec,
            )
        except TimeoutError:
            logger.warning(
                "%s (%s) did not answer within %ss, omitting",
                member.name, binding.name(), self._call_timeout_sec,
            )
            return None
        except ProviderError as exc:
            logger.warning("%s failed via %s: %s", member.name, binding.name(), exc)
            return None
        except Exception as exc:
            logger.warning("%s unexpected failure via %s: %s", member.name, binding.name(), exc)
            return None
        latency_ms = int((time.monotonic() - start) * 1000)

        return BoardResponse(
            agent_id=member.id,
            agent_name=member.name,
            role=member.role,
            content=completion.content,
            timestamp=datetime.now(timezone.utc).isoformat(),
            provider=completion.provider,
            model=completion.model,
            latency_ms=latency_ms,
            usage=completion.usage,
        )

    async def dispatch(
        self,
        members: list[BoardMember],
        query: str,
        max_concurrent: int,
    ) -> list[BoardResponse]:
        """Ask every candidate; return successful answers in batch order."""
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")

        responses: list[BoardResponse] = []
        batches = _batches(members, max_concurrent)

        for index, batch in enumerate(batches, start=1):
            logger.info(
                "Starting batch %d/%d: %s",
                index, len(batches), ", ".join(m.name for m in batch),
            )
            results = await asyncio.gather(
                *(self._member_response(m, query) for m in batch),
                return_exceptions=True,
            )
            answered = 0
            for member, result in zip(batch, results):
                if isinstance(result, BoardResponse):
                    responses.append(result)
                    answered += 1
                elif isinstance(result, BaseException):
                    logger.error("Board member %s failed to respond: %s", member.name, result)

            logger.info("Batch %d settled: %d/%d members answered", index, answered, len(batch))

        return responses
