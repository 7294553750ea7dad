"""Board orchestration: select members, dispatch in batches, aggregate."""

import asyncio
import logging
import time

from config.config_loader import AppConfig, ConfigurationError
from boardroom.aggregate import aggregate
from boardroom.dispatch import BatchDispatcher
from boardroom.members import MemberRegistry
from boardroom.models import CompletionRequest, CompletionResponse, Discussion, Message
from boardroom.providers.base import ProviderError
from boardroom.providers.registry import ProviderRegistry, build_registry
from boardroom.selection import InputError, SelectionMode, select_members

logger = logging.getLogger(__name__)

DIRECT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Provide clear, accurate, and thoughtful responses."
)
DIRECT_TEMPERATURE = 0.7

__all__ = ["BoardOrchestrator", "ConfigurationError", "InputError"]


def _require_query(query: str | None) -> str:
    if query is None or not query.strip():
        raise InputError("Query is required")
    return query


class BoardOrchestrator:
    """Facade over selection, dispatch and aggregation for one board."""

    def __init__(self, config: AppConfig, providers: ProviderRegistry | None = None) -> None:
        self._config = config
        self._members = MemberRegistry(config.members)
        self._providers = providers if providers is not None else build_registry(config)
        self._dispatcher = BatchDispatcher(self._providers, config.board.call_timeout_sec)

        if not len(self._providers):
            logger.warning("No providers registered; every member will be omitted")

    @property
    def members(self) -> MemberRegistry:
        return self._members

    @property
    def providers(self) -> ProviderRegistry:
        return self._providers

    def provider_ids(self) -> list[str]:
        """Ids of the providers registered for this board, in config order."""
        return self._providers.ids()

    async def discuss_query(self, query: str, mode: str | SelectionMode = "relevant") -> Discussion:
        """Ask the selected members and return their priority-ordered answers.

        Raises:
            InputError: Empty query or unparseable mode.
            ConfigurationError: `specific:<id>` names an unknown member.
        """
        query = _require_query(query)
        selection = SelectionMode.parse(mode)
        if selection.kind == "specific" and selection.member_id not in self._members:
            raise ConfigurationError(f"Board member '{selection.member_id}' not configured")

        board = self._config.board
        candidates = select_members(
            query,
            selection,
            self._members,
            self._config.keywords,
            board.max_concurrent_agents,
            board.always_include_role,
        )
        logger.info(
            "Discussing with %d member(s) [%s]: %s",
            len(candidates), selection, ", ".join(m.name for m in candidates),
        )

        start = time.monotonic()
        responses = await self._dispatcher.dispatch(candidates, query, board.max_concurrent_agents)
        total_latency_ms = int((time.monotonic() - start) * 1000)

        return aggregate(
            query=query,
            mode=str(selection),
            candidates=[m.id for m in candidates],
            responses=responses,
            members=self._members,
            total_latency_ms=total_latency_ms,
            cost_per_token=board.cost_per_token,
        )

    async def get_direct_response(self, query: str, provider_id: str | None = None) -> CompletionResponse:
        """Single completion from one provider, bypassing member selection.

        Raises:
            InputError: Empty query.
            ConfigurationError: The provider is not registered. No call is made.
            ProviderError: The provider call failed or timed out.
        """
        query = _require_query(query)
        name = provider_id or self._config.board.direct_provider
        binding = self._providers.get(name)
        if binding is None:
            raise ConfigurationError(f"Provider {name} not configured")

        request = CompletionRequest(
            messages=[
                Message(role="system", content=DIRECT_SYSTEM_PROMPT),
                Message(role="user", content=query),
            ],
            temperature=DIRECT_TEMPERATURE,
        )
        timeout = self._config.board.call_timeout_sec
        try:
            return await asyncio.wait_for(binding.complete(request), timeout=timeout)
        except TimeoutError as exc:
            raise ProviderError(name, f"Request timed out after {timeout}s") from exc
