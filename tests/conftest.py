"""Shared pytest fixtures."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from config.config_loader import AppConfig, BoardSettings, ProviderConfig
from boardroom.members import MemberRegistry
from boardroom.models import BoardMember, CompletionRequest, CompletionResponse, TokenUsage
from boardroom.providers.base import ProviderBinding
from boardroom.providers.registry import ProviderRegistry


def make_completion(
    provider: str = "mock",
    content: str = "Mock response",
    total_tokens: int = 10,
    latency_ms: int = 100,
) -> CompletionResponse:
    return CompletionResponse(
        content=content,
        model="mock-model",
        usage=TokenUsage(prompt_tokens=total_tokens // 2, completion_tokens=total_tokens - total_tokens // 2,
                         total_tokens=total_tokens),
        provider=provider,
        latency_ms=latency_ms,
    )


class MockProvider(ProviderBinding):
    """Test double ProviderBinding."""

    def __init__(
        self,
        provider_name: str = "mock",
        response_content: str = "Mock response",
        total_tokens: int = 10,
        healthy: bool = True,
    ) -> None:
        self._name = provider_name
        self._response_content = response_content
        self._total_tokens = total_tokens
        # Shadow the class methods with AsyncMocks at the instance level.
        self.complete = AsyncMock(  # type: ignore[assignment]
            return_value=make_completion(provider_name, response_content, total_tokens)
        )
        self.health_check = AsyncMock(return_value=healthy)  # type: ignore[assignment]

    def name(self) -> str:
        return self._name

    def model_string(self) -> str:
        return "mock-model"

    async def complete(self, request: CompletionRequest) -> CompletionResponse:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return make_completion(self._name, self._response_content, self._total_tokens)


class SlowProvider(ProviderBinding):
    """Sleeps before answering and records how many calls overlap."""

    def __init__(self, provider_name: str, delay_sec: float, total_tokens: int = 10) -> None:
        self._name = provider_name
        self._delay_sec = delay_sec
        self._total_tokens = total_tokens
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls = 0

    def name(self) -> str:
        return self._name

    def model_string(self) -> str:
        return "slow-model"

    async def health_check(self) -> bool:
        return True

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delay_sec)
        finally:
            self.in_flight -= 1
        return make_completion(self._name, f"answer from {self._name}", self._total_tokens,
                               latency_ms=int(self._delay_sec * 1000))


def make_member(
    member_id: str,
    role: str,
    priority: int,
    preferred: str = "mock",
    fallbacks: tuple[str, ...] = (),
    name: str | None = None,
) -> BoardMember:
    return BoardMember(
        id=member_id,
        name=name or role,
        role=role,
        system_prompt=f"You are the {role}.",
        preferred_provider=preferred,
        fallback_providers=fallbacks,
        temperature=0.5,
        priority=priority,
    )


def make_registry(**bindings: ProviderBinding) -> ProviderRegistry:
    registry = ProviderRegistry()
    for provider_id, binding in bindings.items():
        registry.register(provider_id, binding)
    return registry


@pytest.fixture
def board_members() -> list[BoardMember]:
    return [
        make_member("chairman", "Chairman", 0, name="The Chairman"),
        make_member("ceo", "CEO", 1),
        make_member("cfo", "CFO", 2),
        make_member("cto", "CTO", 3),
        make_member("cpo", "Chief Product Officer", 4, name="CPO"),
        make_member("cmo", "Chief Marketing Officer", 5, name="CMO"),
    ]


@pytest.fixture
def member_registry(board_members: list[BoardMember]) -> MemberRegistry:
    return MemberRegistry(board_members)


@pytest.fixture
def sample_provider_config() -> ProviderConfig:
    return ProviderConfig(
        name="test_provider",
        sdk="openai",
        model="test-model-1",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        max_tokens=1024,
        base_url=None,
    )


@pytest.fixture
def sample_app_config(board_members: list[BoardMember]) -> AppConfig:
    mock_cfg = ProviderConfig(
        name="mock",
        sdk="openai",
        model="mock-model",
        api_key_env="MOCK_API_KEY",
        timeout_sec=30,
        max_tokens=1024,
    )
    return AppConfig(
        board=BoardSettings(max_concurrent_agents=3, direct_provider="mock", call_timeout_sec=5.0),
        providers={"mock": mock_cfg},
        members=board_members,
        available_providers={"mock"},
    )


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()
