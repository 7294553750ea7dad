"""Pure dataclasses for the board pipeline. No logic, no deps."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BoardMember:
    id: str
    name: str
    role: str
    system_prompt: str
    preferred_provider: str
    fallback_providers: tuple[str, ...] = ()
    temperature: float = 0.7
    priority: int = 99
    expertise: str = ""


@dataclass
class Message:
    role: str              # "system", "user" or "assistant"
    content: str


@dataclass
class CompletionRequest:
    messages: list[Message]
    temperature: float = 0.7
    max_tokens: int | None = None
    model: str | None = None   # overrides the provider's configured model


@dataclass
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class CompletionResponse:
    content: str
    model: str             # actual model string the vendor reported
    usage: TokenUsage
    provider: str          # provider id, e.g. "anthropic"
    latency_ms: int


@dataclass
class BoardResponse:
    agent_id: str
    agent_name: str
    role: str
    content: str
    timestamp: str         # UTC, ISO-8601
    provider: str
    model: str
    latency_ms: int
    usage: TokenUsage = field(default_factory=TokenUsage)


@dataclass
class Discussion:
    query: str
    mode: str
    candidates: list[str] = field(default_factory=list)   # member ids selected before dispatch
    responses: list[BoardResponse] = field(default_factory=list)
    total_latency_ms: int = 0
    total_cost: float = 0.0
