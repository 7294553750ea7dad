"""Load settings.yaml into typed dataclasses. Validates the board at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from boardroom.models import BoardMember
from boardroom.selection import DEFAULT_ROLE_KEYWORDS

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

KNOWN_SDKS = frozenset({"anthropic", "openai", "openai_compatible", "gemini"})


class ConfigurationError(Exception):
    """Raised for invalid settings or a reference to an unregistered id."""


@dataclass
class ProviderConfig:
    name: str
    sdk: str
    model: str
    api_key_env: str
    timeout_sec: float
    max_tokens: int
    base_url: str | None = None
    max_retries: int = 0


@dataclass
class BoardSettings:
    max_concurrent_agents: int = 3
    always_include_role: str | None = "CEO"
    direct_provider: str = "anthropic"
    cost_per_token: float = 0.000001
    call_timeout_sec: float = 60.0


@dataclass
class AppConfig:
    board: BoardSettings
    providers: dict[str, ProviderConfig]
    members: list[BoardMember]
    keywords: dict[str, list[str]] = field(default_factory=lambda: dict(DEFAULT_ROLE_KEYWORDS))
    available_providers: set[str] = field(default_factory=set)


def _parse_board(raw: dict) -> BoardSettings:
    try:
        board = BoardSettings(
            max_concurrent_agents=int(raw.get("max_concurrent_agents", 3)),
            always_include_role=raw.get("always_include_role", "CEO"),
            direct_provider=str(raw.get("direct_provider", "anthropic")),
            cost_per_token=float(raw.get("cost_per_token", 0.000001)),
            call_timeout_sec=float(raw.get("call_timeout_sec", 60.0)),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid board setting: {exc}") from exc
    if board.max_concurrent_agents < 1:
        raise ConfigurationError("board.max_concurrent_agents must be >= 1")
    if board.cost_per_token < 0:
        raise ConfigurationError("board.cost_per_token must be >= 0")
    if board.call_timeout_sec <= 0:
        raise ConfigurationError("board.call_timeout_sec must be > 0")
    return board


def _parse_provider(name: str, raw: dict) -> ProviderConfig:
    try:
        provider = ProviderConfig(
            name=name,
            sdk=str(raw["sdk"]),
            model=str(raw["model"]),
            api_key_env=str(raw["api_key_env"]),
            timeout_sec=float(raw["timeout_sec"]),
            max_tokens=int(raw["max_tokens"]),
            base_url=raw.get("base_url"),
            max_retries=int(raw.get("max_retries", 0)),
        )
    except KeyError as exc:
        raise ConfigurationError(f"Provider '{name}' is missing {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Provider '{name}' has an invalid value: {exc}") from exc
    if provider.timeout_sec <= 0:
        raise ConfigurationError(f"Provider '{name}' timeout_sec must be > 0")
    if provider.max_tokens < 1:
        raise ConfigurationError(f"Provider '{name}' max_tokens must be >= 1")
    if provider.max_retries < 0:
        raise ConfigurationError(f"Provider '{name}' max_retries must be >= 0")
    if provider.sdk not in KNOWN_SDKS:
        raise ConfigurationError(
            f"Provider '{name}' has unknown sdk '{provider.sdk}' (expected one of {sorted(KNOWN_SDKS)})"
        )
    if provider.sdk == "openai_compatible" and not provider.base_url:
        raise ConfigurationError(f"Provider '{name}' needs base_url for sdk 'openai_compatible'")
    return provider


def _parse_member(raw: dict, providers: dict[str, ProviderConfig]) -> BoardMember:
    try:
        member = BoardMember(
            id=str(raw["id"]),
            name=str(raw["name"]),
            role=str(raw["role"]),
            system_prompt=str(raw["system_prompt"]),
            preferred_provider=str(raw["preferred_provider"]),
            fallback_providers=tuple(raw.get("fallback_providers") or ()),
            temperature=float(raw.get("temperature", 0.7)),
            priority=int(raw.get("priority", 99)),
            expertise=str(raw.get("expertise", "")),
        )
    except KeyError as exc:
        raise ConfigurationError(f"Board member {raw.get('id', '?')!r} is missing {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Board member {raw.get('id', '?')!r} has an invalid value: {exc}") from exc

    if not 0.0 <= member.temperature <= 2.0:
        raise ConfigurationError(f"Board member '{member.id}' temperature must be within [0, 2]")
    for provider_id in (member.preferred_provider, *member.fallback_providers):
        if provider_id not in providers:
            raise ConfigurationError(
                f"Board member '{member.id}' references unknown provider '{provider_id}'"
            )
    return member


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing, ConfigurationError if
    the content is invalid. Missing API keys are logged, not raised; callers
    check available_providers.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    board = _parse_board(raw.get("board") or {})

    providers: dict[str, ProviderConfig] = {}
    available_providers: set[str] = set()

    for provider_name, provider_raw in (raw.get("providers") or {}).items():
        providers[provider_name] = _parse_provider(provider_name, provider_raw)

        api_key = os.environ.get(providers[provider_name].api_key_env, "").strip()
        if api_key:
            available_providers.add(provider_name)
            logger.info("Provider available: %s", provider_name)
        else:
            logger.info(
                "Provider skipped (no API key): %s, set %s in .env",
                provider_name,
                providers[provider_name].api_key_env,
            )

    members_raw = raw.get("members") or []
    if not members_raw:
        raise ConfigurationError("At least one board member must be configured")
    members = [_parse_member(m, providers) for m in members_raw]

    seen: set[str] = set()
    for member in members:
        if member.id in seen:
            raise ConfigurationError(f"Duplicate board member id: {member.id}")
        seen.add(member.id)

    keywords = dict(DEFAULT_ROLE_KEYWORDS)
    for role, words in (raw.get("keywords") or {}).items():
        keywords[role] = [str(w).lower() for w in words]

    return AppConfig(
        board=board,
        providers=providers,
        members=members,
        keywords=keywords,
        available_providers=available_providers,
    )
