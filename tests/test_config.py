"""Tests for config/config_loader.py."""

from pathlib import Path

import pytest
import yaml

from config.config_loader import (
    AppConfig,
    BoardSettings,
    ConfigurationError,
    ProviderConfig,
    load_config,
)
from boardroom.models import BoardMember
from boardroom.selection import DEFAULT_ROLE_KEYWORDS


def _settings(**overrides) -> dict:
    settings = {
        "board": {
            "max_concurrent_agents": 2,
            "always_include_role": "CEO",
            "direct_provider": "anthropic",
            "cost_per_token": 0.000002,
            "call_timeout_sec": 30,
        },
        "providers": {
            "anthropic": {
                "sdk": "anthropic",
                "model": "claude-sonnet-4-5-20250929",
                "api_key_env": "TEST_ANTHROPIC_KEY",
                "timeout_sec": 60,
                "max_tokens": 4096,
            },
            "groq": {
                "sdk": "openai_compatible",
                "model": "llama-3.3-70b-versatile",
                "api_key_env": "TEST_GROQ_KEY",
                "base_url": "https://api.groq.com/openai/v1",
                "timeout_sec": 30,
                "max_tokens": 2048,
                "max_retries": 2,
            },
        },
        "members": [
            {
                "id": "ceo",
                "name": "CEO",
                "role": "CEO",
                "system_prompt": "You are the CEO.",
                "preferred_provider": "anthropic",
                "fallback_providers": ["groq"],
                "temperature": 0.7,
                "priority": 1,
            },
            {
                "id": "cfo",
                "name": "CFO",
                "role": "CFO",
                "system_prompt": "You are the CFO.",
                "preferred_provider": "groq",
                "priority": 2,
            },
        ],
    }
    settings.update(overrides)
    return settings


def _write(tmp_path: Path, settings: dict) -> Path:
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.dump(settings), encoding="utf-8")
    return path


@pytest.fixture
def minimal_settings(tmp_path: Path) -> Path:
    return _write(tmp_path, _settings())


def test_load_config_returns_app_config(minimal_settings):
    config = load_config(minimal_settings)
    assert isinstance(config, AppConfig)
    assert isinstance(config.board, BoardSettings)


def test_load_config_board(minimal_settings):
    board = load_config(minimal_settings).board
    assert board.max_concurrent_agents == 2
    assert board.always_include_role == "CEO"
    assert board.direct_provider == "anthropic"
    assert board.cost_per_token == 0.000002
    assert board.call_timeout_sec == 30.0


def test_load_config_board_defaults(tmp_path):
    config = load_config(_write(tmp_path, _settings(board={})))
    assert config.board == BoardSettings()


def test_load_config_providers(minimal_settings):
    config = load_config(minimal_settings)
    assert isinstance(config.providers["anthropic"], ProviderConfig)
    assert config.providers["anthropic"].base_url is None
    assert config.providers["anthropic"].max_retries == 0
    assert config.providers["groq"].base_url == "https://api.groq.com/openai/v1"
    assert config.providers["groq"].max_retries == 2


def test_load_config_members_in_order(minimal_settings):
    config = load_config(minimal_settings)
    assert [m.id for m in config.members] == ["ceo", "cfo"]
    assert isinstance(config.members[0], BoardMember)
    assert config.members[0].fallback_providers == ("groq",)
    assert config.members[1].fallback_providers == ()
    assert config.members[1].temperature == 0.7


def test_load_config_default_keywords(minimal_settings):
    assert load_config(minimal_settings).keywords == DEFAULT_ROLE_KEYWORDS


def test_load_config_keyword_override_is_lowercased(tmp_path):
    config = load_config(_write(tmp_path, _settings(keywords={"CFO": ["EBITDA", "Margin"]})))
    assert config.keywords["CFO"] == ["ebitda", "margin"]
    assert config.keywords["CTO"] == DEFAULT_ROLE_KEYWORDS["CTO"]


def test_available_providers_with_key(minimal_settings, monkeypatch):
    monkeypatch.setenv("TEST_ANTHROPIC_KEY", "sk-test-key")
    monkeypatch.delenv("TEST_GROQ_KEY", raising=False)
    config = load_config(minimal_settings)
    assert config.available_providers == {"anthropic"}


def test_no_available_providers_without_keys(minimal_settings, monkeypatch):
    monkeypatch.delenv("TEST_ANTHROPIC_KEY", raising=False)
    monkeypatch.setenv("TEST_GROQ_KEY", "   ")
    assert load_config(minimal_settings).available_providers == set()


def test_load_config_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config(Path("/nonexistent/settings.yaml"))


def test_shipped_settings_are_valid():
    config = load_config()
    assert {m.id for m in config.members} >= {"ceo", "cfo", "cto"}
    assert config.board.max_concurrent_agents >= 1


# --- fail-fast validation ---

def test_rejects_zero_concurrency(tmp_path):
    with pytest.raises(ConfigurationError, match="max_concurrent_agents"):
        load_config(_write(tmp_path, _settings(board={"max_concurrent_agents": 0})))


def test_rejects_negative_cost(tmp_path):
    with pytest.raises(ConfigurationError, match="cost_per_token"):
        load_config(_write(tmp_path, _settings(board={"cost_per_token": -1})))


def test_rejects_unknown_sdk(tmp_path):
    settings = _settings()
    settings["providers"]["anthropic"]["sdk"] = "carrier-pigeon"
    with pytest.raises(ConfigurationError, match="unknown sdk"):
        load_config(_write(tmp_path, settings))


def test_rejects_openai_compatible_without_base_url(tmp_path):
    settings = _settings()
    del settings["providers"]["groq"]["base_url"]
    with pytest.raises(ConfigurationError, match="base_url"):
        load_config(_write(tmp_path, settings))


def test_rejects_provider_missing_field(tmp_path):
    settings = _settings()
    del settings["providers"]["anthropic"]["model"]
    with pytest.raises(ConfigurationError, match="model"):
        load_config(_write(tmp_path, settings))


def test_rejects_member_with_unknown_provider(tmp_path):
    settings = _settings()
    settings["members"][1]["fallback_providers"] = ["huggingface"]
    with pytest.raises(ConfigurationError, match="huggingface"):
        load_config(_write(tmp_path, settings))


def test_rejects_duplicate_member_ids(tmp_path):
    settings = _settings()
    settings["members"][1]["id"] = "ceo"
    with pytest.raises(ConfigurationError, match="Duplicate"):
        load_config(_write(tmp_path, settings))


def test_rejects_out_of_range_temperature(tmp_path):
    settings = _settings()
    settings["members"][0]["temperature"] = 3.5
    with pytest.raises(ConfigurationError, match="temperature"):
        load_config(_write(tmp_path, settings))


def test_fractional_provider_timeout_is_kept(tmp_path):
    settings = _settings()
    settings["providers"]["anthropic"]["timeout_sec"] = 0.5
    config = load_config(_write(tmp_path, settings))
    assert config.providers["anthropic"].timeout_sec == 0.5


@pytest.mark.parametrize("field, value", [
    ("timeout_sec", -5),
    ("timeout_sec", 0),
    ("max_tokens", 0),
    ("max_retries", -1),
])
def test_rejects_out_of_range_provider_values(tmp_path, field, value):
    settings = _settings()
    settings["providers"]["groq"][field] = value
    with pytest.raises(ConfigurationError, match=field):
        load_config(_write(tmp_path, settings))


def test_rejects_non_numeric_member_value(tmp_path):
    settings = _settings()
    settings["members"][0]["temperature"] = "hot"
    with pytest.raises(ConfigurationError, match="invalid value"):
        load_config(_write(tmp_path, settings))


def test_rejects_non_numeric_provider_value(tmp_path):
    settings = _settings()
    settings["providers"]["anthropic"]["max_tokens"] = "lots"
    with pytest.raises(ConfigurationError, match="anthropic"):
        load_config(_write(tmp_path, settings))


def test_rejects_non_numeric_board_value(tmp_path):
    with pytest.raises(ConfigurationError, match="Invalid board setting"):
        load_config(_write(tmp_path, _settings(board={"call_timeout_sec": "soon"})))


def test_rejects_empty_board(tmp_path):
    with pytest.raises(ConfigurationError, match="board member"):
        load_config(_write(tmp_path, _settings(members=[])))
