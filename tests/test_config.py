"""Tests for configuration management."""

import json

import pytest
from copilot.config import (
    AIModelConfig,
    ConfigManager,
    InMemoryConfigStore,
    JsonFileConfigStore,
    SystemConfig,
)
from copilot.exceptions import ConfigError, ConfigImportError, ConfigNotLoadedError

ENV_VARS = [
    "COPILOT_AI_PROVIDER",
    "COPILOT_MODEL",
    "COPILOT_MAX_TOKENS",
    "COPILOT_TEMPERATURE",
    "COPILOT_API_KEY",
    "COPILOT_BASE_URL",
    "COPILOT_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def manager():
    manager = ConfigManager()
    manager.load_config()
    return manager


def test_ai_config_from_env(monkeypatch):
    """Test COPILOT_* variables override the AI defaults."""
    monkeypatch.setenv("COPILOT_AI_PROVIDER", "anthropic")
    monkeypatch.setenv("COPILOT_MODEL", "claude-3-haiku")
    monkeypatch.setenv("COPILOT_MAX_TOKENS", "4096")
    monkeypatch.setenv("COPILOT_TEMPERATURE", "0.3")
    monkeypatch.setenv("COPILOT_API_KEY", "sk-test")
    monkeypatch.setenv("COPILOT_TIMEOUT", "15")

    config = AIModelConfig.from_env()

    assert config.provider == "anthropic"
    assert config.model == "claude-3-haiku"
    assert config.max_tokens == 4096
    assert config.temperature == 0.3
    assert config.api_key == "sk-test"
    assert config.timeout == 15


def test_ai_config_from_env_ignores_bad_numbers(monkeypatch):
    monkeypatch.setenv("COPILOT_MAX_TOKENS", "lots")
    monkeypatch.setenv("COPILOT_TEMPERATURE", "warm")

    config = AIModelConfig.from_env()

    assert config.max_tokens == 2000
    assert config.temperature == 0.7


def test_ai_config_defaults():
    config = AIModelConfig.from_env()
    assert config.provider == "local"
    assert config.model == "gpt-3.5-turbo"
    assert config.timeout == 60


class TestConfigManager:
    def test_reads_before_load_raise(self):
        manager = ConfigManager()
        assert manager.is_loaded() is False
        with pytest.raises(ConfigNotLoadedError):
            manager.get_config()
        with pytest.raises(ConfigNotLoadedError):
            manager.get_ai_config()
        with pytest.raises(ConfigNotLoadedError):
            manager.get_copilot_config()

    def test_load_from_empty_store_uses_defaults(self, manager):
        assert manager.is_loaded() is True
        assert manager.get_config() == SystemConfig()
        assert manager.get_context_config().max_files == 100
        assert manager.get_plugin_config().enabled_plugins == [
            "javascript",
            "typescript",
            "python",
            "java",
            "go",
        ]
        assert manager.get_ui_config().theme == "system"
        assert manager.get_template_config().templates_path == "./templates"

    def test_load_merges_partial_sections(self):
        store = InMemoryConfigStore({"ai": {"model": "gpt-4o"}, "ui": {"theme": "dark"}})
        manager = ConfigManager(store)
        manager.load_config()

        ai = manager.get_ai_config()
        assert ai.model == "gpt-4o"
        assert ai.provider == "local"
        assert manager.get_ui_config().theme == "dark"
        assert manager.get_ui_config().font_size == 14

    def test_load_rejects_bad_types(self):
        manager = ConfigManager(InMemoryConfigStore({"ui": {"theme": "neon"}}))
        with pytest.raises(ConfigImportError):
            manager.load_config()

    def test_get_config_returns_copy(self, manager):
        config = manager.get_config()
        config.ai.model = "changed"
        assert manager.get_ai_config().model == "gpt-3.5-turbo"

    def test_copilot_config_derived_from_ai_section(self, manager):
        manager.update_ai_config(provider="openai", model="gpt-4", max_tokens=1500, temperature=0.1)

        copilot = manager.get_copilot_config()

        assert copilot.ai_provider == "openai"
        assert copilot.model == "gpt-4"
        assert copilot.max_tokens == 1500
        assert copilot.temperature == 0.1
        assert copilot.context_window == 1500

    def test_update_section_rejects_unknown_keys(self, manager):
        with pytest.raises(ConfigError):
            manager.update_context_config(max_filez=3)

    def test_update_config_whole_sections(self, manager):
        manager.update_config(ui={"font_size": 18}, plugins={"enabled_plugins": ["python"]})
        assert manager.get_ui_config().font_size == 18
        assert manager.get_plugin_config().enabled_plugins == ["python"]

        with pytest.raises(ConfigError):
            manager.update_config(telemetry={})

    @pytest.mark.parametrize(
        "section,changes",
        [
            ("ai", {"max_tokens": 0}),
            ("ai", {"temperature": 2.5}),
            ("ai", {"temperature": -0.1}),
            ("ai", {"model": ""}),
            ("templates", {"templates_path": ""}),
            ("context", {"max_files": 0}),
            ("context", {"max_file_size": -1}),
            ("context", {"cache_size": 0}),
        ],
    )
    def test_validate_config_rejects(self, manager, section, changes):
        getattr(manager, f"update_{'template' if section == 'templates' else section}_config")(
            **changes
        )
        assert manager.validate_config() is False

    @pytest.mark.parametrize(
        "changes",
        [{"temperature": None}, {"max_tokens": "lots"}, {"max_tokens": None}],
    )
    def test_validate_config_wrong_types_return_false(self, manager, changes):
        """Updates skip type checks, so validation must not raise on them."""
        manager.update_ai_config(**changes)
        assert manager.validate_config() is False

    def test_validate_config_accepts_defaults(self, manager):
        assert manager.validate_config() is True

    def test_validate_config_boundaries(self, manager):
        manager.update_ai_config(temperature=2.0)
        assert manager.validate_config() is True
        manager.update_ai_config(temperature=0.0)
        assert manager.validate_config() is True

    def test_reset_to_defaults(self, manager):
        manager.update_ui_config(theme="dark")
        manager.reset_to_defaults()
        assert manager.get_ui_config().theme == "system"

    def test_export_import_round_trip(self, manager):
        manager.update_ai_config(model="gpt-4o")
        exported = manager.export_config()

        other = ConfigManager()
        other.import_config(exported)

        assert other.is_loaded() is True
        assert other.get_config() == manager.get_config()

    @pytest.mark.parametrize("payload", ["{not json", "[1, 2]", '{"ai": {"max_tokens": "many"}}'])
    def test_import_invalid(self, manager, payload):
        with pytest.raises(ConfigImportError, match="Invalid configuration format"):
            manager.import_config(payload)

    def test_supported_providers_and_models(self):
        assert ConfigManager.get_supported_ai_providers() == ["openai", "anthropic", "local"]
        assert "gpt-4o" in ConfigManager.get_supported_models("openai")
        assert ConfigManager.get_supported_models("unknown") == []


class TestJsonFileConfigStore:
    def test_missing_file_loads_none(self, tmp_path):
        assert JsonFileConfigStore(tmp_path / "missing.json").load() is None

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "ai-copilot.config.json"
        manager = ConfigManager(JsonFileConfigStore(path))
        manager.load_config()
        manager.update_context_config(max_files=25)
        manager.save_config()

        assert json.loads(path.read_text())["context"]["max_files"] == 25

        reloaded = ConfigManager(JsonFileConfigStore(path))
        reloaded.load_config()
        assert reloaded.get_context_config().max_files == 25

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{oops")
        with pytest.raises(ConfigImportError):
            JsonFileConfigStore(path).load()
