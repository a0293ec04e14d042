"""Configuration management for the copilot core."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Protocol

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError, ConfigImportError, ConfigNotLoadedError

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "ai-copilot.config.json"

SUPPORTED_AI_PROVIDERS = ["openai", "anthropic", "local"]

DEFAULT_IGNORED_DIRS = [
    ".git",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
    ".next",
    ".pytest_cache",
]

SUPPORTED_MODELS: Dict[str, List[str]] = {
    "openai": ["gpt-3.5-turbo", "gpt-4", "gpt-4-turbo", "gpt-4o"],
    "anthropic": ["claude-3-opus", "claude-3-sonnet", "claude-3-haiku"],
    "local": ["gpt-3.5-turbo", "llama-2", "mistral", "codellama"],
}


def _parse_int(value: Optional[str], fallback: int) -> int:
    try:
        return int(value) if value is not None else fallback
    except ValueError:
        return fallback


def _parse_float(value: Optional[str], fallback: float) -> float:
    try:
        return float(value) if value is not None else fallback
    except ValueError:
        return fallback


class AIModelConfig(BaseModel):
    """AI provider settings."""

    provider: str = Field(default="local")
    model: str = Field(default="gpt-3.5-turbo")
    max_tokens: int = Field(default=2000)
    temperature: float = Field(default=0.7)
    api_key: str = Field(default="")
    base_url: str = Field(default="")
    timeout: int = Field(default=60)  # seconds
    max_retries: int = Field(default=3)

    @classmethod
    def from_env(cls) -> "AIModelConfig":
        """Load AI settings from COPILOT_* environment variables."""
        defaults = cls()
        return cls(
            provider=os.getenv("COPILOT_AI_PROVIDER", defaults.provider),
            model=os.getenv("COPILOT_MODEL", defaults.model),
            max_tokens=_parse_int(os.getenv("COPILOT_MAX_TOKENS"), defaults.max_tokens),
            temperature=_parse_float(os.getenv("COPILOT_TEMPERATURE"), defaults.temperature),
            api_key=os.getenv("COPILOT_API_KEY", defaults.api_key),
            base_url=os.getenv("COPILOT_BASE_URL", defaults.base_url),
            timeout=_parse_int(os.getenv("COPILOT_TIMEOUT"), defaults.timeout),
        )


class TemplateConfig(BaseModel):
    templates_path: str = Field(default="./templates")
    custom_templates: List[str] = Field(default_factory=list)
    enable_community_templates: bool = Field(default=True)


class ContextConfig(BaseModel):
    max_files: int = Field(default=100)
    max_file_size: int = Field(default=1024 * 1024)  # 1MB
    cache_size: int = Field(default=1000)
    include_dependencies: bool = Field(default=True)
    ignored_dirs: List[str] = Field(default_factory=lambda: DEFAULT_IGNORED_DIRS.copy())


class PluginConfig(BaseModel):
    enabled_plugins: List[str] = Field(
        default_factory=lambda: ["javascript", "typescript", "python", "java", "go"]
    )
    plugin_directory: str = Field(default="./plugins")
    auto_load_plugins: bool = Field(default=True)


class UIConfig(BaseModel):
    theme: Literal["light", "dark", "system"] = Field(default="system")
    code_editor_theme: str = Field(default="vs-dark")
    font_size: int = Field(default=14)
    show_line_numbers: bool = Field(default=True)
    word_wrap: bool = Field(default=True)
    minimap: bool = Field(default=False)


class SystemConfig(BaseModel):
    """Complete copilot configuration."""

    ai: AIModelConfig = Field(default_factory=AIModelConfig)
    templates: TemplateConfig = Field(default_factory=TemplateConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    plugins: PluginConfig = Field(default_factory=PluginConfig)
    ui: UIConfig = Field(default_factory=UIConfig)


class CopilotConfig(BaseModel):
    """Generation parameters derived from the AI section."""

    ai_provider: str
    model: str
    max_tokens: int
    temperature: float
    context_window: int


class ConfigStore(Protocol):
    """Where configuration is persisted."""

    def load(self) -> Optional[Dict[str, Any]]: ...

    def save(self, data: Dict[str, Any]) -> None: ...


class InMemoryConfigStore:
    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data = data

    def load(self) -> Optional[Dict[str, Any]]:
        return json.loads(json.dumps(self.data)) if self.data is not None else None

    def save(self, data: Dict[str, Any]) -> None:
        self.data = json.loads(json.dumps(data))


class JsonFileConfigStore:
    """Stores configuration as a JSON file."""

    def __init__(self, path: Path | str = DEFAULT_CONFIG_PATH):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigImportError(f"Invalid configuration file: {self.path}") from e

    def save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _default_config() -> SystemConfig:
    return SystemConfig(ai=AIModelConfig.from_env())


def _merge_over_defaults(data: Dict[str, Any]) -> SystemConfig:
    """Overlay stored sections onto defaults, key by key within each section."""
    if not isinstance(data, dict):
        raise TypeError("configuration must be a JSON object")
    merged = _default_config().model_dump()
    for section, values in data.items():
        if section in merged and isinstance(values, dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return SystemConfig.model_validate(merged)


class ConfigManager:
    """In-memory configuration state with validation.

    Persistence goes through a :class:`ConfigStore`. Reads before
    :meth:`load_config` raise :class:`ConfigNotLoadedError`.
    """

    def __init__(self, store: Optional[ConfigStore] = None):
        self.store = store if store is not None else InMemoryConfigStore()
        self._config = _default_config()
        self._loaded = False

    def load_config(self) -> None:
        """Load from the store, falling back to defaults when it is empty."""
        data = self.store.load()
        if data is None:
            self._config = _default_config()
        else:
            try:
                self._config = _merge_over_defaults(data)
            except (PydanticValidationError, TypeError) as e:
                logger.error("Failed to load configuration: %s", e)
                raise ConfigImportError("Invalid configuration format") from e
        self._loaded = True
        logger.info("Configuration loaded successfully")

    def save_config(self) -> None:
        self.store.save(self._config.model_dump(mode="json"))
        logger.info("Configuration saved successfully")

    def is_loaded(self) -> bool:
        return self._loaded

    def get_config(self) -> SystemConfig:
        self._require_loaded()
        return self._config.model_copy(deep=True)

    def get_ai_config(self) -> AIModelConfig:
        self._require_loaded()
        return self._config.ai.model_copy()

    def get_template_config(self) -> TemplateConfig:
        self._require_loaded()
        return self._config.templates.model_copy(deep=True)

    def get_context_config(self) -> ContextConfig:
        self._require_loaded()
        return self._config.context.model_copy()

    def get_plugin_config(self) -> PluginConfig:
        self._require_loaded()
        return self._config.plugins.model_copy(deep=True)

    def get_ui_config(self) -> UIConfig:
        self._require_loaded()
        return self._config.ui.model_copy()

    def get_copilot_config(self) -> CopilotConfig:
        ai = self.get_ai_config()
        return CopilotConfig(
            ai_provider=ai.provider,
            model=ai.model,
            max_tokens=ai.max_tokens,
            temperature=ai.temperature,
            context_window=ai.max_tokens,
        )

    # --- updates (validated only by validate_config) ------------------------

    def update_config(self, **sections: Any) -> None:
        """Replace whole sections, given as models or dicts."""
        updates = {}
        for name, value in sections.items():
            if name not in SystemConfig.model_fields:
                raise ConfigError(f"Unknown configuration section: {name}")
            if isinstance(value, dict):
                value = getattr(self._config, name).model_copy(update=value)
            updates[name] = value
        self._config = self._config.model_copy(update=updates)

    def update_ai_config(self, **changes: Any) -> None:
        self._update_section("ai", changes)

    def update_template_config(self, **changes: Any) -> None:
        self._update_section("templates", changes)

    def update_context_config(self, **changes: Any) -> None:
        self._update_section("context", changes)

    def update_plugin_config(self, **changes: Any) -> None:
        self._update_section("plugins", changes)

    def update_ui_config(self, **changes: Any) -> None:
        self._update_section("ui", changes)

    def _update_section(self, name: str, changes: Dict[str, Any]) -> None:
        section = getattr(self._config, name)
        unknown = set(changes) - set(type(section).model_fields)
        if unknown:
            raise ConfigError(f"Unknown {name} configuration keys: {', '.join(sorted(unknown))}")
        self._config = self._config.model_copy(
            update={name: section.model_copy(update=changes)}
        )

    # --- validation ---------------------------------------------------------

    def validate_config(self) -> bool:
        """Check value ranges. Logs and returns False instead of raising."""
        try:
            problem = self._find_problem()
        except (TypeError, ValueError) as e:
            problem = f"Malformed configuration value: {e}"
        if problem:
            logger.warning("Configuration validation failed: %s", problem)
            return False
        return True

    def _find_problem(self) -> Optional[str]:
        ai = self._config.ai
        if not ai.provider or not ai.model:
            return "AI provider and model are required"
        if ai.max_tokens <= 0:
            return "Max tokens must be positive"
        if not 0 <= ai.temperature <= 2:
            return "Temperature must be between 0 and 2"
        if not self._config.templates.templates_path:
            return "Templates path is required"
        if self._config.context.max_files <= 0:
            return "Max files must be positive"
        if self._config.context.max_file_size <= 0:
            return "Max file size must be positive"
        if self._config.context.cache_size <= 0:
            return "Cache size must be positive"
        return None

    # --- import / export ----------------------------------------------------

    def reset_to_defaults(self) -> None:
        self._config = _default_config()

    def export_config(self) -> str:
        return self._config.model_dump_json(indent=2)

    def import_config(self, config_json: str) -> None:
        """Replace the configuration with ``config_json`` merged over defaults.

        Raises:
            ConfigImportError: If the JSON is malformed or has wrong types
        """
        try:
            self._config = _merge_over_defaults(json.loads(config_json))
        except (json.JSONDecodeError, PydanticValidationError, TypeError) as e:
            logger.error("Failed to import configuration: %s", e)
            raise ConfigImportError("Invalid configuration format") from e
        self._loaded = True

    @staticmethod
    def get_supported_ai_providers() -> List[str]:
        return list(SUPPORTED_AI_PROVIDERS)

    @staticmethod
    def get_supported_models(provider: str) -> List[str]:
        return list(SUPPORTED_MODELS.get(provider, []))

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise ConfigNotLoadedError("Configuration not loaded. Call load_config() first.")
