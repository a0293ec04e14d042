"""Exception hierarchy for the copilot core.

    CopilotError
    ├── ValidationError          malformed or missing input, raised immediately
    │   ├── CodeParseError       a grammar-backed parser rejected the source
    │   └── ParserNotFoundError  no parser registered for a language
    ├── PluginNotFoundError      parse/generate requested for an unknown plugin
    ├── TemplateError            malformed template or duplicate registration
    ├── ProviderError            the AI provider failed or answered garbage
    │   └── ProviderTimeoutError the provider call ran past its deadline
    ├── ConfigError
    │   ├── ConfigNotLoadedError
    │   └── ConfigImportError
    ├── GenerationError          CopilotEngine.generate_code wrapper
    ├── AnalysisError            CopilotEngine.analyze_code wrapper
    └── ContextError             CopilotEngine.get_project_context wrapper
"""

from typing import Optional


class CopilotError(Exception):
    """Base class for every error raised by the copilot core."""


class ValidationError(CopilotError):
    """Raised when a request is malformed or references unknown input."""


class CodeParseError(ValidationError):
    """Raised when source code cannot be parsed."""

    def __init__(self, language: str, message: str, line: Optional[int] = None):
        location = f" (line {line})" if line is not None else ""
        super().__init__(f"Failed to parse {language} source{location}: {message}")
        self.language = language
        self.line = line


class ParserNotFoundError(ValidationError):
    """Raised when no parser is registered for a language."""

    def __init__(self, language: str):
        super().__init__(f"No parser found for language: {language}")
        self.language = language


class PluginNotFoundError(CopilotError):
    """Raised when a required plugin capability is missing."""

    def __init__(self, language: str, capability: str):
        super().__init__(f"No {capability} available for language: {language}")
        self.language = language
        self.capability = capability


class TemplateError(CopilotError):
    """Raised for structurally invalid templates."""


class ProviderError(CopilotError):
    """Raised when the AI provider call fails or returns an unusable shape."""


class ProviderTimeoutError(ProviderError):
    """Raised when the AI provider does not answer before the deadline."""

    def __init__(self, message: str, timeout: Optional[float] = None):
        super().__init__(message)
        self.timeout = timeout


class ConfigError(CopilotError):
    """Raised for invalid configuration operations."""


class ConfigNotLoadedError(ConfigError):
    """Raised when configuration is read before load_config()."""


class ConfigImportError(ConfigError):
    """Raised when imported configuration JSON cannot be used."""


class GenerationError(CopilotError):
    """Raised when code generation fails."""


class AnalysisError(CopilotError):
    """Raised when code analysis fails."""


class ContextError(CopilotError):
    """Raised when project context cannot be built."""
