"""Language plugins and their registry."""

from .base import (
    FEATURES,
    CodeFormatter,
    CodeLinter,
    LanguageGenerator,
    LanguageInfo,
    LanguagePlugin,
    LineFormatter,
    LineLinter,
    PluginCapabilities,
)
from .languages import (
    BUILTIN_PLUGINS,
    GoPlugin,
    JavaPlugin,
    JavaScriptPlugin,
    LanguageCodeGenerator,
    PythonPlugin,
    TypeScriptPlugin,
)
from .manager import PluginManager

__all__ = [
    "FEATURES",
    "CodeFormatter",
    "CodeLinter",
    "LanguageGenerator",
    "LanguageInfo",
    "LanguagePlugin",
    "LineFormatter",
    "LineLinter",
    "PluginCapabilities",
    "BUILTIN_PLUGINS",
    "GoPlugin",
    "JavaPlugin",
    "JavaScriptPlugin",
    "LanguageCodeGenerator",
    "PythonPlugin",
    "TypeScriptPlugin",
    "PluginManager",
]
