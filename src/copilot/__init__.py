"""AI Copilot core: template and LLM backed code generation and analysis."""

from .analyzer import CodeAnalyzer
from .config import ConfigManager
from .context import ContextCache, ContextManager, CodeIndexer
from .engine import CopilotEngine
from .generator import CodeGenerator
from .plugins import PluginManager
from .templates import TemplateEngine

__version__ = "0.1.0"

__all__ = [
    "CodeAnalyzer",
    "CodeGenerator",
    "CodeIndexer",
    "ConfigManager",
    "ContextCache",
    "ContextManager",
    "CopilotEngine",
    "PluginManager",
    "TemplateEngine",
]
