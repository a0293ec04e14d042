"""Plugin registry with extension and content based language detection."""

import logging
import re
import threading
from typing import Any, Dict, List, Optional

from ..exceptions import PluginNotFoundError
from ..generator import CodeGenerator
from ..models import CodeGenerationRequest, CodeIssue, GeneratedCode
from .base import LanguageInfo, LanguagePlugin, PluginCapabilities
from .languages import BUILTIN_PLUGINS

logger = logging.getLogger(__name__)

# Ordered: on equal scores the language listed first wins.
CONTENT_SIGNATURES: Dict[str, List[re.Pattern]] = {
    "typescript": [
        re.compile(r"interface\s+\w+"),
        re.compile(r"type\s+\w+\s*="),
        re.compile(r":[ \t]*\w+"),
    ],
    "javascript": [
        re.compile(r"function\s+\w+"),
        re.compile(r"const\s+\w+\s*="),
        re.compile(r"let\s+\w+\s*="),
    ],
    "python": [
        re.compile(r"def\s+\w+"),
        re.compile(r"class\s+\w+"),
        re.compile(r"import\s+\w+"),
    ],
    "java": [
        re.compile(r"public class"),
        re.compile(r"private\s+\w+"),
        re.compile(r"public\s+\w+"),
    ],
    "go": [
        re.compile(r"func\s+\w+"),
        re.compile(r"package\s+\w+"),
        re.compile(r"import\s*\("),
    ],
}


def _normalize_extension(extension: str) -> str:
    extension = extension.lower()
    return extension if extension.startswith(".") else f".{extension}"


class PluginManager:
    """Registry of language plugins keyed by language and by file extension.

    Construct one per application and pass it to consumers. ``initialize``
    registers the built-in plugins once; ``shutdown`` empties the registry.
    """

    def __init__(self, code_generator: Optional[CodeGenerator] = None):
        """Initialize an empty registry.

        Args:
            code_generator: When given, built-in plugins gain the generation
                capability and delegate to it.
        """
        self.code_generator = code_generator
        self._plugins: Dict[str, LanguagePlugin] = {}
        self._extensions: Dict[str, LanguagePlugin] = {}
        self._capabilities: Dict[str, PluginCapabilities] = {}
        self._initialized = False
        self._lock = threading.RLock()

    def initialize(self) -> None:
        with self._lock:
            if self._initialized:
                return
            for plugin_cls in BUILTIN_PLUGINS:
                self.register_plugin(plugin_cls(self.code_generator))
            self._initialized = True
        logger.info("Plugin manager initialized with %d plugins", len(self._plugins))

    def register_plugin(self, plugin: LanguagePlugin) -> None:
        """Initialize and index a plugin.

        Raises:
            Exception: Whatever the plugin's own ``initialize`` raises
        """
        try:
            plugin.initialize()
        except Exception as e:
            logger.error("Failed to register plugin %s: %s", plugin.name, e)
            raise

        with self._lock:
            self._plugins[plugin.language] = plugin
            self._capabilities[plugin.language] = plugin.capabilities
            for extension in plugin.extensions:
                self._extensions[_normalize_extension(extension)] = plugin
        logger.info("Registered plugin: %s (%s)", plugin.name, plugin.language)

    def unregister_plugin(self, language: str) -> bool:
        with self._lock:
            plugin = self._plugins.pop(language, None)
            if plugin is None:
                return False
            self._capabilities.pop(language, None)
            for extension in plugin.extensions:
                key = _normalize_extension(extension)
                if self._extensions.get(key) is plugin:
                    del self._extensions[key]
        logger.info("Unregistered plugin: %s (%s)", plugin.name, plugin.language)
        return True

    # --- lookups ----------------------------------------------------------

    def get_plugin(self, language: str) -> Optional[LanguagePlugin]:
        return self._plugins.get(language)

    def get_plugin_by_extension(self, extension: str) -> Optional[LanguagePlugin]:
        return self._extensions.get(_normalize_extension(extension))

    def get_all_plugins(self) -> List[LanguagePlugin]:
        return list(self._plugins.values())

    def get_supported_languages(self) -> List[str]:
        return list(self._plugins)

    def get_supported_extensions(self) -> List[str]:
        return list(self._extensions)

    def get_plugin_capabilities(self, language: str) -> List[str]:
        capabilities = self._capabilities.get(language)
        return capabilities.features() if capabilities else []

    def supports_feature(self, language: str, feature: str) -> bool:
        capabilities = self._capabilities.get(language)
        return capabilities.supports(feature) if capabilities else False

    def validate_code(self, language: str, code: str) -> bool:
        plugin = self._plugins.get(language)
        return plugin.validate_code(code) if plugin else False

    def get_language_info(self, language: str) -> Optional[LanguageInfo]:
        plugin = self._plugins.get(language)
        return plugin.get_language_info() if plugin else None

    def get_plugin_info(self) -> List[Dict[str, Any]]:
        info = []
        for plugin in self._plugins.values():
            language_info = plugin.get_language_info()
            info.append(
                {
                    "name": plugin.name,
                    "language": language_info.name,
                    "extensions": language_info.extensions,
                    "capabilities": language_info.features,
                    "version": language_info.version,
                }
            )
        return info

    def is_initialized(self) -> bool:
        return self._initialized

    # --- detection --------------------------------------------------------

    def detect_language(self, file_path: str, content: Optional[str] = None) -> Optional[str]:
        """Guess the language of a file.

        Args:
            file_path: Path whose final dot-segment is tried as an extension
            content: Optional source used when the extension is unknown

        Returns:
            Language name, or None when nothing matches
        """
        basename = file_path.replace("\\", "/").rsplit("/", 1)[-1]
        if "." in basename:
            plugin = self.get_plugin_by_extension(basename.rsplit(".", 1)[-1])
            if plugin is not None:
                return plugin.language

        if content:
            return self._detect_language_by_content(content)
        return None

    def _detect_language_by_content(self, content: str) -> Optional[str]:
        first_line = content.split("\n", 1)[0].strip().lower()
        if first_line.startswith("#!"):
            if "python" in first_line:
                return "python"
            if "node" in first_line:
                return "javascript"

        best_language = None
        best_score = 0
        for language, signatures in CONTENT_SIGNATURES.items():
            score = sum(1 for signature in signatures if signature.search(content))
            if score > best_score:
                best_language, best_score = language, score
        return best_language

    # --- delegation -------------------------------------------------------

    def parse_code(self, language: str, code: str):
        plugin = self._plugins.get(language)
        if plugin is None or plugin.parser is None:
            raise PluginNotFoundError(language, "parser")
        return plugin.parser.parse(code)

    def generate_code(self, language: str, request: CodeGenerationRequest) -> GeneratedCode:
        plugin = self._plugins.get(language)
        if plugin is None or plugin.generator is None:
            raise PluginNotFoundError(language, "generator")
        return plugin.generator.generate(request)

    def lint_code(self, language: str, code: str) -> List[CodeIssue]:
        plugin = self._plugins.get(language)
        if plugin is None or plugin.linter is None:
            return []
        return plugin.linter.lint(code)

    def format_code(self, language: str, code: str) -> str:
        plugin = self._plugins.get(language)
        if plugin is None or plugin.formatter is None:
            return code
        return plugin.formatter.format(code)

    def shutdown(self) -> None:
        with self._lock:
            self._plugins.clear()
            self._extensions.clear()
            self._capabilities.clear()
            self._initialized = False
        logger.info("Plugin manager shutdown complete")
