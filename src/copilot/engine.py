"""Copilot orchestrator: context enrichment, template matching, AI fallback."""

import json
import logging
import time
from typing import Optional

from .analyzer import CodeAnalyzer
from .config import ConfigManager
from .context import DEFAULT_USER_ID, ContextCache, ContextManager, ProjectSource
from .exceptions import AnalysisError, ContextError, GenerationError, ValidationError
from .generator import CodeGenerator
from .llm import create_ai_provider
from .llm.prompts import (
    CURRENT_FILE_SECTION,
    PROJECT_STRUCTURE_SECTION,
    SPECIALTY,
    SURROUNDING_CODE_SECTION,
    SYSTEM_PROMPT,
)
from .models import (
    AIRequest,
    AnalysisResult,
    CodeContext,
    CodeFile,
    CodeGenerationRequest,
    GeneratedCode,
    GenerationMetadata,
    ProjectContext,
    TemplateMatch,
)
from .plugins import PluginManager
from .templates import TemplateEngine

logger = logging.getLogger(__name__)


class CopilotEngine:
    """Entry point for generation, analysis and project context.

    ``generate_code`` runs enrich, then template matching, then the AI
    fallback, in that order. Nothing is retried here.
    """

    def __init__(
        self,
        generator: CodeGenerator,
        analyzer: Optional[CodeAnalyzer] = None,
        context_manager: Optional[ContextManager] = None,
        template_engine: Optional[TemplateEngine] = None,
        plugin_manager: Optional[PluginManager] = None,
    ):
        """Initialize engine with its collaborators.

        Args:
            generator: AI-backed generator used when no template matches
            analyzer: Code analyzer. Defaults to built-in parsers.
            context_manager: Context manager. Defaults to an in-memory one.
            template_engine: Template engine. Defaults to the built-in catalog.
            plugin_manager: When given, templates are only tried for
                languages it has a plugin for
        """
        self.generator = generator
        self.analyzer = analyzer if analyzer is not None else CodeAnalyzer()
        self.context_manager = context_manager if context_manager is not None else ContextManager()
        self.template_engine = template_engine if template_engine is not None else TemplateEngine()
        self.plugin_manager = plugin_manager

    @classmethod
    def from_config(
        cls, config_manager: ConfigManager, source: Optional[ProjectSource] = None
    ) -> "CopilotEngine":
        """Wire a full engine from loaded configuration.

        Raises:
            ConfigNotLoadedError: If ``config_manager`` was never loaded
            ConfigError: If the AI provider is not supported
        """
        generator = CodeGenerator(
            create_ai_provider(config_manager.get_ai_config()),
            config_manager.get_copilot_config(),
        )
        context_config = config_manager.get_context_config()
        context_manager = ContextManager(
            source=source, cache=ContextCache(max_size=context_config.cache_size)
        )

        plugin_manager = PluginManager(generator)
        plugin_manager.initialize()
        enabled = set(config_manager.get_plugin_config().enabled_plugins)
        for language in plugin_manager.get_supported_languages():
            if language not in enabled:
                plugin_manager.unregister_plugin(language)

        return cls(
            generator=generator,
            context_manager=context_manager,
            plugin_manager=plugin_manager,
        )

    def generate_code(self, request: CodeGenerationRequest) -> GeneratedCode:
        """Generate code for a request.

        Args:
            request: Prompt, language and optional context

        Returns:
            GeneratedCode from a template or the AI provider. A failed
            provider call comes back as a zero-confidence result.

        Raises:
            ValidationError: If the prompt or language is empty
            GenerationError: If enrichment or template handling fails
        """
        if not request.prompt or not request.prompt.strip():
            raise ValidationError("Prompt is required")
        if not request.language or not request.language.strip():
            raise ValidationError("Language is required")

        try:
            context = self.context_manager.enrich(request.context)
            user_id = (request.context.user_id if request.context else None) or DEFAULT_USER_ID
            self.context_manager.add_user_prompt(user_id, request.prompt)

            if self._templates_enabled(request.language):
                match = self.template_engine.match(request)
                if match is not None:
                    return self._from_template(match)

            return self.generator.generate(self.build_ai_request(request, context))
        except Exception as e:
            logger.error("Code generation failed: %s", e)
            raise GenerationError(f"Failed to generate code: {e}") from e

    def analyze_code(
        self, code: str, language: str, file_path: Optional[str] = None
    ) -> AnalysisResult:
        try:
            return self.analyzer.analyze_file(
                CodeFile.from_source(code, language, path=file_path or "temp")
            )
        except Exception as e:
            logger.error("Code analysis failed: %s", e)
            raise AnalysisError(f"Failed to analyze code: {e}") from e

    def get_project_context(self, project_path: str) -> ProjectContext:
        try:
            return self.context_manager.get_project_context(project_path)
        except Exception as e:
            logger.error("Failed to get project context: %s", e)
            raise ContextError(f"Failed to get project context: {e}") from e

    def build_ai_request(self, request: CodeGenerationRequest, context: CodeContext) -> AIRequest:
        return AIRequest(
            prompt=self.build_prompt(request, context),
            system=self.build_system_prompt(request.language, request.framework),
            options=request.options,
        )

    def build_prompt(self, request: CodeGenerationRequest, context: CodeContext) -> str:
        prompt = request.prompt
        if context.current_file:
            prompt += CURRENT_FILE_SECTION.format(current_file=context.current_file)
        if context.surrounding_code:
            prompt += SURROUNDING_CODE_SECTION.format(surrounding_code=context.surrounding_code)
        if context.project_structure:
            # Paths and metadata only, no file bodies.
            structure = context.project_structure.model_dump(
                mode="json", exclude={"files": {"__all__": {"content"}}}
            )
            prompt += PROJECT_STRUCTURE_SECTION.format(
                project_structure=json.dumps(structure, indent=2)
            )
        return prompt

    def build_system_prompt(self, language: str, framework: Optional[str] = None) -> str:
        specialty = SPECIALTY.format(framework=framework) if framework else ""
        return SYSTEM_PROMPT.format(language=language, specialty=specialty)

    def _templates_enabled(self, language: str) -> bool:
        if self.plugin_manager is None:
            return True
        return self.plugin_manager.get_plugin(language) is not None

    def _from_template(self, match: TemplateMatch) -> GeneratedCode:
        started = time.perf_counter()
        code = self.template_engine.render(match)
        return GeneratedCode(
            code=code,
            explanation=f"Generated using template: {match.template.name}",
            confidence=match.confidence,
            suggestions=[],
            metadata=GenerationMetadata(
                model="template",
                tokens_used=0,
                processing_time=(time.perf_counter() - started) * 1000,
            ),
        )
