"""Template registry, matching and rendering."""

import logging
import re
import threading
from typing import Dict, Iterable, List, Optional

from ..exceptions import TemplateError
from ..models import CodeGenerationRequest, CodeTemplate, TemplateMatch
from .catalog import builtin_templates
from .matcher import TemplateMatcher
from .renderer import TemplateRenderer

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 0.8


class TemplateEngine:
    """Per-language template catalog.

    ``match`` walks a language's templates in registration order and returns
    the first one scoring above :data:`MATCH_THRESHOLD`, not the best one.
    """

    def __init__(self, templates: Optional[Iterable[CodeTemplate]] = None):
        """Initialize engine.

        Args:
            templates: Initial catalog. Defaults to the built-in templates.
        """
        self._templates: Dict[str, List[CodeTemplate]] = {}
        self._lock = threading.Lock()
        self.matcher = TemplateMatcher()
        self.renderer = TemplateRenderer()

        for template in builtin_templates() if templates is None else templates:
            self.add_template(template)

    def add_template(self, template: CodeTemplate) -> None:
        """Register a template at the end of its language's list.

        Raises:
            TemplateError: If a required field is empty, the pattern does not
                compile, or the (id, language) pair is already registered
        """
        for field in ("id", "name", "language", "template"):
            if not getattr(template, field).strip():
                raise TemplateError(f"Template field '{field}' must not be empty")

        if template.pattern:
            try:
                re.compile(template.pattern)
            except re.error as e:
                raise TemplateError(f"Invalid pattern for template {template.id}: {e}") from e

        with self._lock:
            bucket = self._templates.setdefault(template.language, [])
            if any(existing.id == template.id for existing in bucket):
                raise TemplateError(
                    f"Template {template.id} already registered for {template.language}"
                )
            bucket.append(template)
        logger.debug("Registered template %s (%s)", template.id, template.language)

    def remove_template(self, template_id: str, language: str) -> bool:
        with self._lock:
            bucket = self._templates.get(language, [])
            for index, template in enumerate(bucket):
                if template.id == template_id:
                    del bucket[index]
                    return True
        return False

    def get_templates(self, language: Optional[str] = None) -> List[CodeTemplate]:
        if language is not None:
            return list(self._templates.get(language, []))
        return [template for bucket in self._templates.values() for template in bucket]

    def match(self, request: CodeGenerationRequest) -> Optional[TemplateMatch]:
        for template in self.get_templates(request.language):
            match = self.matcher.match(request.prompt, template)
            if match.confidence > MATCH_THRESHOLD:
                logger.debug(
                    "Prompt matched template %s (confidence %.2f)", template.id, match.confidence
                )
                return match
        return None

    def render(self, match: TemplateMatch) -> str:
        rendered = self.renderer.render(match.template, match.variables)
        unresolved = self.renderer.unresolved_placeholders(rendered)
        if unresolved:
            logger.debug(
                "Template %s rendered with unresolved placeholders: %s",
                match.template.id,
                ", ".join(unresolved),
            )
        return rendered
