"""Template-based code generation."""

from .catalog import BUILTIN_TEMPLATES, builtin_templates
from .engine import MATCH_THRESHOLD, TemplateEngine
from .matcher import TemplateMatcher
from .renderer import TemplateRenderer

__all__ = [
    "BUILTIN_TEMPLATES",
    "builtin_templates",
    "MATCH_THRESHOLD",
    "TemplateEngine",
    "TemplateMatcher",
    "TemplateRenderer",
]
