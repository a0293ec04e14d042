"""Prompt-to-template scoring and variable extraction."""

import re
from typing import Any, Dict, List, Optional, Tuple

from ..models import CodeTemplate, TemplateMatch, TemplateVariable, VariableSource

PATTERN_WEIGHT = 0.6
KEYWORD_WEIGHT = 0.4

_SCALAR_SHAPES = (
    r"{name}:\s*([^\s,]+)",
    r"{name}\s*=\s*([^\s,]+)",
    r"{name}\s+([^\s,]+)",
)
_ARRAY_SHAPE = r"{name}\s*[:=]\s*\[([^\]]*)\]"


class TemplateMatcher:
    """Scores one prompt against one template. Stateless and deterministic."""

    def match(self, prompt: str, template: CodeTemplate) -> TemplateMatch:
        variables, sources = self.extract_variables(prompt, template)
        return TemplateMatch(
            template=template,
            confidence=self.calculate_confidence(prompt, template),
            variables=variables,
            sources=sources,
        )

    def calculate_confidence(self, prompt: str, template: CodeTemplate) -> float:
        """0.6 for a pattern hit plus 0.4 times the keyword hit ratio, clamped to 1."""
        confidence = 0.0

        if template.pattern and re.search(template.pattern, prompt, re.IGNORECASE):
            confidence += PATTERN_WEIGHT

        keywords = self.extract_keywords(template.name, template.description)
        if keywords:
            lowered = prompt.lower()
            hits = sum(1 for keyword in keywords if keyword in lowered)
            confidence += hits / len(keywords) * KEYWORD_WEIGHT

        return min(max(confidence, 0.0), 1.0)

    def extract_keywords(self, name: str, description: str) -> List[str]:
        words = f"{name} {description}".lower().split()
        return list(dict.fromkeys(word for word in words if len(word) > 2))

    def extract_variables(
        self, prompt: str, template: CodeTemplate
    ) -> Tuple[Dict[str, Any], Dict[str, VariableSource]]:
        """Resolve each declared variable from the prompt, else its default.

        Variables with neither are left out of both maps.
        """
        variables: Dict[str, Any] = {}
        sources: Dict[str, VariableSource] = {}

        for variable in template.variables:
            value = self.extract_variable_value(prompt, variable)
            if value is not None:
                variables[variable.name] = value
                sources[variable.name] = "extracted"
            elif variable.default_value is not None:
                variables[variable.name] = variable.default_value
                sources[variable.name] = "default"

        return variables, sources

    def extract_variable_value(self, prompt: str, variable: TemplateVariable) -> Optional[Any]:
        name = re.escape(variable.name)

        if variable.type == "array":
            match = re.search(_ARRAY_SHAPE.format(name=name), prompt, re.IGNORECASE)
            if match:
                return [item.strip() for item in match.group(1).split(",") if item.strip()]

        for shape in _SCALAR_SHAPES:
            match = re.search(shape.format(name=name), prompt, re.IGNORECASE)
            if match:
                value = match.group(1)
                return [value] if variable.type == "array" else value

        return None
