"""Placeholder substitution with ``{{#if}}`` and ``{{#each}}`` blocks."""

import re
from typing import Any, Dict, List

from ..models import CodeTemplate

_IF_BLOCK = re.compile(r"{{#if\s+(\w+)}}([\s\S]*?){{/if}}")
_EACH_BLOCK = re.compile(r"{{#each\s+(\w+)}}([\s\S]*?){{/each}}")
_PLACEHOLDER = re.compile(r"{{(\w+)}}")

_FALSY = ("false", "0", "")


def _to_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return _to_text(value) not in _FALSY


class TemplateRenderer:
    """Renders a template in three passes: placeholders, conditionals, loops."""

    def render(self, template: CodeTemplate, variables: Dict[str, Any]) -> str:
        rendered = template.template

        for key, value in variables.items():
            rendered = rendered.replace(f"{{{{{key}}}}}", _to_text(value))

        rendered = self._handle_conditionals(rendered, variables)
        rendered = self._handle_loops(rendered, variables)
        return rendered.strip()

    def unresolved_placeholders(self, text: str) -> List[str]:
        """Names of ``{{name}}`` tokens still present in rendered text."""
        names = (name for name in _PLACEHOLDER.findall(text) if name != "this")
        return list(dict.fromkeys(names))

    def _handle_conditionals(self, text: str, variables: Dict[str, Any]) -> str:
        def replace(match: re.Match) -> str:
            return match.group(2) if _is_truthy(variables.get(match.group(1))) else ""

        return _IF_BLOCK.sub(replace, text)

    def _handle_loops(self, text: str, variables: Dict[str, Any]) -> str:
        def replace(match: re.Match) -> str:
            items = variables.get(match.group(1))
            if not isinstance(items, (list, tuple)) or not items:
                return ""
            body = match.group(2)
            return "\n".join(body.replace("{{this}}", str(item)) for item in items)

        return _EACH_BLOCK.sub(replace, text)
