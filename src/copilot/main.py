"""Main CLI entry point for the copilot core."""

import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .analyzer import CodeAnalyzer
from .config import DEFAULT_CONFIG_PATH, ConfigManager, JsonFileConfigStore
from .context import ContextManager
from .engine import CopilotEngine
from .exceptions import CopilotError
from .models import CodeContext, CodeFile, CodeGenerationRequest, GenerationOptions
from .plugins import PluginManager
from .scanner import LocalProjectSource
from .templates import TemplateEngine

console = Console()
err_console = Console(stderr=True)


def _fail(message: str) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {message}")
    sys.exit(1)


def _load_config(ctx: click.Context) -> ConfigManager:
    manager = ConfigManager(JsonFileConfigStore(ctx.obj["config_path"]))
    manager.load_config()
    return manager


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=lambda: os.getenv("COPILOT_CONFIG_PATH", DEFAULT_CONFIG_PATH),
    help="Configuration file path",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: str):
    """AI Copilot - template and LLM backed code generation and analysis."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("prompt")
@click.option("--language", "-l", required=True, help="Target language")
@click.option("--framework", "-f", help="Target framework")
@click.option("--file", "current_file", type=click.Path(), help="File being edited")
@click.option("--tests", is_flag=True, help="Ask for tests alongside the code")
@click.option("--user", "user_id", help="User id for history and preferences")
@click.pass_context
def generate(
    ctx: click.Context,
    prompt: str,
    language: str,
    framework: str | None,
    current_file: str | None,
    tests: bool,
    user_id: str | None,
):
    """Generate code from a prompt.

    Examples:
        copilot generate "create a function called add" -l javascript

        copilot generate "create a component" -l typescript -f react --file src/App.tsx
    """
    try:
        config = _load_config(ctx)
        engine = CopilotEngine.from_config(config, LocalProjectSource(config.get_context_config()))
        result = engine.generate_code(
            CodeGenerationRequest(
                prompt=prompt,
                language=language,
                framework=framework,
                context=CodeContext(current_file=current_file, user_id=user_id),
                options=GenerationOptions(include_tests=tests),
            )
        )
    except CopilotError as e:
        _fail(str(e))
        return

    if result.failure_reason:
        _fail(result.explanation or "Generation failed")

    console.print(Syntax(result.code, language, line_numbers=False))
    if result.explanation:
        console.print(Panel(result.explanation, title="Explanation"))
    if result.tests:
        console.print(Panel(Syntax(result.tests, language), title="Tests"))
    for suggestion in result.suggestions:
        console.print(f"  • {suggestion}")
    model = result.metadata.model if result.metadata else "unknown"
    console.print(f"[dim]confidence {result.confidence:.2f} · {model}[/dim]")


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--language", "-l", help="Language; detected from the file when omitted")
def analyze(file_path: str, language: str | None):
    """Analyze a source file."""
    try:
        content = Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Could not read {file_path}: {e}")

    if language is None:
        plugins = PluginManager()
        plugins.initialize()
        language = plugins.detect_language(file_path, content)
        if language is None:
            _fail(f"Could not detect language of {file_path}")

    try:
        result = CodeAnalyzer().analyze_file(
            CodeFile(path=file_path, content=content, language=language, size=len(content))
        )
    except CopilotError as e:
        _fail(str(e))
        return

    table = Table(title=f"{file_path} ({language})")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Lines", str(result.line_count))
    table.add_row("Complexity", str(result.complexity))
    table.add_row("Dependencies", ", ".join(result.dependencies) or "-")
    table.add_row("Exports", ", ".join(result.exports) or "-")
    table.add_row("Patterns", ", ".join(f"{p.type}:{p.name}" for p in result.patterns) or "-")
    console.print(table)

    for issue in result.issues:
        console.print(
            f"[yellow]{issue.type}[/yellow] line {issue.location.line}: {issue.message}"
        )


@cli.command()
@click.option("--language", "-l", help="Only list templates for this language")
def templates(language: str | None):
    """List built-in templates."""
    table = Table(title="Templates")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Language")
    table.add_column("Framework")
    for template in TemplateEngine().get_templates(language):
        table.add_row(template.id, template.name, template.language, template.framework or "-")
    console.print(table)


@cli.command()
@click.argument("file_path", type=click.Path())
def detect(file_path: str):
    """Detect the language of a file."""
    path = Path(file_path)
    content = None
    if path.is_file():
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            content = None

    plugins = PluginManager()
    plugins.initialize()
    language = plugins.detect_language(file_path, content)
    if language is None:
        _fail(f"Could not detect language of {file_path}")
    console.print(language)


@cli.command()
@click.argument("project_path", type=click.Path(exists=True, file_okay=False))
@click.pass_context
def context(ctx: click.Context, project_path: str):
    """Summarise a project's language, framework and dependencies."""
    try:
        config = _load_config(ctx)
        manager = ContextManager(source=LocalProjectSource(config.get_context_config()))
        project = manager.get_project_context(project_path)
    except CopilotError as e:
        _fail(str(e))
        return

    table = Table(title=project_path)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Language", project.language)
    table.add_row("Framework", project.framework or "-")
    table.add_row("Files", str(len(project.structure.files)))
    table.add_row("Dependencies", ", ".join(project.dependencies) or "-")
    console.print(table)


@cli.command("config")
@click.option("--validate", "validate_only", is_flag=True, help="Validate and exit")
@click.option("--reset", is_flag=True, help="Reset to defaults and save")
@click.pass_context
def config_command(ctx: click.Context, validate_only: bool, reset: bool):
    """Show, validate or reset the configuration."""
    try:
        manager = _load_config(ctx)
        if reset:
            manager.reset_to_defaults()
            manager.save_config()
            console.print("Configuration reset to defaults")
    except CopilotError as e:
        _fail(str(e))
        return

    if validate_only:
        if not manager.validate_config():
            _fail("Configuration is invalid")
        console.print("Configuration is valid")
        return

    console.print(Syntax(manager.export_config(), "json"))


if __name__ == "__main__":
    cli()
