"""
Click command group for codeintel.

Every command resolves its engine through one UnifiedDispatcher built from
[tool.codeintel] in the nearest pyproject.toml.

codeintel/src/codeintel/cli/cli_group.py
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Optional, TypeVar

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import Config, load_config
from ..dispatcher import UnifiedDispatcher
from ..exceptions import CodeIntelError
from ..models import QualityTier
from ..reporting import DEFAULT_FORMAT, FORMAT_CHOICES, get_formatter

console = Console()
error_console = Console(stderr=True)
logger = logging.getLogger(__name__)

T = TypeVar("T")

QUALITY_CHOICES = [tier.value for tier in QualityTier]


@dataclass
class CodeIntelContext:
    """Shared context for CLI commands."""

    config: Optional[Config] = None
    dispatcher: Optional[UnifiedDispatcher] = None
    context_data: Optional[dict] = None
    verbose: bool = False


def _run(ctx: click.Context, awaitable: Awaitable[T]) -> T:
    """Run a dispatcher coroutine, turning codeintel errors into exit code 2."""
    try:
        return asyncio.run(awaitable)
    except CodeIntelError as e:
        error_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
        logger.debug("Command failed", exc_info=True)
        ctx.exit(2)


def _load_context_file(path: Optional[Path]) -> Optional[dict]:
    if path is None:
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path} is not valid JSON: {e}", param_hint="--context") from e
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a JSON object", param_hint="--context")
    return data


def _read_source(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _state(ctx: click.Context) -> CodeIntelContext:
    return ctx.obj


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option(
    "--context",
    "context_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with Context7 insight data",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, context_path: Optional[Path]) -> None:
    """codeintel: category-aware code analysis and generation."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    config = load_config(Path.cwd())
    state = ctx.ensure_object(CodeIntelContext)
    state.verbose = verbose
    state.config = config
    state.dispatcher = UnifiedDispatcher(config)
    state.context_data = _load_context_file(context_path)
    logger.debug(f"Loaded configuration: {config!r}")


@cli.command("analyze")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--technology", "-t", required=True, help="Technology of the code, e.g. PostgreSQL or React")
@click.option("--category", "-c", help="Engine category; inferred from the technology when omitted")
@click.option("--format", "-f", "output_format", type=click.Choice(FORMAT_CHOICES), default=DEFAULT_FORMAT)
@click.pass_context
def analyze(ctx: click.Context, file: Path, technology: str, category: Optional[str], output_format: str) -> None:
    """Score FILE on every dimension of its category."""
    state = _state(ctx)
    dispatcher = state.dispatcher
    resolved = dispatcher.resolve_category(category, technology)
    analysis = _run(ctx, dispatcher.analyze_code(_read_source(file), technology, resolved, state.context_data))
    click.echo(get_formatter(output_format).format_analysis(analysis, resolved, technology))


@cli.command("generate")
@click.argument("description")
@click.option("--tech", "tech_stack", multiple=True, help="Technology, repeatable; the first one drives generation")
@click.option("--role", help="Role the artifact is written for")
@click.option("--quality", "-q", type=click.Choice(QUALITY_CHOICES, case_sensitive=False), help="Quality tier")
@click.option("--category", "-c", help="Engine category; inferred when omitted")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the artifact to a file")
@click.pass_context
def generate(
    ctx: click.Context,
    description: str,
    tech_stack: tuple[str, ...],
    role: Optional[str],
    quality: Optional[str],
    category: Optional[str],
    output: Optional[Path],
) -> None:
    """Generate a code artifact for DESCRIPTION."""
    state = _state(ctx)
    request: dict[str, Any] = {
        "featureDescription": description,
        "techStack": list(tech_stack) or None,
        "role": role,
        "quality": quality or state.config.get("default_quality", QualityTier.STANDARD.value),
        "category": category,
    }
    code = _run(ctx, state.dispatcher.generate_code(request, state.context_data))
    if output is None:
        click.echo(code)
        return
    output.write_text(code, encoding="utf-8")
    console.print(f"[green]Wrote {len(code.splitlines())} lines to {output}[/green]", highlight=False)


@cli.command("validate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--technology", "-t", required=True, help="Technology of the code")
@click.option("--category", "-c", help="Engine category; inferred from the technology when omitted")
@click.option("--format", "-f", "output_format", type=click.Choice(FORMAT_CHOICES), default=DEFAULT_FORMAT)
@click.pass_context
def validate(ctx: click.Context, file: Path, technology: str, category: Optional[str], output_format: str) -> None:
    """Check FILE for blocking errors; exits 1 when any are found."""
    state = _state(ctx)
    dispatcher = state.dispatcher
    resolved = dispatcher.resolve_category(category, technology)
    result = _run(ctx, dispatcher.validate_code(_read_source(file), technology, resolved, state.context_data))
    click.echo(get_formatter(output_format).format_validation(result, resolved, technology))
    ctx.exit(0 if result.valid else 1)


@cli.command("optimize")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--technology", "-t", required=True, help="Technology of the code")
@click.option("--category", "-c", help="Engine category; inferred from the technology when omitted")
@click.option("--in-place", "-i", is_flag=True, help="Rewrite FILE instead of printing the result")
@click.pass_context
def optimize(ctx: click.Context, file: Path, technology: str, category: Optional[str], in_place: bool) -> None:
    """Apply the category's optimizations to FILE."""
    state = _state(ctx)
    source = _read_source(file)
    optimized = _run(ctx, state.dispatcher.optimize_code(source, technology, category, state.context_data))
    if not in_place:
        click.echo(optimized)
        return
    if optimized == source:
        console.print(f"[yellow]{file} is already optimized[/yellow]", highlight=False)
        return
    file.write_text(optimized, encoding="utf-8")
    console.print(f"[green]Optimized {file}[/green]", highlight=False)


@cli.command("practices")
@click.argument("technology")
@click.option("--category", "-c", help="Engine category; inferred from the technology when omitted")
@click.option("--anti-patterns", "anti_patterns", is_flag=True, help="List anti-patterns instead")
@click.pass_context
def practices(ctx: click.Context, technology: str, category: Optional[str], anti_patterns: bool) -> None:
    """List best practices (or anti-patterns) for TECHNOLOGY."""
    state = _state(ctx)
    dispatcher = state.dispatcher
    if anti_patterns:
        items = _run(ctx, dispatcher.get_anti_patterns(technology, category, state.context_data))
    else:
        items = _run(ctx, dispatcher.get_best_practices(technology, category, state.context_data))
    for item in items:
        click.echo(f"- {item}")


@cli.command("engines")
@click.pass_context
def engines(ctx: click.Context) -> None:
    """Show the available engines, their technologies and rule counts."""
    dispatcher = _state(ctx).dispatcher

    table = Table(title="Category Engines")
    table.add_column("Category", style="cyan")
    table.add_column("Engine", style="green")
    table.add_column("Technologies")
    table.add_column("Dimensions")
    table.add_column("Rules", justify="right")

    for engine in dispatcher.engines():
        table.add_row(
            engine.category,
            engine.engine_name,
            ", ".join(engine.technologies),
            ", ".join(engine.dimensions),
            str(engine.rule_count),
        )
    console.print(table)

    summary = dispatcher.rule_engine.get_rule_summary()
    console.print(
        f"{summary['enabled_rules']} of {summary['total_rules']} rules enabled",
        highlight=False,
    )
    if summary["unknown_overrides"]:
        console.print(
            f"[yellow]Unknown rule ids in configuration: {', '.join(summary['unknown_overrides'])}[/yellow]",
            highlight=False,
        )
