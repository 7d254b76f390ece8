"""CLI interface for component-validator using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from component_validator import __description__, __version__
from component_validator.config import LogLevel, OutputFormat, ValidatorConfig, load_config
from component_validator.decoder import ManifestDecodeError, load_documents
from component_validator.validation import ValidationFramework, ValidationResult

app = typer.Typer(
    name="component-validator",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

FATAL_EXIT_CODE = 2

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"component-validator version {__version__}")
        raise typer.Exit()


def _setup_logging(config: ValidatorConfig) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(config.logging.level, logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config_or_exit(config: Path | None) -> ValidatorConfig:
    try:
        return load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(FATAL_EXIT_CODE)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """component-validator - Validates Tekton tasks, pipelines and supply-chain components."""


def validate(
    path: Annotated[
        Optional[Path],
        typer.Option("--path", "-p", help="The path to the component config to validate (default: config/carvel.yaml)")
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json, markdown (default: table)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .component-validator.json)")
    ] = None,
) -> None:
    """Validates all components with the path supplied."""
    validator_config = _load_config_or_exit(config)
    _setup_logging(validator_config)

    output_format = format or validator_config.output.format
    valid_formats = [f.value for f in OutputFormat]
    if output_format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{escape(output_format)}'. Must be one of: {', '.join(valid_formats)}", soft_wrap=True)
        raise typer.Exit(FATAL_EXIT_CODE)

    manifest_path = path or Path(validator_config.input.path)

    try:
        documents = load_documents(manifest_path)
    except (FileNotFoundError, ManifestDecodeError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(FATAL_EXIT_CODE)

    framework = ValidationFramework(validator_config)
    result = framework.validate_batch(documents)

    if output_format == OutputFormat.JSON.value:
        console.print_json(jsonlib.dumps(result.to_dict()))
    elif output_format == OutputFormat.MARKDOWN.value:
        _output_markdown(manifest_path, result)
    else:
        _output_table(manifest_path, result)

    raise typer.Exit(result.exit_code)


app.command("validate")(validate)
app.command("v", hidden=True)(validate)


def _output_markdown(manifest_path: Path, result: ValidationResult) -> None:
    console.print("# Validation Report", markup=False)
    console.print(f"**File:** {manifest_path}", markup=False)
    console.print(f"**Status:** {result.status.value}", markup=False)
    console.print(f"**Exit Code:** {result.exit_code}", markup=False)
    console.print()

    if result.failures:
        console.print("## Structural Failures", markup=False)
        for failure in result.failures:
            console.print(f"- {failure}", markup=False, soft_wrap=True)
        console.print()

    if result.messages:
        console.print("## Violations", markup=False)
        for message in result.messages:
            console.print(f"- {message}", markup=False, soft_wrap=True)


def _output_table(manifest_path: Path, result: ValidationResult) -> None:
    status_color = {"pass": "green", "fail": "red", "error": "red"}[result.status.value]
    console.print(f"[green]Validated:[/green] {escape(str(manifest_path))}")
    console.print(f"[{status_color}]Validation Status: {result.status.value.upper()}[/{status_color}]")

    for failure in result.failures:
        console.print(f"[red]FATAL[/red] {escape(str(failure))}", soft_wrap=True)

    for message in result.messages:
        console.print(f"[red]ERROR[/red] {escape(message)}", soft_wrap=True)

    if result.passed:
        console.print("\n[green]No violations found![/green]")

    if result.counters:
        counter_table = Table()
        counter_table.add_column("Metric", style="cyan")
        counter_table.add_column("Count", style="white", justify="right")

        for key, value in sorted(result.counters.items()):
            counter_table.add_row(key.replace("_", " ").title(), str(value))

        console.print(counter_table)


@app.command()
def kinds(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .component-validator.json)")
    ] = None,
) -> None:
    """List the manifest kinds that have a validation schema."""
    validator_config = _load_config_or_exit(config)
    framework = ValidationFramework(validator_config)

    table = Table(title="Registered kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("API Version", style="white")
    table.add_column("Rules", style="white", justify="right")

    for kind in framework.registry.kinds():
        schema = framework.registry.lookup(kind)
        table.add_row(kind, schema.api_version, str(len(schema.rules)))

    console.print(table)


if __name__ == "__main__":
    app()
