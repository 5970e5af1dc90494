"""CLI tools: docbind validate, docbind version."""

from __future__ import annotations

import sys
from importlib import metadata
from pathlib import Path

import typer

from docbind.cli.validate import load_binding_declarations, print_outcomes, validate_declarations
from docbind.config.loader import load_config
from docbind.extension import DocumentBindingExtension
from docbind.logging_config import configure_logging

app = typer.Typer(
    name="docbind",
    help="docbind: declarative document-store bindings.",
)


def _installed_version() -> str:
    try:
        return metadata.version("docbind")
    except metadata.PackageNotFoundError:
        return "unknown"


@app.command("validate")
def validate_command(
    bindings_file: Path = typer.Argument(..., help="YAML file listing binding declarations"),
    config: str = typer.Option("", "--config", help="Optional docbind.yaml path"),
) -> None:
    """Run registration-time checks for every declared binding."""
    try:
        cfg = load_config(config or None)
        declarations = load_binding_declarations(bindings_file)
    except (ValueError, OSError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from exc
    configure_logging(cfg.logging)
    outcomes = validate_declarations(declarations, DocumentBindingExtension(cfg))
    print_outcomes(outcomes)
    if not all(outcome.ok for outcome in outcomes):
        raise typer.Exit(1)


@app.command("version")
def version_command() -> None:
    """Print installed package version."""
    typer.echo(f"docbind {_installed_version()}")


def main() -> None:
    """CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)
