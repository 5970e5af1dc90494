"""docbind validate: run registration-time gates over declared bindings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from rich.console import Console
from rich.table import Table

from docbind.bindings.attribute import parse_binding_attribute
from docbind.bindings.shapes import ParameterShape
from docbind.config.loader import ConfigLoadError
from docbind.exceptions import DocBindError, ShapeValidationError
from docbind.extension import DocumentBindingExtension


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    name: str
    shape: str
    ok: bool
    rule: str = ""
    message: str = ""


def load_binding_declarations(path: Path) -> list[dict[str, Any]]:
    """Load a YAML list of declarations, either top-level or under ``bindings:``."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"Invalid YAML at {path}") from exc
    if isinstance(data, dict):
        data = data.get("bindings", [])
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ConfigLoadError(f"Bindings file must contain a list of mappings: {path}")
    return data


def validate_declarations(
    declarations: list[dict[str, Any]],
    extension: DocumentBindingExtension,
) -> list[ValidationOutcome]:
    outcomes: list[ValidationOutcome] = []
    for index, declaration in enumerate(declarations):
        raw = dict(declaration)
        name = str(raw.pop("name", f"binding[{index}]"))
        shape_value = str(raw.pop("shape", ParameterShape.SINGULAR.value))
        try:
            shape = ParameterShape(shape_value)
            attribute = parse_binding_attribute(raw)
            extension.validate_binding(attribute, shape)
        except ShapeValidationError as exc:
            outcomes.append(ValidationOutcome(name, shape_value, False, exc.rule, str(exc)))
        except (DocBindError, ValueError) as exc:
            outcomes.append(ValidationOutcome(name, shape_value, False, type(exc).__name__, str(exc)))
        else:
            outcomes.append(ValidationOutcome(name, shape_value, True))
    return outcomes


def print_outcomes(outcomes: list[ValidationOutcome], console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title="docbind binding validation", show_header=True, header_style="bold")
    table.add_column("Binding", style="dim")
    table.add_column("Shape")
    table.add_column("Result")
    table.add_column("Detail")
    for outcome in outcomes:
        result = "[green]ok[/green]" if outcome.ok else f"[red]{outcome.rule}[/red]"
        table.add_row(outcome.name, outcome.shape, result, outcome.message)
    console.print(table)
