"""Templates commands for listing furniture templates and starting configs.

This module provides the `templates` command group with subcommands for
listing registered unit templates and writing a starter configuration file
for one of them.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from woodquote.domain.templates import (
    TemplateNotFoundError,
    available_templates,
    get_template,
)

templates_app = typer.Typer(
    name="templates",
    help="List furniture templates and create starter configurations.",
)

# Starting dimensions for each template's starter configuration
STARTER_UNITS: dict[str, dict[str, Any]] = {
    "wardrobe": {
        "width": 1800,
        "height": 2100,
        "depth": 600,
        "variant": "openable",
        "shutters": 3,
        "shelves": 4,
        "drawers": 2,
        "partitions": 1,
    },
    "storage_unit": {
        "width": 900,
        "height": 1800,
        "depth": 400,
        "shutters": 2,
        "shelves": 4,
    },
    "kitchen_cabinet": {
        "width": 800,
        "height": 720,
        "depth": 560,
        "shutters": 2,
        "shelves": 1,
    },
}


def starter_config(unit_type: str) -> dict[str, Any]:
    """Build a starter configuration dictionary for a registered template.

    Raises:
        TemplateNotFoundError: If no template is registered for the type.
    """
    template = get_template(unit_type)
    unit = {"type": template.unit_type, "material": "18mm plywood"}
    unit.update(
        STARTER_UNITS.get(
            template.unit_type, {"width": 900, "height": 900, "depth": 450}
        )
    )
    return {
        "schema_version": "1.1",
        "sheet": {"length": 2440, "width": 1220, "kerf": 3, "margin": 10},
        "finish": {"finish": "laminate"},
        "unit": unit,
    }


@templates_app.command(name="list")
def list_templates() -> None:
    """List all registered furniture templates.

    Example:
        woodquote templates list
    """
    templates = available_templates()

    typer.echo("Available templates:")
    typer.echo()

    max_name_width = max(len(name) for name, _ in templates) if templates else 0
    for name, description in templates:
        typer.echo(f"  {name:<{max_name_width}}  - {description}")

    typer.echo()
    typer.echo(
        "Use 'woodquote templates init <name>' to create a configuration file "
        "from a template."
    )


@templates_app.command(name="init")
def init_template(
    name: Annotated[
        str,
        typer.Argument(help="Name of the template to initialize"),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (default: <name>.json)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing file"),
    ] = False,
) -> None:
    """Write a starter estimate configuration for a template.

    Examples:
        woodquote templates init wardrobe
        woodquote templates init kitchen_cabinet --output base.json
    """
    try:
        config = starter_config(name)
    except TemplateNotFoundError:
        available = ", ".join(n for n, _ in available_templates())
        typer.echo(f"Error: Template not found: {name}", err=True)
        typer.echo(f"Available templates: {available}", err=True)
        raise typer.Exit(code=1)

    if output is None:
        output = Path(f"{name}.json")

    if output.exists() and not force:
        typer.echo(f"Error: File already exists: {output}", err=True)
        typer.echo("Use --force to overwrite.", err=True)
        raise typer.Exit(code=1)

    try:
        output.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: Could not write file: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Created: {output}")
