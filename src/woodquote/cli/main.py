"""Typer CLI for build estimation."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from woodquote.application import EstimateCommand
from woodquote.application.config import (
    ConfigError,
    EstimateConfiguration,
    config_to_hardware,
    config_to_panels,
    config_to_price_lookup,
    config_to_sheet,
    config_to_template_output,
    config_to_topology,
    load_config,
)
from woodquote.cli.commands import templates_app
from woodquote.domain import EstimationError
from woodquote.domain.templates import TemplateNotFoundError
from woodquote.domain.value_objects import HardwareItem, Panel
from woodquote.infrastructure import (
    CutDiagramRenderer,
    CutListFormatter,
    EstimateJsonExporter,
    NestingResult,
    NestingService,
    PurchaseSummaryFormatter,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="woodquote",
    help="Nest furniture panels onto stock sheets and price the build.",
)

app.add_typer(templates_app, name="templates")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(config_file: Path) -> EstimateConfiguration:
    try:
        return load_config(config_file)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _build_inputs(
    config: EstimateConfiguration,
) -> tuple[list[Panel], list[HardwareItem]]:
    try:
        unit_output = config_to_template_output(config)
        return (
            config_to_panels(config, unit_output),
            config_to_hardware(config, unit_output),
        )
    except TemplateNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except ValueError as e:
        # Template rejected the unit, or a panel is invalid
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _nesting_service(config: EstimateConfiguration) -> NestingService:
    return NestingService(
        sheet=config_to_sheet(config), sort_order=config.nesting.sort_order
    )


@app.command()
def estimate(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to JSON estimate configuration"),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json"),
    ] = "text",
    svg_dir: Annotated[
        Path | None,
        typer.Option("--svg-dir", help="Write one SVG cut diagram per sheet here"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Nest, resolve finishes and price a build.

    Examples:
        woodquote estimate wardrobe.json
        woodquote estimate wardrobe.json --format json
        woodquote estimate wardrobe.json --svg-dir ./sheets
    """
    _configure_logging(verbose)

    if output_format not in ("text", "json"):
        typer.echo(f"Error: Unknown format: {output_format}", err=True)
        typer.echo("Available formats: text, json", err=True)
        raise typer.Exit(code=1)

    config = _load(config_file)
    panels, hardware = _build_inputs(config)

    command = EstimateCommand(
        nesting_service=_nesting_service(config),
        rounding_digits=config.rounding_digits,
    )
    try:
        result = command.execute(
            panels,
            config_to_topology(config, panels),
            config_to_price_lookup(config),
            hardware,
        )
    except EstimationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if svg_dir is not None:
        _write_svgs(result.nesting, svg_dir)

    if output_format == "json":
        typer.echo(EstimateJsonExporter().export(result))
        return

    typer.echo(CutListFormatter().format(result.panels))
    typer.echo()
    typer.echo(CutDiagramRenderer().render_waste_summary(result.nesting))
    typer.echo()
    typer.echo(PurchaseSummaryFormatter().format(result.purchase))


def _write_svgs(nesting: NestingResult, svg_dir: Path) -> None:
    renderer = CutDiagramRenderer()
    try:
        svg_dir.mkdir(parents=True, exist_ok=True)
        for material_nesting in nesting.materials:
            svgs = renderer.render_all_svg(material_nesting)
            for index, svg in enumerate(svgs, start=1):
                path = svg_dir / f"{material_nesting.material.key}_sheet{index}.svg"
                path.write_text(svg, encoding="utf-8")
                logger.debug("Wrote %s", path)
    except OSError as e:
        typer.echo(f"Error: Could not write SVG files: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"SVG cut diagrams written to {svg_dir}", err=True)


@app.command()
def nest(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to JSON estimate configuration"),
    ],
    ascii_diagram: Annotated[
        bool,
        typer.Option("--ascii", help="Print ASCII cut diagrams"),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", "-w", help="Terminal width for ASCII diagrams"),
    ] = 80,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Nest panels onto sheets without pricing.

    Examples:
        woodquote nest wardrobe.json
        woodquote nest wardrobe.json --ascii
    """
    _configure_logging(verbose)
    config = _load(config_file)
    panels, _ = _build_inputs(config)

    try:
        nesting = _nesting_service(config).nest(panels)
    except EstimationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    renderer = CutDiagramRenderer()
    if ascii_diagram:
        typer.echo(renderer.render_all_ascii(nesting, width=width))
        typer.echo()
    typer.echo(renderer.render_waste_summary(nesting))


if __name__ == "__main__":
    app()
