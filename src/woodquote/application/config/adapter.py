"""Adapter converting EstimateConfiguration into domain objects.

Each function takes a validated configuration and returns the objects the
estimate command consumes. Panels and hardware generated from a unit
template come after those listed explicitly.
"""

from woodquote.application.config.schemas import (
    EstimateConfiguration,
    HardwareConfigSchema,
    PanelConfigSchema,
    UnitConfigSchema,
)
from woodquote.domain.services import FinishTopology, PriceKey
from woodquote.domain.templates import TemplateOutput, UnitSpec, get_template
from woodquote.domain.value_objects import (
    HardwareItem,
    MaterialClass,
    Panel,
    PanelKind,
)
from woodquote.infrastructure.bin_packing import SheetSpec
from woodquote.infrastructure.price_catalog import (
    CatalogPriceLookup,
    PriceSetting,
    Product,
)


def config_to_sheet(config: EstimateConfiguration) -> SheetSpec:
    sheet = config.sheet
    return SheetSpec(
        length=sheet.length,
        width=sheet.width,
        kerf=sheet.kerf,
        margin=sheet.margin,
    )


def config_to_unit_spec(unit: UnitConfigSchema) -> UnitSpec:
    return UnitSpec(
        unit_type=unit.type,
        width=unit.width,
        height=unit.height,
        depth=unit.depth,
        material=MaterialClass.parse(unit.material),
        back_material=(
            MaterialClass.parse(unit.back_material) if unit.back_material else None
        ),
        variant=unit.variant,
        shutters=unit.shutters,
        drawers=unit.drawers,
        shelves=unit.shelves,
        partitions=unit.partitions,
        exposed_sides=unit.exposed_sides,
        loft_height=unit.loft_height,
    )


def config_to_template_output(config: EstimateConfiguration) -> TemplateOutput:
    """Build the configured unit with its template.

    Returns an empty output when the configuration has no unit.

    Raises:
        TemplateNotFoundError: If the unit type has no template.
        ValueError: If the template rejects the unit dimensions.
    """
    if config.unit is None:
        return TemplateOutput()
    template = get_template(config.unit.type)
    return template.build(config_to_unit_spec(config.unit))


def _panel_from_config(panel: PanelConfigSchema) -> Panel:
    kind = panel.kind if panel.kind is not None else PanelKind.from_label(panel.name or "")
    return Panel(
        id=panel.id,
        kind=kind,
        width=panel.width,
        height=panel.height,
        quantity=panel.quantity,
        material=MaterialClass.parse(panel.material),
        allow_rotate=panel.allow_rotate,
        grain=panel.grain,
        is_exposed_end=panel.exposed_end,
        banded_edges=tuple(panel.banded_edges),
        band_class=panel.band_class,
    )


def config_to_panels(
    config: EstimateConfiguration, unit_output: TemplateOutput | None = None
) -> list[Panel]:
    """Convert configured panels, followed by the unit template's panels.

    Args:
        config: A validated configuration.
        unit_output: Pre-built template output, to avoid building the unit
            twice when hardware is converted too.
    """
    if unit_output is None:
        unit_output = config_to_template_output(config)
    panels = [_panel_from_config(p) for p in config.panels]
    panels.extend(unit_output.panels)
    return panels


def _hardware_from_config(item: HardwareConfigSchema) -> HardwareItem:
    return HardwareItem(
        name=item.name,
        quantity=item.quantity,
        rate_key=item.rate_key,
        rate_multiplier=item.rate_multiplier,
        notes=item.notes,
    )


def config_to_hardware(
    config: EstimateConfiguration, unit_output: TemplateOutput | None = None
) -> list[HardwareItem]:
    """Convert configured hardware, followed by the unit template's hardware."""
    if unit_output is None:
        unit_output = config_to_template_output(config)
    hardware = [_hardware_from_config(h) for h in config.hardware]
    hardware.extend(unit_output.hardware)
    return hardware


def config_to_topology(
    config: EstimateConfiguration, panels: list[Panel] | None = None
) -> FinishTopology:
    """Convert finish settings.

    When ``pre_laminated`` is not configured it is True only if every panel
    is cut from a pre-laminated board.
    """
    finish = config.finish
    pre_laminated = finish.pre_laminated
    if pre_laminated is None:
        if panels is None:
            panels = config_to_panels(config)
        pre_laminated = bool(panels) and all(
            p.material.is_pre_laminated for p in panels
        )
    return FinishTopology(
        finish=finish.finish,
        is_pre_laminated=pre_laminated,
        adhesive_coverage_sqft=finish.adhesive_coverage_sqft,
        adhesive_waste_pct=finish.adhesive_waste_pct,
        strict=finish.strict,
    )


def config_to_price_lookup(config: EstimateConfiguration) -> CatalogPriceLookup:
    pricing = config.pricing
    products = [
        Product(
            id=p.id,
            name=p.name or p.id,
            price_per_unit=p.price_per_unit,
            unit=p.unit,
        )
        for p in pricing.products
    ]
    settings = [
        PriceSetting(
            key=PriceKey.parse(key),
            linked_product_id=s.linked_product_id,
            use_real_pricing=s.use_real_pricing,
            override_price=s.override_price,
        )
        for key, s in pricing.settings.items()
    ]
    return CatalogPriceLookup(settings=settings, products=products)
