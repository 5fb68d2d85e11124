"""Pydantic models for estimate configuration files.

A configuration describes the stock sheet, the finish, the panels to cut
(listed explicitly, generated from a furniture template, or both), extra
hardware and the caller's price settings.
"""

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from woodquote.domain.services import PriceKey
from woodquote.domain.value_objects import (
    FinishType,
    GrainDirection,
    MaterialClass,
    PanelEdge,
    PanelKind,
)
from woodquote.infrastructure.bin_packing import SortOrder

# Supported schema versions for configuration files
# Version 1.0: Panels, sheet, finish and pricing
# Version 1.1: Furniture unit templates
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1"})


def _check_material(value: str) -> str:
    MaterialClass.parse(value)
    return value


class SheetConfigSchema(BaseModel):
    """Stock sheet dimensions and cutting parameters, in millimetres.

    Attributes:
        length: Sheet length (default 2440 for an 8 ft sheet).
        width: Sheet width (default 1220 for a 4 ft sheet).
        kerf: Saw blade kerf.
        margin: Trim lost on each side of the sheet.
    """

    model_config = ConfigDict(extra="forbid")

    length: float = Field(default=2440.0, gt=0, le=6000)
    width: float = Field(default=1220.0, gt=0, le=3000)
    kerf: float = Field(default=3.0, ge=0, le=10)
    margin: float = Field(default=10.0, ge=0, le=100)

    @model_validator(mode="after")
    def validate_usable_area(self) -> "SheetConfigSchema":
        if self.length - 2 * self.margin <= 0 or self.width - 2 * self.margin <= 0:
            raise ValueError("Sheet margin leaves no usable area")
        return self


class NestingConfigSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sort_order: SortOrder = Field(
        default=SortOrder.AREA_DESC, description="Panel ordering before placement"
    )


class FinishConfigSchema(BaseModel):
    """Finish settings.

    Attributes:
        finish: Finish applied to outer faces.
        pre_laminated: Whether the board carries a factory surface. When
            omitted it is derived from the panel materials.
        adhesive_coverage_sqft: Area one adhesive bottle covers.
        adhesive_waste_pct: Extra adhesive allowance as a fraction.
        strict: Fail on panel kinds that have no face assignment.
    """

    model_config = ConfigDict(extra="forbid")

    finish: FinishType = FinishType.LAMINATE
    pre_laminated: bool | None = None
    adhesive_coverage_sqft: float = Field(default=32.0, gt=0)
    adhesive_waste_pct: float = Field(default=0.10, ge=0, le=1)
    strict: bool = False


class PanelConfigSchema(BaseModel):
    """One panel to cut.

    Either ``kind`` or ``name`` must be given. A free-text name such as
    "Loft Side Panel" is mapped to a kind when ``kind`` is omitted.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, max_length=100)
    kind: PanelKind | None = None
    name: str | None = Field(default=None, max_length=200)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1, le=1000)
    material: str = "18mm plywood"
    allow_rotate: bool = True
    grain: GrainDirection = GrainDirection.NONE
    exposed_end: bool = False
    banded_edges: list[PanelEdge] = Field(default_factory=list, max_length=4)
    band_class: str | None = None

    @field_validator("material")
    @classmethod
    def validate_material(cls, v: str) -> str:
        return _check_material(v)

    @field_validator("banded_edges")
    @classmethod
    def validate_unique_edges(cls, v: list[PanelEdge]) -> list[PanelEdge]:
        if len(set(v)) != len(v):
            raise ValueError("Banded edges must not repeat")
        return v

    @model_validator(mode="after")
    def validate_kind_or_name(self) -> "PanelConfigSchema":
        if self.kind is None and not self.name:
            raise ValueError("Specify either 'kind' or 'name'")
        if self.banded_edges and not self.band_class:
            raise ValueError("'band_class' is required when edges are banded")
        return self


class UnitConfigSchema(BaseModel):
    """Furniture unit expanded into panels by a template."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(..., min_length=1)
    width: float = Field(..., gt=0, le=6000)
    height: float = Field(..., gt=0, le=4000)
    depth: float = Field(..., gt=0, le=1500)
    material: str = "18mm plywood"
    back_material: str | None = None
    variant: str = ""
    shutters: int = Field(default=0, ge=0, le=20)
    drawers: int = Field(default=0, ge=0, le=20)
    shelves: int = Field(default=0, ge=0, le=50)
    partitions: int = Field(default=0, ge=0, le=20)
    exposed_sides: bool = False
    loft_height: float = Field(default=0.0, ge=0, le=1500)

    @field_validator("material")
    @classmethod
    def validate_material(cls, v: str) -> str:
        return _check_material(v)

    @field_validator("back_material")
    @classmethod
    def validate_back_material(cls, v: str | None) -> str | None:
        return None if v is None else _check_material(v)


class HardwareConfigSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    rate_key: str = ""
    rate_multiplier: float = Field(default=1.0, gt=0)
    notes: str = ""


class ProductConfigSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = ""
    price_per_unit: float = Field(..., ge=0)
    unit: str = "pcs"


class PriceSettingConfigSchema(BaseModel):
    """The caller's price configuration for one key."""

    model_config = ConfigDict(extra="forbid")

    linked_product_id: str | None = None
    use_real_pricing: bool = False
    override_price: float | None = Field(default=None, ge=0)


class PricingConfigSchema(BaseModel):
    """Products and per-key price settings.

    Settings are keyed by ``category:name``, e.g. ``board:18mm_plywood``.
    """

    model_config = ConfigDict(extra="forbid")

    products: list[ProductConfigSchema] = Field(default_factory=list)
    settings: dict[str, PriceSettingConfigSchema] = Field(default_factory=dict)

    @field_validator("settings")
    @classmethod
    def validate_setting_keys(
        cls, v: dict[str, PriceSettingConfigSchema]
    ) -> dict[str, PriceSettingConfigSchema]:
        for key in v:
            PriceKey.parse(key)
        return v

    @model_validator(mode="after")
    def validate_product_links(self) -> "PricingConfigSchema":
        product_ids = {p.id for p in self.products}
        if len(product_ids) != len(self.products):
            raise ValueError("Product ids must be unique")
        for key, setting in self.settings.items():
            if setting.linked_product_id and setting.linked_product_id not in product_ids:
                raise ValueError(
                    f"Price setting '{key}' links unknown product "
                    f"'{setting.linked_product_id}'"
                )
        return self


class EstimateConfiguration(BaseModel):
    """Root configuration model for an estimate.

    Example:
        >>> config = EstimateConfiguration(
        ...     schema_version="1.0",
        ...     panels=[PanelConfigSchema(id="side", kind="side", width=2000, height=600)],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    sheet: SheetConfigSchema = Field(default_factory=SheetConfigSchema)
    nesting: NestingConfigSchema = Field(default_factory=NestingConfigSchema)
    finish: FinishConfigSchema = Field(default_factory=FinishConfigSchema)
    panels: list[PanelConfigSchema] = Field(default_factory=list, max_length=500)
    unit: UnitConfigSchema | None = None
    hardware: list[HardwareConfigSchema] = Field(default_factory=list)
    pricing: PricingConfigSchema = Field(default_factory=PricingConfigSchema)
    rounding_digits: int = Field(default=2, ge=0, le=6)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minor versions of them."""
        if v in SUPPORTED_VERSIONS:
            return v
        major_version = int(v.split(".")[0])
        if major_version in {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}:
            return v
        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )

    @field_validator("panels")
    @classmethod
    def validate_unique_panel_ids(
        cls, v: list[PanelConfigSchema]
    ) -> list[PanelConfigSchema]:
        seen: set[str] = set()
        for panel in v:
            if panel.id in seen:
                raise ValueError(f"Duplicate panel id '{panel.id}'")
            seen.add(panel.id)
        return v

    @model_validator(mode="after")
    def validate_has_panels(self) -> "EstimateConfiguration":
        if not self.panels and self.unit is None:
            raise ValueError("Specify 'panels', 'unit', or both")
        return self
