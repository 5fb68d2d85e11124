"""Sheet nesting with a best-short-side-fit guillotine heuristic.

This module provides the data structures describing stock sheets, free
space, placements and per-material nesting results, together with the
nester that produces them.

All result dataclasses are frozen (immutable). Mutable bookkeeping used
while nesting lives in private classes that never leave this module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence

from woodquote.domain.exceptions import UnplaceablePanelError
from woodquote.domain.value_objects import MaterialClass, Panel, validate_panel_ids

from .tiling import OversizeTiler

logger = logging.getLogger(__name__)


class SortOrder(str, Enum):
    """Ordering of panel instances before placement (first-fit decreasing)."""

    AREA_DESC = "area-desc"
    MAX_SIDE_DESC = "max-side-desc"


@dataclass(frozen=True)
class SheetSpec:
    """Stock sheet dimensions and cutting parameters.

    The standard sheet is 8x4 ft (2440x1220mm). Sheet length runs along the
    x axis.

    Attributes:
        length: Sheet length in millimetres.
        width: Sheet width in millimetres.
        kerf: Material consumed by the saw blade between adjacent cuts.
        margin: Trim lost on each of the four sides.
    """

    length: float = 2440.0
    width: float = 1220.0
    kerf: float = 3.0
    margin: float = 10.0

    def __post_init__(self) -> None:
        if self.length <= 0 or self.width <= 0:
            raise ValueError("Sheet dimensions must be positive")
        if self.kerf < 0:
            raise ValueError("Kerf must be non-negative")
        if self.margin < 0:
            raise ValueError("Margin must be non-negative")
        if self.usable_length <= 0 or self.usable_width <= 0:
            raise ValueError("Margin leaves no usable sheet area")

    @property
    def usable_length(self) -> float:
        """Length available for placement after trimming both margins."""
        return self.length - 2 * self.margin

    @property
    def usable_width(self) -> float:
        """Width available for placement after trimming both margins."""
        return self.width - 2 * self.margin

    @property
    def net_area(self) -> float:
        """Usable area in square millimetres."""
        return self.usable_length * self.usable_width


@dataclass(frozen=True)
class FreeRectangle:
    """Axis-aligned unused region of a sheet, in absolute sheet coordinates."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def area(self) -> float:
        return self.w * self.h

    def contains(self, other: FreeRectangle) -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def overlaps(self, x: float, y: float, w: float, h: float) -> bool:
        """True if this rectangle shares interior area with the given one."""
        return not (
            self.right <= x
            or x + w <= self.x
            or self.bottom <= y
            or y + h <= self.y
        )


@dataclass(frozen=True)
class Placement:
    """One panel copy placed on a sheet.

    Coordinates are absolute sheet coordinates, so the first placement on a
    sheet with a 10mm margin sits at (10, 10).

    Attributes:
        panel: The panel being placed.
        x: Left edge position in millimetres.
        y: Top edge position in millimetres.
        rotated: True if the panel is turned 90 degrees, so that its height
            runs along the sheet length.
        copy_index: Zero-based copy number for panels with quantity > 1.
    """

    panel: Panel
    x: float
    y: float
    rotated: bool = False
    copy_index: int = 0

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def panel_id(self) -> str:
        return self.panel.id

    @property
    def placed_width(self) -> float:
        """Extent along the sheet length (accounts for rotation)."""
        return self.panel.height if self.rotated else self.panel.width

    @property
    def placed_height(self) -> float:
        """Extent across the sheet (accounts for rotation)."""
        return self.panel.width if self.rotated else self.panel.height

    @property
    def right_edge(self) -> float:
        return self.x + self.placed_width

    @property
    def bottom_edge(self) -> float:
        return self.y + self.placed_height

    @property
    def area(self) -> float:
        return self.panel.area

    @property
    def label(self) -> str:
        """Panel id, suffixed with the copy number when there are several."""
        if self.panel.quantity == 1:
            return self.panel.id
        return f"{self.panel.id} #{self.copy_index + 1}"


@dataclass(frozen=True)
class SheetLayout:
    """Placements and remaining free space on one sheet.

    Attributes:
        sheet_index: Zero-based index of this sheet within its material.
        sheet: Stock sheet specification.
        material: Material class cut from this sheet.
        placements: Placed panel copies, in placement order.
        free_rectangles: Free space left after the last placement.
    """

    sheet_index: int
    sheet: SheetSpec
    material: MaterialClass
    placements: tuple[Placement, ...]
    free_rectangles: tuple[FreeRectangle, ...] = ()

    def __post_init__(self) -> None:
        if self.sheet_index < 0:
            raise ValueError("Sheet index must be non-negative")

    @property
    def used_area(self) -> float:
        """Total area of placed panels in square millimetres."""
        return sum(p.area for p in self.placements)

    @property
    def utilization(self) -> float:
        """Used fraction of the net sheet area, always within [0, 1]."""
        return min(1.0, max(0.0, self.used_area / self.sheet.net_area))

    @property
    def waste(self) -> float:
        """Unused net area in square millimetres, never negative."""
        return max(0.0, self.sheet.net_area - self.used_area)

    @property
    def piece_count(self) -> int:
        return len(self.placements)


@dataclass(frozen=True)
class MaterialNesting:
    """Nesting result for one material class.

    Attributes:
        material: Material class nested.
        sheet: Stock sheet used for this material.
        layouts: One layout per opened sheet.
        panels: Panels that were nested, after tiling.
    """

    material: MaterialClass
    sheet: SheetSpec
    layouts: tuple[SheetLayout, ...] = ()
    panels: tuple[Panel, ...] = ()

    @property
    def sheet_count(self) -> int:
        return len(self.layouts)

    @property
    def used_area(self) -> float:
        return sum(layout.used_area for layout in self.layouts)

    @property
    def net_area(self) -> float:
        return self.sheet.net_area * self.sheet_count

    @property
    def utilization(self) -> float:
        """Used fraction of the net area of all sheets, within [0, 1]."""
        if not self.layouts:
            return 0.0
        return min(1.0, max(0.0, self.used_area / self.net_area))

    @property
    def waste(self) -> float:
        return sum(layout.waste for layout in self.layouts)

    @property
    def piece_count(self) -> int:
        return sum(layout.piece_count for layout in self.layouts)


@dataclass(frozen=True)
class NestingResult:
    """Nesting results for all material classes of one estimate."""

    materials: tuple[MaterialNesting, ...] = ()

    def for_material(self, material: MaterialClass) -> MaterialNesting | None:
        for nesting in self.materials:
            if nesting.material == material:
                return nesting
        return None

    @property
    def sheets_by_material(self) -> dict[MaterialClass, int]:
        return {n.material: n.sheet_count for n in self.materials}

    @property
    def total_sheets(self) -> int:
        return sum(n.sheet_count for n in self.materials)

    @property
    def total_pieces_placed(self) -> int:
        return sum(n.piece_count for n in self.materials)

    @property
    def layouts(self) -> tuple[SheetLayout, ...]:
        return tuple(layout for n in self.materials for layout in n.layouts)


@dataclass
class _OpenSheet:
    """Mutable state of a sheet while nesting.

    Owns the free-rectangle list of its sheet; no other sheet ever reads or
    writes it.
    """

    index: int
    free: list[FreeRectangle]
    placements: list[Placement] = field(default_factory=list)


@dataclass(frozen=True)
class _Candidate:
    sheet: _OpenSheet
    rect_index: int
    rotated: bool
    short_leftover: float
    long_leftover: float
    width: float
    height: float

    def beats(self, other: _Candidate | None) -> bool:
        """Strictly better by short-side leftover, then long-side leftover."""
        if other is None:
            return True
        if self.short_leftover != other.short_leftover:
            return self.short_leftover < other.short_leftover
        return self.long_leftover < other.long_leftover


class GuillotineNester:
    """Places panels onto identical stock sheets of one material class.

    Panel copies are sorted largest first and placed one at a time into the
    free rectangle, on any open sheet, that leaves the smallest short-side
    leftover (ties broken by long-side leftover). A new sheet is opened only
    when no open sheet can take the panel. After each placement the chosen
    free rectangle is split guillotine style, leaving a kerf gap next to the
    panel.

    The result is fully deterministic for a given input order.

    Attributes:
        sheet: Stock sheet specification.
        sort_order: Ordering applied to panel copies before placement.
    """

    def __init__(
        self, sheet: SheetSpec, sort_order: SortOrder = SortOrder.AREA_DESC
    ) -> None:
        self.sheet = sheet
        self.sort_order = SortOrder(sort_order)

    def nest(
        self,
        panels: Sequence[Panel],
        material: MaterialClass | None = None,
    ) -> MaterialNesting:
        """Nest panels of a single material class.

        Args:
            panels: Panels to place; quantities are expanded into copies.
                Oversize panels must already have been tiled.
            material: Material class of the panels. Taken from the first
                panel when omitted.

        Returns:
            MaterialNesting with one layout per sheet used.

        Raises:
            ValueError: If the panels belong to more than one material class.
            UnplaceablePanelError: If a panel copy does not fit a fresh sheet.
        """
        if material is None:
            material = panels[0].material if panels else MaterialClass.standard_18mm()
        mixed = [p.id for p in panels if p.material != material]
        if mixed:
            raise ValueError(
                f"Panels {', '.join(mixed)} are not {material.label}; "
                "nest each material class separately"
            )

        if not panels:
            return MaterialNesting(material=material, sheet=self.sheet)

        copies = self._sort(self._expand(panels))
        logger.debug("Nesting %d copies of %s", len(copies), material.label)

        sheets: list[_OpenSheet] = []
        for panel, copy_index in copies:
            best = self._find_best(sheets, panel)
            if best is None:
                sheets.append(self._open_sheet(len(sheets)))
                best = self._find_best(sheets[-1:], panel)
                if best is None:
                    raise UnplaceablePanelError(panel.id, panel.width, panel.height)
            self._commit(best, panel, copy_index)

        layouts = tuple(
            SheetLayout(
                sheet_index=s.index,
                sheet=self.sheet,
                material=material,
                placements=tuple(s.placements),
                free_rectangles=tuple(s.free),
            )
            for s in sheets
        )

        for layout in layouts:
            logger.debug(
                "%s sheet %d: %d pieces, %.1f%% utilization",
                material.label,
                layout.sheet_index,
                layout.piece_count,
                layout.utilization * 100,
            )

        return MaterialNesting(
            material=material,
            sheet=self.sheet,
            layouts=layouts,
            panels=tuple(panels),
        )

    def _expand(self, panels: Sequence[Panel]) -> list[tuple[Panel, int]]:
        """Expand each panel into one entry per physical copy."""
        return [(p, i) for p in panels for i in range(p.quantity)]

    def _sort(self, copies: list[tuple[Panel, int]]) -> list[tuple[Panel, int]]:
        # sorted() is stable, so equal keys keep their input order
        if self.sort_order is SortOrder.MAX_SIDE_DESC:
            return sorted(copies, key=lambda c: c[0].max_side, reverse=True)
        return sorted(copies, key=lambda c: c[0].area, reverse=True)

    def _open_sheet(self, index: int) -> _OpenSheet:
        full = FreeRectangle(
            x=self.sheet.margin,
            y=self.sheet.margin,
            w=self.sheet.usable_length,
            h=self.sheet.usable_width,
        )
        logger.debug("Opening sheet %d", index)
        return _OpenSheet(index=index, free=[full])

    def _find_best(
        self, sheets: Sequence[_OpenSheet], panel: Panel
    ) -> _Candidate | None:
        orientations = [(panel.width, panel.height, False)]
        if panel.can_rotate and panel.width != panel.height:
            orientations.append((panel.height, panel.width, True))

        best: _Candidate | None = None
        for sheet in sheets:
            for width, height, rotated in orientations:
                for rect_index, rect in enumerate(sheet.free):
                    if width > rect.w or height > rect.h:
                        continue
                    leftover_w = rect.w - width
                    leftover_h = rect.h - height
                    candidate = _Candidate(
                        sheet=sheet,
                        rect_index=rect_index,
                        rotated=rotated,
                        short_leftover=min(leftover_w, leftover_h),
                        long_leftover=max(leftover_w, leftover_h),
                        width=width,
                        height=height,
                    )
                    if candidate.beats(best):
                        best = candidate
        return best

    def _commit(self, best: _Candidate, panel: Panel, copy_index: int) -> None:
        sheet = best.sheet
        rect = sheet.free[best.rect_index]
        placement = Placement(
            panel=panel,
            x=rect.x,
            y=rect.y,
            rotated=best.rotated,
            copy_index=copy_index,
        )
        sheet.placements.append(placement)

        if best.rotated:
            logger.debug(
                "Placed %s rotated at (%g, %g) on sheet %d",
                placement.label,
                placement.x,
                placement.y,
                sheet.index,
            )

        self._split(sheet.free, best.rect_index, placement)
        self._prune(sheet.free)

    def _split(
        self, free: list[FreeRectangle], index: int, placed: Placement
    ) -> None:
        """Replace the used free rectangle by the strips around the placement.

        Each strip stops one kerf short of the placed panel. Afterwards every
        free rectangle that reaches into the placed panel or its kerf margin
        is dropped, so no later panel can be placed closer than one kerf.
        """
        kerf = self.sheet.kerf
        rect = free.pop(index)

        right_w = rect.right - placed.right_edge - kerf
        if right_w > 0:
            free.append(
                FreeRectangle(placed.right_edge + kerf, rect.y, right_w, rect.h)
            )

        bottom_h = rect.bottom - placed.bottom_edge - kerf
        if bottom_h > 0:
            free.append(
                FreeRectangle(rect.x, placed.bottom_edge + kerf, rect.w, bottom_h)
            )

        left_w = placed.x - rect.x - kerf
        if left_w > 0:
            free.append(FreeRectangle(rect.x, rect.y, left_w, rect.h))

        top_h = placed.y - rect.y - kerf
        if top_h > 0:
            free.append(FreeRectangle(rect.x, rect.y, rect.w, top_h))

        blocked = (
            placed.x - kerf,
            placed.y - kerf,
            placed.placed_width + 2 * kerf,
            placed.placed_height + 2 * kerf,
        )
        free[:] = [r for r in free if not r.overlaps(*blocked)]

    @staticmethod
    def _prune(free: list[FreeRectangle]) -> None:
        """Drop free rectangles contained in another; of two equal ones the first stays."""
        i = 0
        while i < len(free):
            removed_i = False
            j = i + 1
            while j < len(free):
                if free[i].contains(free[j]):
                    del free[j]
                elif free[j].contains(free[i]):
                    del free[i]
                    removed_i = True
                    break
                else:
                    j += 1
            if not removed_i:
                i += 1


class NestingService:
    """Coordinates tiling and nesting across material classes.

    Panels are grouped by material class; each group is tiled against its
    sheet and nested onto its own sheet sequence. Material groups keep the
    order in which they first appear in the input.

    Attributes:
        sheet: Default stock sheet.
        sort_order: Ordering applied before placement.
        material_sheets: Per-material sheet overrides.
    """

    def __init__(
        self,
        sheet: SheetSpec | None = None,
        sort_order: SortOrder = SortOrder.AREA_DESC,
        material_sheets: Mapping[MaterialClass, SheetSpec] | None = None,
        tiler: OversizeTiler | None = None,
    ) -> None:
        self.sheet = sheet or SheetSpec()
        self.sort_order = SortOrder(sort_order)
        self.material_sheets = dict(material_sheets or {})
        self.tiler = tiler or OversizeTiler()

    def sheet_for(self, material: MaterialClass) -> SheetSpec:
        return self.material_sheets.get(material, self.sheet)

    def nest(self, panels: Sequence[Panel]) -> NestingResult:
        """Tile and nest all panels, grouped by material class.

        Raises:
            InvalidPanelError: If two panels share an id, including ids
                produced by tiling.
            UnplaceablePanelError: If a panel copy does not fit a fresh sheet.
        """
        validate_panel_ids(panels)
        groups = self._group_by_material(panels)

        tiled_groups: dict[MaterialClass, list[Panel]] = {}
        for material, group in groups.items():
            sheet = self.sheet_for(material)
            tiled_groups[material] = self.tiler.tile(
                group, sheet.usable_length, sheet.usable_width
            )
        # Tile ids must not collide with supplied ids
        validate_panel_ids(
            [panel for group in tiled_groups.values() for panel in group]
        )

        logger.info(
            "Nesting %d panels across %d material classes",
            len(panels),
            len(groups),
        )

        results: list[MaterialNesting] = []
        for material, tiled in tiled_groups.items():
            sheet = self.sheet_for(material)
            nesting = GuillotineNester(sheet, self.sort_order).nest(tiled, material)
            logger.info(
                "%s: %d pieces -> %d sheets (%.1f%% utilization)",
                material.label,
                nesting.piece_count,
                nesting.sheet_count,
                nesting.utilization * 100,
            )
            results.append(nesting)

        return NestingResult(materials=tuple(results))

    @staticmethod
    def _group_by_material(
        panels: Sequence[Panel],
    ) -> dict[MaterialClass, list[Panel]]:
        groups: dict[MaterialClass, list[Panel]] = {}
        for panel in panels:
            groups.setdefault(panel.material, []).append(panel)
        return groups
