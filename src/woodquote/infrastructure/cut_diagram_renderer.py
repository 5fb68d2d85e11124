"""Cut diagram rendering for nesting results.

This module provides SVG and ASCII rendering of sheet layouts showing panel
placements, dimensions, rotation markers and the free space left over.
"""

from __future__ import annotations

from typing import Union
from xml.sax.saxutils import escape

from woodquote.domain.value_objects import GrainDirection, PanelKind
from woodquote.infrastructure.bin_packing import (
    MaterialNesting,
    NestingResult,
    Placement,
    SheetLayout,
)

NestingLike = Union[MaterialNesting, NestingResult]

# Fill colour per panel kind
PANEL_KIND_COLORS: dict[PanelKind, str] = {
    PanelKind.SIDE: "#90EE90",  # Light green
    PanelKind.TOP: "#DDA0DD",  # Plum
    PanelKind.BOTTOM: "#DDA0DD",
    PanelKind.SHELF: "#87CEEB",  # Sky blue
    PanelKind.PARTITION: "#F0E68C",  # Khaki
    PanelKind.BACK: "#D3D3D3",  # Light gray
    PanelKind.SHUTTER: "#FFB6C1",  # Light pink
    PanelKind.DOOR: "#FFB6C1",
    PanelKind.DRAWER_FRONT: "#FFA07A",  # Light salmon
    PanelKind.LOFT_SIDE: "#98FB98",  # Pale green
    PanelKind.LOFT_TOP: "#D8BFD8",  # Thistle
    PanelKind.LOFT_BOTTOM: "#D8BFD8",
    PanelKind.LOFT_SHELF: "#B0E0E6",  # Powder blue
    PanelKind.LOFT_BACK: "#DCDCDC",  # Gainsboro
    PanelKind.FILLER: "#F5F5DC",  # Beige
    PanelKind.CUSTOM: "#E6E6FA",  # Lavender
}

_FONT = 'font-family="Arial, sans-serif"'


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


class CutDiagramRenderer:
    """Renders sheet layouts as SVG or ASCII diagrams.

    Placement coordinates are absolute sheet coordinates, so the trim margin
    shows up as the band between the sheet outline and the dashed usable
    area.

    Attributes:
        scale: Pixels per millimetre for SVG rendering.
        piece_fill: Fill colour when panel kind colours are off.
        piece_stroke: Stroke colour for piece outlines.
        waste_fill: Fill colour for free rectangles.
        text_color: Colour for labels and dimensions.
        show_dimensions: Whether to show piece dimensions.
        show_labels: Whether to show piece labels.
        show_grain: Whether to show grain direction arrows.
        use_panel_colors: Whether to colour pieces by panel kind.
    """

    def __init__(
        self,
        scale: float = 0.3,
        piece_fill: str = "#ADD8E6",
        piece_stroke: str = "#000000",
        waste_fill: str = "#D3D3D3",
        text_color: str = "#000000",
        show_dimensions: bool = True,
        show_labels: bool = True,
        show_grain: bool = False,
        use_panel_colors: bool = True,
    ) -> None:
        if scale <= 0:
            raise ValueError("Scale must be positive")
        self.scale = scale
        self.piece_fill = piece_fill
        self.piece_stroke = piece_stroke
        self.waste_fill = waste_fill
        self.text_color = text_color
        self.show_dimensions = show_dimensions
        self.show_labels = show_labels
        self.show_grain = show_grain
        self.use_panel_colors = use_panel_colors

    def render_svg(self, layout: SheetLayout, total_sheets: int = 1) -> str:
        """Generate an SVG cut diagram for a single sheet.

        Args:
            layout: Sheet layout with placements.
            total_sheets: Number of sheets of this material, for the header.

        Returns:
            SVG document as a string.
        """
        sheet = layout.sheet
        header_height = 30

        kinds_used: set[PanelKind] = set()
        if self.use_panel_colors:
            kinds_used = {p.panel.kind for p in layout.placements}
        legend_height = self._legend_height(kinds_used)

        svg_width = sheet.length * self.scale
        sheet_height = sheet.width * self.scale
        svg_height = sheet_height + header_height + legend_height

        parts: list[str] = [
            f'<svg width="{svg_width}" height="{svg_height}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            f'  <rect x="0" y="0" width="{svg_width}" height="{svg_height}" '
            f'fill="white"/>',
            self._render_header(layout, total_sheets, svg_width, header_height),
            "  <!-- Sheet outline -->",
            f'  <rect x="0" y="{header_height}" width="{svg_width}" '
            f'height="{sheet_height}" fill="#f5deb3" '
            f'stroke="{self.piece_stroke}" stroke-width="2"/>',
        ]

        if sheet.margin > 0:
            m = sheet.margin * self.scale
            parts.append("  <!-- Usable area -->")
            parts.append(
                f'  <rect x="{m}" y="{header_height + m}" '
                f'width="{sheet.usable_length * self.scale}" '
                f'height="{sheet.usable_width * self.scale}" '
                f'fill="none" stroke="#999999" stroke-dasharray="5,5"/>'
            )

        # Free space first so pieces render on top
        if layout.free_rectangles:
            parts.append("  <!-- Free space -->")
            for rect in layout.free_rectangles:
                parts.append(
                    f'  <rect x="{rect.x * self.scale}" '
                    f'y="{header_height + rect.y * self.scale}" '
                    f'width="{rect.w * self.scale}" height="{rect.h * self.scale}" '
                    f'fill="{self.waste_fill}" fill-opacity="0.5" stroke="none"/>'
                )

        parts.append("  <!-- Placed pieces -->")
        for placement in layout.placements:
            parts.append(self._render_piece(placement, header_height))

        if kinds_used:
            parts.append("  <!-- Legend -->")
            parts.append(
                self._render_legend(kinds_used, svg_width, header_height + sheet_height)
            )

        parts.append("</svg>")
        return "\n".join(parts)

    def render_all_svg(self, result: NestingLike) -> list[str]:
        """Generate one SVG per sheet.

        Sheet numbering in the headers restarts for each material class.
        """
        svgs: list[str] = []
        for nesting in self._materials(result):
            total = nesting.sheet_count
            svgs.extend(self.render_svg(layout, total) for layout in nesting.layouts)
        return svgs

    def _render_header(
        self,
        layout: SheetLayout,
        total_sheets: int,
        svg_width: float,
        header_height: float,
    ) -> str:
        header_text = escape(
            f"Sheet {layout.sheet_index + 1} of {total_sheets} - "
            f"{layout.material.label} - {layout.utilization * 100:.1f}% utilization"
        )
        return (
            f"  <!-- Header -->\n"
            f'  <rect x="0" y="0" width="{svg_width}" height="{header_height}" '
            f'fill="#E0E0E0"/>\n'
            f'  <text x="10" y="{header_height - 8}" {_FONT} font-size="14" '
            f'fill="{self.text_color}">{header_text}</text>'
        )

    def _render_piece(self, placement: Placement, header_height: float) -> str:
        """Render one placement as a rect with centred label and dimensions."""
        x = placement.x * self.scale
        y = header_height + placement.y * self.scale
        w = placement.placed_width * self.scale
        h = placement.placed_height * self.scale

        panel = placement.panel
        if self.use_panel_colors:
            fill = PANEL_KIND_COLORS.get(panel.kind, self.piece_fill)
        else:
            fill = self.piece_fill

        rect = (
            f'<rect x="{x}" y="{y}" width="{w}" height="{h}" '
            f'fill="{fill}" stroke="{self.piece_stroke}"/>'
        )
        grain = self._render_grain_indicator(placement, x, y, w, h)

        font_size = min(12, min(w, h) / 6)
        if font_size < 6:
            # Too small for text
            return "\n".join(
                f"  {part}" for part in (rect, grain) if part is not None
            )

        dims = f"{panel.width:g} x {panel.height:g}"
        if placement.rotated:
            dims += " (R)"

        text_x = x + w / 2
        text_y = y + h / 2
        svg_parts = ["  <g>", f"    {rect}"]
        if self.show_labels:
            svg_parts.append(
                f'    <text x="{text_x}" y="{text_y - font_size / 2}" '
                f'text-anchor="middle" {_FONT} font-size="{font_size}" '
                f'fill="{self.text_color}">{escape(placement.label)}</text>'
            )
        if self.show_dimensions:
            dims_y = text_y + font_size / 2 + 2 if self.show_labels else text_y
            svg_parts.append(
                f'    <text x="{text_x}" y="{dims_y}" '
                f'text-anchor="middle" {_FONT} font-size="{font_size * 0.8}" '
                f'fill="{self.text_color}">{dims}</text>'
            )
        if grain is not None:
            svg_parts.append(f"    {grain}")
        svg_parts.append("  </g>")
        return "\n".join(svg_parts)

    def _render_grain_indicator(
        self, placement: Placement, x: float, y: float, w: float, h: float
    ) -> str | None:
        """Arrow in the lower-right corner along the placed grain direction.

        LONG grain runs along the panel width, SHORT along its height. Grained
        panels are never rotated, so the arrow follows the panel axes.
        """
        grain = placement.panel.grain
        if not self.show_grain or grain == GrainDirection.NONE:
            return None

        length = min(20, min(w, h) / 4)
        margin = max(5, length / 2)
        x2 = x + w - margin
        y2 = y + h - margin
        if grain == GrainDirection.LONG:
            x1, y1 = x2 - length, y2
        else:
            x1, y1 = x2, y2 - length
        return (
            f'<line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" '
            f'stroke="{self.text_color}" stroke-width="1.5"/>'
        )

    def _legend_height(self, kinds: set[PanelKind]) -> float:
        if not kinds:
            return 0.0
        rows = (len(kinds) + 2) // 3
        # Title, padding, 25px per row, bottom padding
        return 20 + 10 + rows * 25 + 10

    def _render_legend(
        self, kinds: set[PanelKind], svg_width: float, y_offset: float
    ) -> str:
        parts: list[str] = [
            f'  <rect x="0" y="{y_offset}" width="{svg_width}" '
            f'height="{self._legend_height(kinds)}" fill="#F5F5F5" stroke="#CCCCCC"/>',
            f'  <text x="10" y="{y_offset + 18}" {_FONT} font-size="12" '
            f'font-weight="bold" fill="{self.text_color}">Panel Kinds:</text>',
        ]

        column_width = svg_width / 3
        swatch = 15
        start_y = y_offset + 35
        for idx, kind in enumerate(sorted(kinds, key=lambda k: k.value)):
            x = (idx % 3) * column_width + 15
            y = start_y + (idx // 3) * 25
            color = PANEL_KIND_COLORS.get(kind, self.piece_fill)
            parts.append(
                f'  <rect x="{x}" y="{y}" width="{swatch}" height="{swatch}" '
                f'fill="{color}" stroke="{self.piece_stroke}"/>'
            )
            parts.append(
                f'  <text x="{x + swatch + 5}" y="{y + swatch - 3}" {_FONT} '
                f'font-size="10" fill="{self.text_color}">'
                f'{kind.value.replace("_", " ").title()}</text>'
            )
        return "\n".join(parts)

    def render_ascii(
        self, layout: SheetLayout, width: int = 80, total_sheets: int = 1
    ) -> str:
        """Generate an ASCII cut diagram for a single sheet.

        Args:
            layout: Sheet layout with placements.
            width: Terminal width in characters.
            total_sheets: Number of sheets of this material, for the header.

        Returns:
            Text diagram with one box per placement.
        """
        sheet = layout.sheet
        usable = max(width - 2, 10)
        scale_x = usable / sheet.length
        # Terminal cells are roughly twice as tall as wide
        grid_height = max(int(usable * (sheet.width / sheet.length) * 0.5), 10)
        scale_y = grid_height / sheet.width

        grid = [[" " for _ in range(usable)] for _ in range(grid_height)]
        for placement in layout.placements:
            self._draw_piece_ascii(grid, placement, scale_x, scale_y)

        lines = [
            f"Sheet {layout.sheet_index + 1} of {total_sheets} - "
            f"{layout.material.label} - {layout.utilization * 100:.1f}% utilization",
            "+" + "-" * usable + "+",
        ]
        lines.extend("|" + "".join(row) + "|" for row in grid)
        lines.append("+" + "-" * usable + "+")
        return "\n".join(lines)

    @staticmethod
    def _draw_piece_ascii(
        grid: list[list[str]],
        placement: Placement,
        scale_x: float,
        scale_y: float,
    ) -> None:
        rows = len(grid)
        cols = len(grid[0]) if grid else 0

        def clamp(value: float, upper: int) -> int:
            return max(0, min(int(value), upper - 1))

        x1 = clamp(placement.x * scale_x, cols)
        y1 = clamp(placement.y * scale_y, rows)
        x2 = clamp(placement.right_edge * scale_x, cols)
        y2 = clamp(placement.bottom_edge * scale_y, rows)

        for x in range(x1, x2 + 1):
            grid[y1][x] = "-"
            grid[y2][x] = "-"
        for y in range(y1, y2 + 1):
            grid[y][x1] = "|"
            grid[y][x2] = "|"
        for y, x in ((y1, x1), (y1, x2), (y2, x1), (y2, x2)):
            grid[y][x] = "+"

        dims = f"{placement.panel.width:g}x{placement.panel.height:g}"
        if placement.rotated:
            dims += "R"
        room = x2 - x1 - 1
        for row, text in ((y1 + 1, placement.label), (y1 + 2, dims)):
            if row >= y2 or room <= 0:
                continue
            for i, char in enumerate(text[:room]):
                grid[row][x1 + 1 + i] = char

    def render_all_ascii(self, result: NestingLike, width: int = 80) -> str:
        """Generate ASCII diagrams for every sheet followed by a summary."""
        materials = self._materials(result)
        if not any(n.layouts for n in materials):
            return "No sheets to display."

        parts: list[str] = []
        for nesting in materials:
            for layout in nesting.layouts:
                parts.append(self.render_ascii(layout, width, nesting.sheet_count))
                parts.append("")

        total = sum(n.sheet_count for n in materials)
        parts.append("=" * width)
        parts.append(f"SUMMARY: {_plural(total, 'sheet')}")
        for nesting in materials:
            parts.append(
                f"  {nesting.material.label}: {_plural(nesting.sheet_count, 'sheet')}"
            )
        return "\n".join(parts)

    def render_waste_summary(self, result: NestingLike) -> str:
        """Text summary of sheet usage and waste per material and sheet."""
        lines: list[str] = ["CUT OPTIMIZATION SUMMARY", "=" * 40]
        materials = self._materials(result)
        lines.append(f"Total Sheets: {sum(n.sheet_count for n in materials)}")
        lines.append("")
        lines.append("Sheets by Material:")
        for nesting in materials:
            lines.append(
                f"  {nesting.material.label}: "
                f"{_plural(nesting.sheet_count, 'sheet')}, "
                f"{nesting.utilization * 100:.1f}% utilization"
            )

        lines.append("")
        lines.append("Per-Sheet Details:")
        for nesting in materials:
            for layout in nesting.layouts:
                lines.append(
                    f"  {nesting.material.label} sheet {layout.sheet_index + 1}: "
                    f"{_plural(layout.piece_count, 'piece')}, "
                    f"{layout.utilization * 100:.1f}% utilization, "
                    f"{layout.waste / 1e6:.2f} m2 waste"
                )
        return "\n".join(lines)

    @staticmethod
    def _materials(result: NestingLike) -> tuple[MaterialNesting, ...]:
        if isinstance(result, MaterialNesting):
            return (result,)
        return result.materials

