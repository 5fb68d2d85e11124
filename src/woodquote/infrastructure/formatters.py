"""Output formatters and exporters for estimates."""

from __future__ import annotations

import json
from typing import Any, Sequence

from woodquote.contracts.dtos import EstimateResult
from woodquote.domain.services import (
    FinishSummary,
    PurchaseRequirements,
    mm2_to_sqft,
)
from woodquote.domain.value_objects import Panel
from woodquote.infrastructure.bin_packing import NestingResult, Placement


class CutListFormatter:
    """Formats panel lists for display."""

    def format(self, panels: Sequence[Panel]) -> str:
        """Format panels as a fixed-width table with total area."""
        if not panels:
            return "No panels in cut list."

        lines = [
            "CUT LIST",
            "=" * 70,
            f"{'Panel':<22} {'Kind':<14} {'W (mm)':>8} {'H (mm)':>8} "
            f"{'Qty':>4} {'Sq ft':>9}",
            "-" * 70,
        ]

        total_area = 0.0
        for panel in panels:
            area = mm2_to_sqft(panel.total_area)
            total_area += area
            lines.append(
                f"{panel.id[:22]:<22} {panel.kind.value:<14} {panel.width:>8g} "
                f"{panel.height:>8g} {panel.quantity:>4} {area:>9.2f}"
            )

        lines.append("-" * 70)
        lines.append(f"{'TOTAL':<60} {total_area:>9.2f}")
        return "\n".join(lines)


class PurchaseSummaryFormatter:
    """Formats priced purchase requirements as a text report.

    Attributes:
        currency: Symbol printed before amounts.
    """

    def __init__(self, currency: str = "Rs.") -> None:
        self.currency = currency

    def format(self, purchase: PurchaseRequirements) -> str:
        lines = ["PURCHASE SUMMARY", "=" * 70]

        if purchase.boards:
            lines.append("")
            lines.append("BOARDS")
            lines.append(
                f"  {'Material':<28} {'Sq ft':>9} {'Sheets':>7} {'Util':>7} "
                f"{'Cost':>14}"
            )
            for board in purchase.boards:
                lines.append(
                    f"  {board.material.label:<28} {board.total_area:>9.2f} "
                    f"{board.sheet_count:>7} {board.utilization_percent:>6.1f}% "
                    f"{self._money(board.cost):>14}"
                )

        if purchase.laminates:
            lines.append("")
            lines.append("LAMINATES")
            for group in purchase.laminates:
                label = f"{group.finish} ({group.face.value})"
                lines.append(
                    f"  {label:<28} {group.area:>9.2f} {group.sheet_count:>7} "
                    f"{'':>7} {self._money(group.cost):>14}"
                )

        if purchase.edge_banding:
            lines.append("")
            lines.append("EDGE BANDING")
            for band in purchase.edge_banding:
                lines.append(
                    f"  {band.band_class:<10} {band.length_required:>8.2f} m "
                    f"-> {band.rolls_needed} roll{'s' if band.rolls_needed != 1 else ''}"
                    f"{self._money(band.cost):>30}"
                )

        if purchase.hardware:
            lines.append("")
            lines.append("HARDWARE")
            for item in purchase.hardware:
                lines.append(
                    f"  {item.name[:36]:<36} {item.quantity:>6} x "
                    f"{item.rate:>8.2f} {self._money(item.cost):>14}"
                )
                if item.notes:
                    lines.append(f"    ({item.notes})")

        if purchase.adhesive is not None:
            lines.append("")
            lines.append("ADHESIVE")
            lines.append(
                f"  {'Bottles':<36} {purchase.adhesive.bottle_count:>6} x "
                f"{purchase.adhesive.rate:>8.2f} "
                f"{self._money(purchase.adhesive.cost):>14}"
            )

        lines.append("")
        lines.append("-" * 70)
        lines.append(f"{'TOTAL':<54} {self._money(purchase.total_cost):>14}")
        return "\n".join(lines)

    def _money(self, amount: float) -> str:
        return f"{self.currency} {amount:,.2f}"


class EstimateJsonExporter:
    """Exports an estimate as a JSON document."""

    def __init__(self, include_placements: bool = True) -> None:
        self._include_placements = include_placements

    def export(self, result: EstimateResult) -> str:
        return json.dumps(self.to_dict(result), indent=2)

    def to_dict(self, result: EstimateResult) -> dict[str, Any]:
        return {
            "panels": [self._format_panel(p) for p in result.panels],
            "nesting": self._format_nesting(result.nesting),
            "finishes": self._format_finishes(result.finishes),
            "purchase": self._format_purchase(result.purchase),
            "total_cost": result.total_cost,
        }

    @staticmethod
    def _format_panel(panel: Panel) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": panel.id,
            "kind": panel.kind.value,
            "width": panel.width,
            "height": panel.height,
            "quantity": panel.quantity,
            "material": panel.material.key,
        }
        if panel.banded_edges:
            data["banded_edges"] = [edge.value for edge in panel.banded_edges]
            data["band_class"] = panel.band_class
        if panel.grain.value != "none":
            data["grain"] = panel.grain.value
        return data

    def _format_nesting(self, nesting: NestingResult) -> list[dict[str, Any]]:
        materials: list[dict[str, Any]] = []
        for material_nesting in nesting.materials:
            sheets: list[dict[str, Any]] = []
            for layout in material_nesting.layouts:
                sheet: dict[str, Any] = {
                    "index": layout.sheet_index,
                    "utilization": layout.utilization,
                    "waste_mm2": layout.waste,
                    "piece_count": layout.piece_count,
                }
                if self._include_placements:
                    sheet["placements"] = [
                        self._format_placement(p) for p in layout.placements
                    ]
                sheets.append(sheet)
            materials.append(
                {
                    "material": material_nesting.material.key,
                    "sheet": {
                        "length": material_nesting.sheet.length,
                        "width": material_nesting.sheet.width,
                        "kerf": material_nesting.sheet.kerf,
                        "margin": material_nesting.sheet.margin,
                    },
                    "sheet_count": material_nesting.sheet_count,
                    "utilization": material_nesting.utilization,
                    "sheets": sheets,
                }
            )
        return materials

    @staticmethod
    def _format_placement(placement: Placement) -> dict[str, Any]:
        return {
            "panel_id": placement.panel_id,
            "copy": placement.copy_index,
            "x": placement.x,
            "y": placement.y,
            "width": placement.placed_width,
            "height": placement.placed_height,
            "rotated": placement.rotated,
        }

    @staticmethod
    def _format_finishes(finishes: FinishSummary) -> dict[str, Any]:
        data: dict[str, Any] = {
            "outer_finish": finishes.outer_finish.value,
            "is_pre_laminated": finishes.is_pre_laminated,
            "outer_area_sqft": finishes.outer_area,
            "inner_area_sqft": finishes.inner_area,
            "adhesive_bottles": finishes.adhesive_bottles,
        }
        if finishes.degenerate_panel_ids:
            data["degenerate_panels"] = list(finishes.degenerate_panel_ids)
        return data

    @staticmethod
    def _format_purchase(purchase: PurchaseRequirements) -> dict[str, Any]:
        return {
            "boards": [
                {
                    "material": g.material.key,
                    "area_sqft": g.total_area,
                    "sheets": g.sheet_count,
                    "utilization_percent": g.utilization_percent,
                    "rate": g.rate,
                    "cost": g.cost,
                }
                for g in purchase.boards
            ],
            "laminates": [
                {
                    "face": g.face.value,
                    "finish": g.finish,
                    "area_sqft": g.area,
                    "sheets": g.sheet_count,
                    "rate": g.rate,
                    "cost": g.cost,
                }
                for g in purchase.laminates
            ],
            "edge_banding": [
                {
                    "band_class": g.band_class,
                    "length_m": g.length_required,
                    "rolls": g.rolls_needed,
                    "rate": g.rate,
                    "cost": g.cost,
                }
                for g in purchase.edge_banding
            ],
            "hardware": [
                {
                    "name": line.name,
                    "quantity": line.quantity,
                    "rate": line.rate,
                    "cost": line.cost,
                }
                for line in purchase.hardware
            ],
            "adhesive": (
                {
                    "bottles": purchase.adhesive.bottle_count,
                    "rate": purchase.adhesive.rate,
                    "cost": purchase.adhesive.cost,
                }
                if purchase.adhesive is not None
                else None
            ),
            "total_cost": purchase.total_cost,
        }
