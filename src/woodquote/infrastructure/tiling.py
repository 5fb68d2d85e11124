"""Splitting of panels that are larger than a stock sheet.

A panel that does not fit the usable (margin-trimmed) sheet area in any
allowed orientation is cut into a grid of tiles. Tiles are independent parts
for the nester; they are never reassembled, so the cut list simply carries
more, smaller pieces with exactly the same total area.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Sequence

from woodquote.domain.value_objects import Panel, PanelEdge

logger = logging.getLogger(__name__)


class OversizeTiler:
    """Splits oversize panels into sheet-sized tiles.

    Dimensions follow the nester's convention: ``usable_width`` is the usable
    extent along the sheet length (the x axis, matched against panel width)
    and ``usable_height`` the extent across it (matched against panel height).
    """

    def tile(
        self,
        panels: Sequence[Panel],
        usable_width: float,
        usable_height: float,
    ) -> list[Panel]:
        """Tile every panel that does not fit the usable area.

        Args:
            panels: Panels to check.
            usable_width: Usable sheet extent along x in millimetres.
            usable_height: Usable sheet extent along y in millimetres.

        Returns:
            Panels that fit, unchanged and in input order, with each oversize
            panel replaced in place by its tiles.

        Raises:
            ValueError: If a usable dimension is not positive.
        """
        if usable_width <= 0 or usable_height <= 0:
            raise ValueError("Usable sheet dimensions must be positive")

        result: list[Panel] = []
        for panel in panels:
            if self.fits(panel, usable_width, usable_height):
                result.append(panel)
            else:
                result.extend(self._split(panel, usable_width, usable_height))
        return result

    @staticmethod
    def fits(panel: Panel, usable_width: float, usable_height: float) -> bool:
        """Check whether a panel fits in its normal or an allowed rotated orientation."""
        if panel.width <= usable_width and panel.height <= usable_height:
            return True
        return (
            panel.can_rotate
            and panel.height <= usable_width
            and panel.width <= usable_height
        )

    def _split(
        self, panel: Panel, usable_width: float, usable_height: float
    ) -> list[Panel]:
        columns = math.ceil(panel.width / usable_width)
        rows = math.ceil(panel.height / usable_height)

        logger.info(
            "Tiling %s (%gx%g) into %dx%d pieces",
            panel.id,
            panel.width,
            panel.height,
            columns,
            rows,
        )

        tiles: list[Panel] = []
        for i in range(columns):
            tile_width = min(usable_width, panel.width - i * usable_width)
            for j in range(rows):
                tile_height = min(usable_height, panel.height - j * usable_height)
                tiles.append(
                    replace(
                        panel,
                        id=f"{panel.id}-tile{i + 1}x{j + 1}",
                        width=tile_width,
                        height=tile_height,
                        banded_edges=self._outer_edges(panel, i, j, columns, rows),
                    )
                )
        return tiles

    @staticmethod
    def _outer_edges(
        panel: Panel, column: int, row: int, columns: int, rows: int
    ) -> tuple[PanelEdge, ...]:
        """Banded edges of the original panel that lie on this tile."""
        on_perimeter = {
            PanelEdge.TOP: row == 0,
            PanelEdge.BOTTOM: row == rows - 1,
            PanelEdge.LEFT: column == 0,
            PanelEdge.RIGHT: column == columns - 1,
        }
        return tuple(edge for edge in panel.banded_edges if on_perimeter[edge])
