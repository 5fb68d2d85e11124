"""Board materials and surface finishes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BoardType(str, Enum):
    """Types of sheet board a panel can be cut from."""

    PLYWOOD = "plywood"
    MDF = "mdf"
    HDF = "hdf"
    PARTICLE_BOARD = "particle_board"
    PRE_LAM_PARTICLE_BOARD = "pre_lam_particle_board"
    SOLID_WOOD = "solid_wood"

    @property
    def is_pre_laminated(self) -> bool:
        """True for boards that arrive with a factory-applied surface."""
        return self is BoardType.PRE_LAM_PARTICLE_BOARD


class FinishType(str, Enum):
    """Surface treatment applied to the outer faces of panels.

    Inner faces are always laminated; the finish type only changes what the
    outer faces receive and therefore which rate prices them.
    """

    LAMINATE = "laminate"
    ACRYLIC = "acrylic"
    VENEER = "veneer"
    PAINT = "paint"
    MEMBRANE = "membrane"
    NATURAL = "natural"

    @property
    def outer_rate_key(self) -> str:
        """Name of the laminate price key used for outer area."""
        return _OUTER_RATE_KEYS[self]


_OUTER_RATE_KEYS: dict[FinishType, str] = {
    FinishType.LAMINATE: "outer_laminate",
    FinishType.ACRYLIC: "acrylic_finish",
    FinishType.VENEER: "veneer_finish",
    FinishType.PAINT: "paint_finish",
    FinishType.MEMBRANE: "membrane_foil",
    # Natural boards are still sealed with the standard outer laminate.
    FinishType.NATURAL: "outer_laminate",
}

INNER_LAMINATE_KEY = "inner_laminate"


@dataclass(frozen=True)
class MaterialClass:
    """Board type qualified by thickness, e.g. 18mm plywood.

    Panels of different material classes never share a stock sheet.

    Attributes:
        thickness: Board thickness in millimetres.
        board_type: Kind of board.
    """

    thickness: float
    board_type: BoardType = BoardType.PLYWOOD

    def __post_init__(self) -> None:
        if not self.thickness > 0:
            raise ValueError("Material thickness must be positive")

    @property
    def key(self) -> str:
        """Price-table key such as ``18mm_plywood``."""
        return f"{self.thickness:g}mm_{self.board_type.value}"

    @property
    def label(self) -> str:
        """Human readable name such as ``18mm plywood``."""
        return f"{self.thickness:g}mm {self.board_type.value.replace('_', ' ')}"

    @property
    def is_pre_laminated(self) -> bool:
        return self.board_type.is_pre_laminated

    @classmethod
    def parse(cls, text: str) -> "MaterialClass":
        """Parse ``"18mm plywood"`` or ``"18mm_plywood"`` into a material class.

        Raises:
            ValueError: If the text has no thickness or an unknown board type.
        """
        normalized = text.strip().lower().replace(" ", "_")
        thickness_part, sep, board_part = normalized.partition("mm_")
        if not sep:
            raise ValueError(f"Cannot parse material class: {text!r}")
        try:
            thickness = float(thickness_part)
        except ValueError:
            raise ValueError(f"Cannot parse material thickness: {text!r}") from None
        return cls(thickness=thickness, board_type=BoardType(board_part))

    @classmethod
    def standard_18mm(cls) -> "MaterialClass":
        """Standard 18mm plywood carcass board."""
        return cls(thickness=18, board_type=BoardType.PLYWOOD)

    @classmethod
    def standard_6mm(cls) -> "MaterialClass":
        """Standard 6mm plywood (typically used for backs)."""
        return cls(thickness=6, board_type=BoardType.PLYWOOD)

    def __str__(self) -> str:
        return self.label
