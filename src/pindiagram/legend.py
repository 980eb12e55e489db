"""
Legend layout.

The legend sits inside the package outline and maps each peripheral to its
color. Entries fill a column-major grid: the first ``rows`` peripherals go
down column 0, the next ``rows`` down column 1, and so on. The row count is
derived from the package size so the legend fits inside the outline.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from .colors import Color
from .errors import PackageTooSmallForLegend
from .tikz import Fragment, Section, color_name, fill, latex_escape, node

LEGEND_X = 3
COLUMN_WIDTH = 5
ROW_HEIGHT = 1.5


@dataclass(frozen=True)
class LegendCell:
    """A placed legend entry, in layout units."""

    peripheral: str
    color: Color
    column: int
    row: int
    x: float
    y: float


class LegendLayout:
    """
    Places legend entries for a package.

    Args:
        pins_per_side: Pins on each side of the package.
        fallback_single_column: When the package is too small for the row
            formula, place all entries in one column instead of raising.
    """

    def __init__(self, pins_per_side: int, fallback_single_column: bool = False):
        self.pins_per_side = pins_per_side
        self.fallback_single_column = fallback_single_column

    @property
    def formula_rows(self) -> int:
        """Rows that fit inside the outline: floor((pins_per_side - 4) * 2 / 3)."""
        return (self.pins_per_side - 4) * 2 // 3

    def rows_for(self, count: int) -> int:
        """
        Rows to use for ``count`` entries.

        Raises:
            PackageTooSmallForLegend: If the formula gives fewer than one row
                and the single-column fallback is disabled.
        """
        rows = self.formula_rows
        if rows >= 1:
            return rows
        if self.fallback_single_column:
            return max(1, count)
        raise PackageTooSmallForLegend(
            f"A package with {self.pins_per_side} pins per side leaves no room "
            f"for legend rows"
        )

    def place(
        self, peripherals: Sequence[str], colors: Dict[str, Color]
    ) -> List[LegendCell]:
        """
        Place peripherals, in canonical order, on the legend grid.

        Args:
            peripherals: Peripheral names in canonical sorted order.
            colors: Color table from ColorAssigner.

        Returns:
            One LegendCell per peripheral.
        """
        rows = self.rows_for(len(peripherals))
        top = self.pins_per_side - 2
        cells = []
        for index, peripheral in enumerate(peripherals):
            column, row = divmod(index, rows)
            cells.append(
                LegendCell(
                    peripheral=peripheral,
                    color=colors[peripheral],
                    column=column,
                    row=row,
                    x=LEGEND_X + column * COLUMN_WIDTH,
                    y=top - row * ROW_HEIGHT,
                )
            )
        return cells

    @staticmethod
    def render(cells: Sequence[LegendCell], fill_tint: int = 30) -> List[Fragment]:
        """Emit one filled, west-anchored node per legend cell."""
        return [
            Fragment(
                text=node(
                    ["draw", fill(cell.peripheral, fill_tint), "anchor=west"],
                    latex_escape(cell.peripheral),
                    at=(cell.x, cell.y),
                ),
                section=Section.LEGEND,
                references=(color_name(cell.peripheral),),
                source="LegendLayout.render",
            )
            for cell in cells
        ]
