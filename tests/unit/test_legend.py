"""Tests for the legend layout."""

import pytest

from pindiagram.colors import ColorAssigner
from pindiagram.errors import PackageTooSmallForLegend
from pindiagram.legend import LegendLayout
from pindiagram.tikz import Section


def _place(pins_per_side, peripherals, **kwargs):
    colors = ColorAssigner().assign(peripherals)
    return LegendLayout(pins_per_side, **kwargs).place(peripherals, colors)


class TestLegendRows:
    """Tests for the legend row formula."""

    def test_formula(self):
        """rows = floor((pins_per_side - 4) * 2 / 3)."""
        assert LegendLayout(25).formula_rows == 14
        assert LegendLayout(12).formula_rows == 5
        assert LegendLayout(36).formula_rows == 21
        assert LegendLayout(6).formula_rows == 1

    def test_too_small_raises(self):
        """Packages leaving no legend row fail by default."""
        for pins_per_side in (1, 4, 5):
            with pytest.raises(PackageTooSmallForLegend):
                LegendLayout(pins_per_side).rows_for(3)

    def test_fallback_single_column(self):
        """The fallback stacks all entries in one column."""
        layout = LegendLayout(1, fallback_single_column=True)
        assert layout.rows_for(2) == 2
        assert layout.rows_for(0) == 1

    def test_fallback_unused_when_formula_fits(self):
        """The fallback only applies when the formula gives no rows."""
        layout = LegendLayout(25, fallback_single_column=True)
        assert layout.rows_for(40) == 14


class TestLegendPlacement:
    """Tests for LegendLayout.place."""

    def test_column_major(self):
        """Entry k lands at column k // rows, row k % rows."""
        peripherals = ["ADC1", "CAN1", "I2C1", "SPI1", "TIM1"]
        cells = _place(7, peripherals)
        rows = LegendLayout(7).formula_rows
        assert rows == 2
        for k, cell in enumerate(cells):
            assert cell.peripheral == peripherals[k]
            assert (cell.column, cell.row) == (k // rows, k % rows)

    def test_positions(self):
        """x = 3 + column * 5 and y = (pins_per_side - 2) - row * 1.5."""
        cells = _place(7, ["ADC1", "CAN1", "I2C1", "SPI1", "TIM1"])
        assert [(cell.x, cell.y) for cell in cells] == [
            (3, 5),
            (3, 3.5),
            (8, 5),
            (8, 3.5),
            (13, 5),
        ]

    def test_colors_from_table(self):
        """Each cell carries its peripheral's color."""
        peripherals = ["I2C1", "USART1"]
        colors = ColorAssigner().assign(peripherals)
        cells = LegendLayout(12).place(peripherals, colors)
        assert [cell.color for cell in cells] == [colors["I2C1"], colors["USART1"]]

    def test_empty(self):
        """No peripherals give no cells."""
        assert _place(12, []) == []

    def test_fallback_places_single_column(self):
        """Qfp(4) with the fallback puts both entries in column 0."""
        cells = _place(1, ["SPI", "UART"], fallback_single_column=True)
        assert [(cell.column, cell.row) for cell in cells] == [(0, 0), (0, 1)]


class TestLegendRender:
    """Tests for LegendLayout.render."""

    def test_node_markup(self):
        """Entries are filled, west-anchored boxes at their position."""
        fragments = LegendLayout.render(_place(7, ["CAN1", "USB_OTG_FS"]))
        assert fragments[0].text == (
            "\\node[draw, fill=colorCAN1!30, anchor=west] at (3, 5) {CAN1};\n"
        )
        assert fragments[1].text == (
            "\\node[draw, fill=colorUSB_OTG_FS!30, anchor=west] at (3, 3.5)"
            " {USB\\_OTG\\_FS};\n"
        )

    def test_fragment_metadata(self):
        """Fragments belong to the legend and reference their color."""
        fragments = LegendLayout.render(_place(12, ["CAN1"]), fill_tint=50)
        assert fragments[0].section is Section.LEGEND
        assert fragments[0].references == ("colorCAN1",)
        assert fragments[0].defines == ()
        assert "fill=colorCAN1!50" in fragments[0].text
