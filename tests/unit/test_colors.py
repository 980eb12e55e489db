"""Tests for deterministic peripheral colors."""

import random
import re

from pindiagram.colors import DEFAULT_SEED, RESOLUTION, Color, ColorAssigner


class TestColorAssigner:
    """Tests for ColorAssigner."""

    def test_deterministic_across_calls(self):
        """The same seed and list give identical tables."""
        peripherals = ["I2C1", "SPI2", "USART1"]
        first = ColorAssigner().assign(peripherals)
        second = ColorAssigner().assign(peripherals)
        assert first == second
        assert [str(c) for c in first.values()] == [str(c) for c in second.values()]

    def test_default_seed(self):
        """The default assigner uses DEFAULT_SEED."""
        assert ColorAssigner().seed == DEFAULT_SEED
        assert ColorAssigner().assign(["A"]) == ColorAssigner(DEFAULT_SEED).assign(
            ["A"]
        )

    def test_one_entry_per_peripheral(self):
        """Every peripheral gets a color, in input order."""
        table = ColorAssigner().assign(["ADC1", "CAN1", "TIM3"])
        assert list(table) == ["ADC1", "CAN1", "TIM3"]

    def test_empty(self):
        """No peripherals give an empty table."""
        assert ColorAssigner().assign([]) == {}

    def test_components_in_range_at_resolution(self):
        """Components lie in [0, 1] on the 1/10000 grid."""
        table = ColorAssigner(seed=7).assign([f"P{i}" for i in range(50)])
        for color in table.values():
            for component in (color.r, color.g, color.b):
                assert 0 <= component <= 1
                scaled = component * RESOLUTION
                assert abs(scaled - round(scaled)) < 1e-6

    def test_draw_order_prefix(self):
        """Colors depend only on position in the list."""
        short = ColorAssigner().assign(["A", "B"])
        longer = ColorAssigner().assign(["A", "B", "C"])
        assert short["A"] == longer["A"]
        assert short["B"] == longer["B"]

    def test_seed_and_draw_order_pinned(self):
        """The default table is seed 12345 drawn r, g, b per peripheral in order."""
        assert DEFAULT_SEED == 12345
        rng = random.Random(12345)
        expected = [
            tuple(rng.randint(0, 10000) / 10000 for _ in range(3)) for _ in range(3)
        ]
        table = ColorAssigner().assign(["SPI", "UART", "USART1"])
        assert [(c.r, c.g, c.b) for c in table.values()] == expected

    def test_seed_changes_colors(self):
        """Different seeds give different tables."""
        peripherals = ["I2C1", "SPI2", "USART1"]
        assert ColorAssigner(1).assign(peripherals) != ColorAssigner(2).assign(
            peripherals
        )


class TestColor:
    """Tests for Color."""

    def test_str_four_decimals(self):
        """Components print with four decimals."""
        assert str(Color(0.5, 0.1234, 1.0)) == "0.5000,0.1234,1.0000"

    def test_str_format_of_assigned_colors(self):
        """Assigned colors always print as three four-decimal values."""
        for color in ColorAssigner().assign(["A", "B", "C"]).values():
            assert re.fullmatch(r"[01]\.\d{4},[01]\.\d{4},[01]\.\d{4}", str(color))

    def test_tint(self):
        """Tinting mixes with white."""
        color = Color(0.0, 1.0, 0.5)
        assert color.tint(100) == color
        assert color.tint(0) == Color(1.0, 1.0, 1.0)
        tinted = color.tint(30)
        assert abs(tinted.r - 0.7) < 1e-9
        assert abs(tinted.g - 1.0) < 1e-9
        assert abs(tinted.b - 0.85) < 1e-9

    def test_to_rgb255(self):
        """Components scale to 0..255."""
        assert Color(1.0, 0.0, 0.2).to_rgb255() == (255, 0, 51)
