"""
Deterministic peripheral colors.

Colors come from a seeded generator so that the same peripheral list always
produces the same diagram, which keeps rendered diagrams diffable between
runs. The generator is Python's ``random.Random`` (Mersenne Twister) seeded
with an explicit integer; for each peripheral, in the order given, three
integers are drawn with ``randint(0, 10000)`` and divided by 10000 to give the
red, green and blue components.
"""

import random
from dataclasses import dataclass
from typing import Dict, Iterable

DEFAULT_SEED = 12345
RESOLUTION = 10000


@dataclass(frozen=True)
class Color:
    """RGB color with components in [0, 1] at 1/10000 resolution."""

    r: float
    g: float
    b: float

    def tint(self, percent: int) -> "Color":
        """Mix with white, keeping ``percent`` of this color (as xcolor's ``c!30``)."""
        keep = percent / 100
        return Color(
            r=self.r * keep + (1 - keep),
            g=self.g * keep + (1 - keep),
            b=self.b * keep + (1 - keep),
        )

    def to_rgb255(self):
        return tuple(round(component * 255) for component in (self.r, self.g, self.b))

    def __str__(self) -> str:
        return f"{self.r:.4f},{self.g:.4f},{self.b:.4f}"


class ColorAssigner:
    """
    Assigns a color to each peripheral from a fixed seed.

    A fresh generator is created for every call to ``assign``, so repeated
    calls with the same ordered list return identical tables.

    Example:
        >>> assigner = ColorAssigner(seed=1)
        >>> assigner.assign(["SPI", "UART"]) == assigner.assign(["SPI", "UART"])
        True
    """

    def __init__(self, seed: int = DEFAULT_SEED):
        self.seed = seed

    def assign(self, peripherals: Iterable[str]) -> Dict[str, Color]:
        """
        Build the color table for peripherals in canonical order.

        Args:
            peripherals: Peripheral names, already in canonical sorted order.

        Returns:
            Mapping from peripheral name to Color, in the same order.
        """
        rng = random.Random(self.seed)
        table: Dict[str, Color] = {}
        for peripheral in peripherals:
            r, g, b = (rng.randint(0, RESOLUTION) / RESOLUTION for _ in range(3))
            table[peripheral] = Color(r, g, b)
        return table
