"""
Side classification for pins of a quad package.

Pins are assigned to sides in contiguous blocks of pins_per_side, in
ascending pin order: bottom, right, top, left. Each side has a fixed text
rotation and a pair of positioning directions, one pointing into the package
(used for pin numbers) and one pointing out of it (used for label chains).
The outside direction of a side is always the inside direction of the
opposite side.
"""

from enum import IntEnum
from typing import Tuple, Union

from .errors import InvalidPinPosition, InvalidSide


class Side(IntEnum):
    """One of the four sides of a quad package, in outline order."""

    BOTTOM = 0
    RIGHT = 1
    TOP = 2
    LEFT = 3

    @classmethod
    def from_index(cls, index: int) -> "Side":
        """Convert a side index, failing loudly outside 0..3."""
        try:
            return cls(index)
        except ValueError:
            raise InvalidSide(f"invalid side {index}") from None

    @property
    def opposite(self) -> "Side":
        return Side((self + 2) % 4)

    @property
    def rotation(self) -> int:
        """Text rotation in degrees."""
        return _ROTATION[self]

    @property
    def inside_position(self) -> str:
        """TikZ positioning key pointing into the package."""
        return _INSIDE_POSITION[self]

    @property
    def outside_position(self) -> str:
        """TikZ positioning key pointing away from the package."""
        return self.opposite.inside_position

    @property
    def inside_anchor(self) -> str:
        """Node anchor facing into the package."""
        return _INSIDE_ANCHOR[self]

    @property
    def outside_anchor(self) -> str:
        return self.opposite.inside_anchor

    @property
    def outward(self) -> Tuple[int, int]:
        """Unit vector pointing away from the package, in layout coordinates."""
        return _OUTWARD[self]


_ROTATION = {
    Side.BOTTOM: 90,
    Side.RIGHT: 0,
    Side.TOP: 90,
    Side.LEFT: 0,
}

_INSIDE_POSITION = {
    Side.BOTTOM: "right",
    Side.RIGHT: "left",
    Side.TOP: "left",
    Side.LEFT: "right",
}

_INSIDE_ANCHOR = {
    Side.BOTTOM: "west",
    Side.RIGHT: "east",
    Side.TOP: "east",
    Side.LEFT: "west",
}

_OUTWARD = {
    Side.BOTTOM: (0, -1),
    Side.RIGHT: (1, 0),
    Side.TOP: (0, 1),
    Side.LEFT: (-1, 0),
}


def parse_pin_position(value: Union[int, str]) -> int:
    """
    Parse a pin position from provider data.

    Args:
        value: Integer or decimal string (e.g. 7 or "7").

    Returns:
        The position as an integer.

    Raises:
        InvalidPinPosition: If the value is not an integer.
    """
    if isinstance(value, bool):
        raise InvalidPinPosition(f"invalid pin position {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text.isascii() or not text.isdigit():
        raise InvalidPinPosition(f"invalid pin position {value!r}")
    return int(text)


def side_for_position(position: int, pins_per_side: int, pin_count: int) -> Side:
    """
    Classify a pin to a side of the package.

    Args:
        position: 1-based pin number.
        pins_per_side: Number of pins on each side.
        pin_count: Total number of pins on the package.

    Returns:
        The Side holding the pin.

    Raises:
        InvalidPinPosition: If the position is outside 1..pin_count.
    """
    if not 1 <= position <= pin_count:
        raise InvalidPinPosition(
            f"Pin position {position} is outside 1..{pin_count}"
        )
    return Side.from_index((position - 1) // pins_per_side)
