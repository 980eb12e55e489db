"""
Package identifiers and outline geometry.

A package identifier such as "LQFP100" parses into a package variant. Only
quad flat packages have a geometry: the outline is a square traced through
four edges (bottom, right, top, left) and each edge carries pins_per_side pins
with one unit of margin at either corner beyond the pin span.

Layout units are abstract; the TikZ output maps one unit to 12pt.
"""

import re
from dataclasses import dataclass
from typing import List, Tuple, Union

from .errors import InvalidPinCount, InvalidPinPosition, UnsupportedPackage

QFP_PREFIX = "LQFP"
BGA_PREFIXES = ("LFBGA", "TFBGA", "UFBGA", "BGA")

_PIN_COUNT = re.compile(r"[0-9]+")

Point = Tuple[float, float]


@dataclass(frozen=True)
class Qfp:
    """Quad flat package with pins spread evenly over four edges."""

    pin_count: int

    def __post_init__(self):
        if self.pin_count <= 0 or self.pin_count % 4 != 0:
            raise InvalidPinCount(
                f"QFP pin count must be a positive multiple of 4, "
                f"got {self.pin_count}"
            )

    @property
    def pins_per_side(self) -> int:
        return self.pin_count // 4


@dataclass(frozen=True)
class Bga:
    """Ball grid array package. Recognized, but no geometry is implemented."""

    pin_count: int

    def __post_init__(self):
        if self.pin_count <= 0:
            raise InvalidPinCount(
                f"BGA pin count must be positive, got {self.pin_count}"
            )


Package = Union[Qfp, Bga]


def _parse_pin_count(identifier: str, suffix: str) -> int:
    if not _PIN_COUNT.fullmatch(suffix):
        raise UnsupportedPackage(
            f"Package {identifier!r} not supported: pin count {suffix!r} "
            f"is not an integer"
        )
    return int(suffix)


def parse_package(identifier: str) -> Package:
    """
    Parse a package identifier into a package variant.

    Args:
        identifier: Package identifier from the MCU data (e.g. "LQFP144").

    Returns:
        Qfp or Bga instance.

    Raises:
        UnsupportedPackage: If the prefix is unknown or the suffix is not an
            integer.
        InvalidPinCount: If the pin count is not valid for the variant.
    """
    if identifier.startswith(QFP_PREFIX):
        suffix = identifier[len(QFP_PREFIX):]
        return Qfp(_parse_pin_count(identifier, suffix))

    for prefix in BGA_PREFIXES:
        if identifier.startswith(prefix):
            suffix = identifier[len(prefix):]
            return Bga(_parse_pin_count(identifier, suffix))

    raise UnsupportedPackage(f"Package {identifier!r} not yet supported")


class PackageGeometry:
    """
    Outline geometry of a quad flat package.

    The outline is the closed square (0,0) -> (E,0) -> (E,E) -> (0,E) -> (0,0)
    with E = pins_per_side + 3. Edge e holds pins e*pins_per_side + 1 through
    (e+1)*pins_per_side, and the i-th pin of an edge sits at fraction
    (i + 2) / E along it.

    Example:
        >>> geometry = PackageGeometry.from_identifier("LQFP100")
        >>> geometry.edge_length
        28
        >>> geometry.pin_coordinate(1)
        (2.0, 0.0)
    """

    def __init__(self, package: Package):
        if not isinstance(package, Qfp):
            raise UnsupportedPackage(
                f"{type(package).__name__} packages are not yet implemented"
            )
        self.package = package

    @classmethod
    def from_identifier(cls, identifier: str) -> "PackageGeometry":
        return cls(parse_package(identifier))

    @property
    def pin_count(self) -> int:
        return self.package.pin_count

    @property
    def pins_per_side(self) -> int:
        return self.package.pins_per_side

    @property
    def edge_length(self) -> int:
        return self.pins_per_side + 3

    @property
    def corners(self) -> List[Point]:
        """Outline corners in tracing order, starting at the origin."""
        size = self.edge_length
        return [(0, 0), (size, 0), (size, size), (0, size)]

    def edges(self) -> List[Tuple[Point, Point]]:
        """The four (start, end) edges: bottom, right, top, left."""
        corners = self.corners
        return [(corners[e], corners[(e + 1) % 4]) for e in range(4)]

    def pin_fraction(self, index: int) -> float:
        """Fractional position along an edge of the pin-within-edge index."""
        return (index + 2) / self.edge_length

    def pin_on_edge(self, position: int) -> Tuple[int, int]:
        """
        Locate a pin on the outline.

        Args:
            position: 1-based pin number.

        Returns:
            Tuple of (edge index, pin index within that edge).
        """
        if not 1 <= position <= self.pin_count:
            raise InvalidPinPosition(
                f"Pin position {position} is outside 1..{self.pin_count}"
            )
        return divmod(position - 1, self.pins_per_side)

    def pin_coordinate(self, position: int) -> Point:
        """Absolute layout coordinate of a pin on the outline."""
        edge, index = self.pin_on_edge(position)
        (x0, y0), (x1, y1) = self.edges()[edge]
        # Multiply before dividing so whole-unit positions stay exact.
        offset, size = index + 2, self.edge_length
        return (
            x0 + (x1 - x0) * offset / size,
            y0 + (y1 - y0) * offset / size,
        )
