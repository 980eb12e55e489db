"""
Layout module combining geometry, colors, legend and label chains.

Computes everything a renderer needs from an MCU description in one pass:
- Package geometry from the package identifier
- The active peripheral set, in canonical sorted order
- The peripheral color table
- Legend cell placement
- One label chain per pin, in provider order

The result is recomputed from scratch for every render; nothing is cached.
"""

from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Optional

from .colors import DEFAULT_SEED, Color, ColorAssigner
from .errors import InvalidPinPosition
from .labels import FUNCTION_SEPARATOR, LabelChain, PinLabelRenderer, split_function
from .legend import LegendCell, LegendLayout
from .models import Mcu, Pin
from .package import PackageGeometry


def collect_peripherals(
    pins: Iterable[Pin],
    shown: Optional[AbstractSet[str]] = None,
    separator: str = FUNCTION_SEPARATOR,
) -> List[str]:
    """
    Derive the sorted set of peripherals found on pins.

    Args:
        pins: Pins to scan.
        shown: Explicit peripheral names to restrict to. Empty or None
            means every peripheral found on any pin.
        separator: Peripheral/signal separator in function strings.

    Returns:
        Unique peripheral names in sorted order. Functions with an empty
        peripheral part ("" or "_TX") are left out.
    """
    peripherals = set()
    for pin in pins:
        for function in pin.functions:
            peripheral, _ = split_function(function, separator)
            if not peripheral:
                continue
            if shown and peripheral not in shown:
                continue
            peripherals.add(peripheral)
    return sorted(peripherals)


@dataclass
class PinoutLayout:
    """Result of the layout computation."""

    mcu: Mcu
    geometry: PackageGeometry
    peripherals: List[str] = field(default_factory=list)
    colors: Dict[str, Color] = field(default_factory=dict)
    legend: List[LegendCell] = field(default_factory=list)
    legend_rows: int = 0
    chains: List[LabelChain] = field(default_factory=list)

    @property
    def legend_columns(self) -> int:
        return max((cell.column for cell in self.legend), default=-1) + 1

    @property
    def function_labels(self) -> int:
        return sum(len(chain.links) for chain in self.chains)


def _check_positions(pins: Iterable[Pin], pin_count: int) -> None:
    seen = set()
    for pin in pins:
        if isinstance(pin.position, bool) or not isinstance(pin.position, int):
            raise InvalidPinPosition(
                f"Pin {pin.name!r} has non-integer position {pin.position!r}"
            )
        if not 1 <= pin.position <= pin_count:
            raise InvalidPinPosition(
                f"Pin {pin.name!r} position {pin.position} is outside 1..{pin_count}"
            )
        if pin.position in seen:
            raise InvalidPinPosition(
                f"Pin position {pin.position} appears more than once"
            )
        seen.add(pin.position)


def compute_layout(
    mcu: Mcu,
    shown_peripherals: Optional[AbstractSet[str]] = None,
    seed: int = DEFAULT_SEED,
    separator: str = FUNCTION_SEPARATOR,
    legend_fallback: bool = True,
) -> PinoutLayout:
    """
    Compute the full pinout layout for an MCU.

    All validation happens here, before anything is emitted.

    Args:
        mcu: MCU description from the data provider.
        shown_peripherals: Peripheral filter; empty or None shows all.
        seed: Color generator seed.
        separator: Peripheral/signal separator in function strings.
        legend_fallback: Use a single legend column for packages too small
            for the legend row formula.

    Returns:
        PinoutLayout for the MCU.

    Raises:
        UnsupportedPackage, InvalidPinCount, InvalidPinPosition,
        PackageTooSmallForLegend: On invalid input.
    """
    geometry = PackageGeometry.from_identifier(mcu.package)
    _check_positions(mcu.pins, geometry.pin_count)

    peripherals = collect_peripherals(mcu.pins, shown_peripherals, separator)
    colors = ColorAssigner(seed).assign(peripherals)

    legend_layout = LegendLayout(
        geometry.pins_per_side, fallback_single_column=legend_fallback
    )
    legend = legend_layout.place(peripherals, colors)

    renderer = PinLabelRenderer(geometry, frozenset(peripherals), separator=separator)
    chains = [renderer.chain_for(pin) for pin in mcu.pins]

    return PinoutLayout(
        mcu=mcu,
        geometry=geometry,
        peripherals=peripherals,
        colors=colors,
        legend=legend,
        legend_rows=legend_layout.rows_for(len(peripherals)),
        chains=chains,
    )
