"""
Pin label chains.

Every pin gets a stack of labels walking away from the package edge: first
the pin name, then one filled label per alternate function in the order the
data source declares them. Each label is positioned against the previous one,
so the chain grows outward without overlapping itself.

Functions are never grouped or sorted by peripheral; a pin carrying
USART1_TX, TIM1_CH2, USART1_CK shows exactly that sequence.
"""

from dataclasses import dataclass, field
from typing import AbstractSet, List, Tuple

from .models import Pin
from .package import PackageGeometry
from .sides import Side, side_for_position
from .tikz import (
    Fragment,
    Section,
    color_name,
    fill,
    format_number,
    label_name,
    latex_escape,
    node,
    pin_coordinate_name,
)

FUNCTION_SEPARATOR = "_"


def split_function(
    function: str, separator: str = FUNCTION_SEPARATOR
) -> Tuple[str, str]:
    """
    Split an alternate function into (peripheral, signal).

    Only the first separator counts, so "FMC_SDNE_1" splits into
    ("FMC", "SDNE_1"). A function without a separator names both the
    peripheral and the signal.

    >>> split_function("USART1_TX")
    ('USART1', 'TX')
    """
    peripheral, found, signal = function.partition(separator)
    if not found:
        return function, function
    return peripheral, signal


@dataclass(frozen=True)
class ChainLink:
    """
    One function label in a chain.

    Attributes:
        peripheral: Peripheral name, selects the fill color.
        signal: Signal name, the label text before escaping.
        anchor: Name of the label this one is positioned against.
        name: Name of this label.
    """

    peripheral: str
    signal: str
    anchor: str
    name: str


@dataclass(frozen=True)
class LabelChain:
    """The pin-name label of a pin and the function labels stacked beyond it."""

    pin: Pin
    side: Side
    root: str
    links: Tuple[ChainLink, ...] = field(default_factory=tuple)


class PinLabelRenderer:
    """
    Builds and renders label chains for the pins of a package.

    Args:
        geometry: Package geometry, used to classify pins to sides.
        peripherals: Active peripheral set; functions of other peripherals
            are skipped.
        separator: Peripheral/signal separator in function strings.
        label_distance: Gap between consecutive labels, in layout units.
        fill_tint: Percentage of the peripheral color used as label fill.
    """

    def __init__(
        self,
        geometry: PackageGeometry,
        peripherals: AbstractSet[str],
        separator: str = FUNCTION_SEPARATOR,
        label_distance: float = 0.1,
        fill_tint: int = 30,
    ):
        self.geometry = geometry
        self.peripherals = peripherals
        self.separator = separator
        self.label_distance = label_distance
        self.fill_tint = fill_tint

    def chain_for(self, pin: Pin) -> LabelChain:
        """Build the label chain of a pin."""
        side = side_for_position(
            pin.position, self.geometry.pins_per_side, self.geometry.pin_count
        )
        root = label_name(pin.position, 0)
        links: List[ChainLink] = []
        previous = root
        for function in pin.functions:
            peripheral, signal = split_function(function, self.separator)
            if peripheral not in self.peripherals:
                continue
            name = label_name(pin.position, len(links) + 1)
            links.append(ChainLink(peripheral, signal, previous, name))
            previous = name
        return LabelChain(pin=pin, side=side, root=root, links=tuple(links))

    def render(self, chain: LabelChain) -> List[Fragment]:
        """Emit the pin-name label followed by each function label."""
        side = chain.side
        gap = format_number(self.label_distance)
        distance = f"{side.outside_position} = {gap} of"
        rotate = f"rotate={side.rotation}"
        pin_point = pin_coordinate_name(chain.pin.position)

        fragments = [
            Fragment(
                text=node(
                    [f"{distance} {pin_point}", rotate],
                    latex_escape(chain.pin.name),
                    name=chain.root,
                ),
                section=Section.LABELS,
                defines=(chain.root,),
                references=(pin_point,),
                source="PinLabelRenderer.render:pin_name",
            )
        ]
        for link in chain.links:
            fragments.append(
                Fragment(
                    text=node(
                        [
                            "draw",
                            fill(link.peripheral, self.fill_tint),
                            f"{distance} {link.anchor}",
                            rotate,
                        ],
                        latex_escape(link.signal),
                        name=link.name,
                    ),
                    section=Section.LABELS,
                    defines=(link.name,),
                    references=(color_name(link.peripheral), link.anchor),
                    source="PinLabelRenderer.render:function",
                )
            )
        return fragments
