"""
Data models supplied by the MCU data provider.

These are read-only to the layout engine: pins are consumed in the order the
provider lists them and their function lists are never reordered.

Classes:
    Pin: A physical pin with its name and alternate functions.
    Mcu: A microcontroller model with its package identifier and pins.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class Pin:
    """
    A physical pin of a microcontroller package.

    Attributes:
        position: 1-based pin number on the package.
        name: Pin name as printed in the datasheet (e.g. "PA9").
        functions: Alternate functions, each "PERIPHERAL_SIGNAL", in
            declaration order.
        type: Optional pin type from the data source (e.g. "I/O", "Power").
    """

    position: int
    name: str
    functions: Tuple[str, ...] = ()
    type: str = ""


@dataclass
class Mcu:
    """
    A microcontroller model.

    Attributes:
        model: Model name (e.g. "STM32F429ZI").
        package: Package identifier (e.g. "LQFP144").
        pins: Pins in provider order.
    """

    model: str
    package: str
    pins: List[Pin] = field(default_factory=list)
