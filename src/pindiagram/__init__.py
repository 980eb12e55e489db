"""
pindiagram - LaTeX pinout diagrams for microcontrollers

A Python library for generating TikZ pinout diagrams of QFP packages, with
color-coded alternate function labels for every pin.

Example:
    >>> from pindiagram import DiagramGenerator, McuDatabase
    >>> mcu = McuDatabase("mcu").load("STM32F429ZITx")
    >>> generator = DiagramGenerator()
    >>> tex = generator.generate(mcu, peripherals={"USART1", "SPI2"})

Debug Mode Example:
    >>> generator = DiagramGenerator()
    >>> tex = generator.generate(mcu, debug=True)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
"""

from .af_mapping import AlternateFunctionMapping, map_alternate_functions
from .colors import Color, ColorAssigner
from .debug import DocumentInspector, TracedDocument, visual_diff
from .errors import (
    ForwardReferenceError,
    InvalidPinCount,
    InvalidPinPosition,
    InvalidSide,
    PackageTooSmallForLegend,
    PinDiagramError,
    UnknownMcu,
    UnsupportedPackage,
)
from .generator import DiagramGenerator, generate_diagram
from .labels import LabelChain, PinLabelRenderer, split_function
from .layout import PinoutLayout, collect_peripherals, compute_layout
from .legend import LegendCell, LegendLayout
from .mcu import McuDatabase
from .models import Mcu, Pin
from .package import Bga, PackageGeometry, Qfp, parse_package
from .references import ReferenceGraph
from .sides import Side, parse_pin_position, side_for_position
from .tikz import DocumentBuilder, Fragment, Section, latex_escape
from .tracer import FragmentRecord, PipelineStage, RenderTrace

__version__ = "0.1.0"

__all__ = [
    # Main API
    "DiagramGenerator",
    "generate_diagram",
    # Data
    "Mcu",
    "Pin",
    "McuDatabase",
    # Package geometry
    "Qfp",
    "Bga",
    "parse_package",
    "PackageGeometry",
    "Side",
    "parse_pin_position",
    "side_for_position",
    # Layout
    "PinoutLayout",
    "compute_layout",
    "collect_peripherals",
    "Color",
    "ColorAssigner",
    "LegendLayout",
    "LegendCell",
    "PinLabelRenderer",
    "LabelChain",
    "split_function",
    # Markup
    "DocumentBuilder",
    "Fragment",
    "Section",
    "latex_escape",
    "ReferenceGraph",
    # Tools
    "AlternateFunctionMapping",
    "map_alternate_functions",
    # Errors
    "PinDiagramError",
    "UnsupportedPackage",
    "InvalidPinCount",
    "InvalidPinPosition",
    "PackageTooSmallForLegend",
    "InvalidSide",
    "ForwardReferenceError",
    "UnknownMcu",
    # Debug/Tracing (for development and debugging)
    "RenderTrace",
    "FragmentRecord",
    "PipelineStage",
    "TracedDocument",
    "DocumentInspector",
    "visual_diff",
]
