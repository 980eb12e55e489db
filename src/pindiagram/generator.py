"""
Main pinout diagram generator module.

Combines layout and emission to produce TikZ pinout diagrams. Emission
order is fixed:
1. Preamble and one color definition per peripheral
2. Package outline with pin coordinates, and pin numbers
3. Legend
4. Label chains, one pin at a time in provider order
5. Closing markers

Every later step only references names defined by an earlier one. The
document is checked for that before its bytes are returned, and any error
aborts the render with no output.
"""

import logging
from pathlib import Path
from typing import AbstractSet, Any, Dict, List, Optional, Tuple, Union

from .colors import DEFAULT_SEED, Color
from .debug import TracedDocument
from .labels import FUNCTION_SEPARATOR, PinLabelRenderer
from .layout import PinoutLayout, compute_layout
from .legend import LegendLayout
from .models import Mcu
from .package import PackageGeometry
from .references import ReferenceGraph
from .sides import Side
from .tikz import (
    DocumentBuilder,
    Fragment,
    Section,
    color_name,
    format_number,
    node,
    pin_coordinate_name,
)
from .tracer import RenderTrace

logger = logging.getLogger(__name__)

DOCUMENT_HEADER = r"""\documentclass[crop,tikz]{standalone}
\usepackage{pgf}
\fontsize{%(font_size)s}{%(baseline)s}\selectfont
\usetikzlibrary{calc, positioning}
"""

PICTURE_BEGIN = r"""\begin{document}
\begin{tikzpicture}[x=%(unit)s,y=%(unit)s]
"""

PICTURE_END = r"""\end{tikzpicture}
\end{document}
"""


class DiagramGenerator:
    """
    Generate TikZ pinout diagrams from MCU descriptions.

    Example:
        >>> generator = DiagramGenerator()
        >>> tex = generator.generate(mcu, peripherals={"USART1", "SPI2"})
        >>> Path("pinout.tex").write_bytes(tex)
    """

    def __init__(
        self,
        seed: int = DEFAULT_SEED,
        unit: str = "12pt",
        font_size: int = 10,
        label_distance: float = 0.1,
        fill_tint: int = 30,
        function_separator: str = FUNCTION_SEPARATOR,
        legend_fallback: bool = True,
    ):
        """
        Initialize the diagram generator.

        Args:
            seed: Seed for peripheral colors; the same seed and peripheral
                set always give the same colors
            unit: Length of one layout unit in the picture
            font_size: Document font size in points
            label_distance: Gap between a pin and its labels, in layout units
            fill_tint: Percentage of the peripheral color used for fills
            function_separator: Separator between peripheral and signal in
                alternate function names
            legend_fallback: Stack the legend in one column for packages too
                small for the legend row formula, instead of raising
                PackageTooSmallForLegend
        """
        self.seed = seed
        self.unit = unit
        self.font_size = font_size
        self.label_distance = label_distance
        self.fill_tint = fill_tint
        self.function_separator = function_separator
        self.legend_fallback = legend_fallback

        self._trace: Optional[RenderTrace] = None
        self._last_references: Optional[ReferenceGraph] = None
        self._last_fragment_count = 0

    def layout(
        self, mcu: Mcu, peripherals: Optional[AbstractSet[str]] = None
    ) -> PinoutLayout:
        """Compute the pinout layout with this generator's settings."""
        return compute_layout(
            mcu,
            shown_peripherals=peripherals,
            seed=self.seed,
            separator=self.function_separator,
            legend_fallback=self.legend_fallback,
        )

    def generate(
        self,
        mcu: Mcu,
        peripherals: Optional[AbstractSet[str]] = None,
        debug: bool = False,
    ) -> bytes:
        """
        Generate the TikZ document for an MCU.

        Args:
            mcu: MCU description from the data provider
            peripherals: Peripheral names to show; empty or None shows all
            debug: If True, record a RenderTrace (see get_trace)

        Returns:
            The complete document as UTF-8 bytes

        Raises:
            PinDiagramError: On invalid input; nothing is returned
        """
        trace = RenderTrace(model=mcu.model, package=mcu.package) if debug else None
        self._trace = trace

        layout = self.layout(mcu, peripherals)
        self._log_peripherals(layout.peripherals)

        if trace is not None:
            self._trace_layout(trace, layout)

        builder = DocumentBuilder()
        document = TracedDocument(builder, trace) if trace is not None else builder

        document.extend(self._render_preamble(layout.colors))
        document.extend(self._render_package(layout.geometry))
        document.extend(LegendLayout.render(layout.legend, self.fill_tint))

        label_renderer = PinLabelRenderer(
            layout.geometry,
            frozenset(layout.peripherals),
            separator=self.function_separator,
            label_distance=self.label_distance,
            fill_tint=self.fill_tint,
        )
        for chain in layout.chains:
            document.extend(label_renderer.render(chain))

        document.append(
            Fragment(PICTURE_END, Section.CLOSING, source="DiagramGenerator.close")
        )

        references = ReferenceGraph.from_fragments(document.fragments)
        self._last_references = references
        self._last_fragment_count = len(document)

        if trace is not None:
            trace.add_stage(
                "document",
                {
                    "fragments": len(document),
                    "names": len(references.defined_at),
                    "longest_chain": references.longest_chain(),
                },
                document.text(),
            )

        return document.build()

    def generate_with_stats(
        self, mcu: Mcu, peripherals: Optional[AbstractSet[str]] = None
    ) -> Tuple[bytes, Dict[str, Any]]:
        """
        Generate the document and return statistics about it.

        Returns:
            Tuple of (document bytes, statistics dict)
        """
        layout = self.layout(mcu, peripherals)
        document = self.generate(mcu, peripherals)
        references = self._last_references
        stats = {
            "pins": len(mcu.pins),
            "pin_count": layout.geometry.pin_count,
            "peripherals": len(layout.peripherals),
            "legend_rows": layout.legend_rows,
            "legend_columns": layout.legend_columns,
            "function_labels": layout.function_labels,
            "longest_chain": references.longest_chain(),
            "names": len(references.defined_at),
            "fragments": self._last_fragment_count,
        }
        return document, stats

    def get_trace(self) -> Optional[RenderTrace]:
        """Trace of the last generate() call, or None if debug was off."""
        return self._trace

    def save_tex(
        self,
        mcu: Mcu,
        filename: Union[str, Path],
        peripherals: Optional[AbstractSet[str]] = None,
    ) -> None:
        """
        Generate the document and write it to a file.

        The file is only written once generation has fully succeeded.
        """
        document = self.generate(mcu, peripherals)
        Path(filename).write_bytes(document)

    def save_png(
        self,
        mcu: Mcu,
        filename: Union[str, Path],
        peripherals: Optional[AbstractSet[str]] = None,
        **png_kwargs,
    ) -> str:
        """
        Render a PNG preview of the same layout.

        Args:
            mcu: MCU description
            filename: Output filename (should end in .png)
            peripherals: Peripheral names to show; empty or None shows all
            **png_kwargs: Additional parameters for PNGRenderer

        Returns:
            Path to the saved PNG file
        """
        from .png_renderer import render_to_png

        layout = self.layout(mcu, peripherals)
        png_kwargs.setdefault("label_distance", self.label_distance)
        png_kwargs.setdefault("fill_tint", self.fill_tint)
        return render_to_png(layout, str(filename), **png_kwargs)

    def _log_peripherals(self, peripherals: List[str]) -> None:
        logger.info("%d peripherals:", len(peripherals))
        for peripheral in peripherals:
            logger.info("  %s", peripheral)

    def _trace_layout(self, trace: RenderTrace, layout: PinoutLayout) -> None:
        geometry = layout.geometry
        trace.add_stage(
            "package",
            {
                "pin_count": geometry.pin_count,
                "pins_per_side": geometry.pins_per_side,
                "edge_length": geometry.edge_length,
            },
        )
        trace.add_stage("peripherals", {"peripherals": list(layout.peripherals)})
        trace.add_stage(
            "colors", {name: str(color) for name, color in layout.colors.items()}
        )
        trace.add_stage(
            "legend",
            {
                "rows": layout.legend_rows,
                "columns": layout.legend_columns,
                "cells": [
                    (cell.peripheral, cell.column, cell.row) for cell in layout.legend
                ],
            },
        )
        trace.add_stage(
            "label_chains",
            {
                "chains": len(layout.chains),
                "function_labels": layout.function_labels,
            },
        )

    def _render_preamble(self, colors: Dict[str, Color]) -> List[Fragment]:
        header = DOCUMENT_HEADER % {
            "font_size": self.font_size,
            "baseline": round(self.font_size * 1.2),
        }
        fragments = [
            Fragment(header, Section.PREAMBLE, source="DiagramGenerator.preamble")
        ]
        for peripheral, color in colors.items():
            name = color_name(peripheral)
            fragments.append(
                Fragment(
                    f"\\definecolor{{{name}}}{{rgb}}{{{color}}}\n",
                    Section.PREAMBLE,
                    defines=(name,),
                    source="DiagramGenerator.colors",
                )
            )
        fragments.append(
            Fragment(
                PICTURE_BEGIN % {"unit": self.unit},
                Section.PREAMBLE,
                source="DiagramGenerator.preamble",
            )
        )
        return fragments

    def _render_package(self, geometry: PackageGeometry) -> List[Fragment]:
        fragments = []
        per_side = geometry.pins_per_side
        for edge, (start, end) in enumerate(geometry.edges()):
            names = []
            lines = [f"\\draw[thick] ({_point(start)}) --\n"]
            for index in range(per_side):
                name = pin_coordinate_name(edge * per_side + index + 1)
                names.append(name)
                lines.append(
                    f"  coordinate[pos={format_number(geometry.pin_fraction(index))}]"
                    f" ({name})\n"
                )
            lines.append(f" ({_point(end)});\n")
            fragments.append(
                Fragment(
                    "".join(lines),
                    Section.PACKAGE,
                    defines=tuple(names),
                    source="DiagramGenerator.outline",
                )
            )

        distance = format_number(self.label_distance)
        for position in range(1, geometry.pin_count + 1):
            side = Side.from_index((position - 1) // per_side)
            point = pin_coordinate_name(position)
            fragments.append(
                Fragment(
                    node(
                        [
                            f"{side.inside_position} = {distance} of {point}",
                            f"rotate={side.rotation}",
                        ],
                        str(position),
                    ),
                    Section.PACKAGE,
                    references=(point,),
                    source="DiagramGenerator.pin_numbers",
                )
            )
        return fragments


def _point(point: Tuple[float, float]) -> str:
    return f"{format_number(point[0])}, {format_number(point[1])}"


def generate_diagram(
    mcu: Mcu, peripherals: Optional[AbstractSet[str]] = None, **kwargs
) -> bytes:
    """
    Convenience function to generate a pinout diagram.

    Args:
        mcu: MCU description
        peripherals: Peripheral names to show; empty or None shows all
        **kwargs: Additional parameters for DiagramGenerator

    Returns:
        The TikZ document as bytes
    """
    generator = DiagramGenerator(**kwargs)
    return generator.generate(mcu, peripherals)
