"""
Debug utilities for pindiagram.

Key Components:
- TracedDocument: DocumentBuilder wrapper that logs every appended fragment
- DocumentInspector: Queries over emitted markup (nodes, colors, coordinates)
- visual_diff: Compare two rendered documents line by line

Usage:
    # TracedDocument is used internally by DiagramGenerator when debug=True.

    # For comparing a stored diagram against a fresh render:
    >>> from pindiagram.debug import visual_diff
    >>> print(visual_diff(expected_tex, actual_tex))
"""

import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from .tikz import DocumentBuilder, Fragment
from .tracer import RenderTrace


class TracedDocument:
    """
    DocumentBuilder wrapper that records all fragments to a RenderTrace.

    Example:
        >>> trace = RenderTrace()
        >>> document = TracedDocument(DocumentBuilder(), trace)
        >>> document.append(fragment)
        >>> print(trace.fragments[-1])
    """

    def __init__(self, builder: DocumentBuilder, trace: RenderTrace):
        self._builder = builder
        self._trace = trace

    def append(self, fragment: Fragment) -> None:
        self._builder.append(fragment)
        self._trace.add_fragment(
            section=fragment.section.name,
            source=fragment.source or "unknown",
            text=fragment.text,
        )

    def extend(self, fragments) -> None:
        for fragment in fragments:
            self.append(fragment)

    @property
    def fragments(self) -> Tuple[Fragment, ...]:
        return self._builder.fragments

    def __len__(self) -> int:
        return len(self._builder)

    def text(self) -> str:
        return self._builder.text()

    def build(self) -> bytes:
        return self._builder.build()


@dataclass
class NodeInfo:
    """A parsed ``\\node`` command."""

    options: List[str]
    text: str
    name: str = ""
    at: Optional[Tuple[float, float]] = None
    line: int = 0

    @property
    def is_boxed(self) -> bool:
        return "draw" in self.options

    def option(self, prefix: str) -> Optional[str]:
        """First option starting with ``prefix``, or None."""
        for option in self.options:
            if option.startswith(prefix):
                return option
        return None


@dataclass
class InspectionResult:
    """Nodes of a document split by role."""

    pin_numbers: List[NodeInfo] = field(default_factory=list)
    pin_names: List[NodeInfo] = field(default_factory=list)
    function_labels: List[NodeInfo] = field(default_factory=list)
    legend_entries: List[NodeInfo] = field(default_factory=list)


class DocumentInspector:
    """
    Queries over rendered pinout markup.

    Accepts the bytes returned by the generator or the decoded text.
    """

    NODE_PATTERN = re.compile(
        r"^\\node\[(?P<options>[^\]]*)\]"
        r"(?: at \((?P<x>[^,]+), (?P<y>[^)]+)\))?"
        r"(?: \((?P<name>[^)]+)\))?"
        r" \{(?P<text>.*)\};$"
    )
    COLOR_PATTERN = re.compile(
        r"^\\definecolor\{(?P<name>[^}]+)\}\{rgb\}"
        r"\{(?P<r>[^,]+),(?P<g>[^,]+),(?P<b>[^}]+)\}$"
    )
    COORDINATE_PATTERN = re.compile(
        r"coordinate\[pos=(?P<pos>[^\]]+)\] \((?P<name>[^)]+)\)"
    )

    def __init__(self, document: Union[str, bytes]):
        if isinstance(document, bytes):
            document = document.decode("utf-8")
        self.lines = document.splitlines()

    def nodes(self) -> List[NodeInfo]:
        """All nodes in document order."""
        result = []
        for number, line in enumerate(self.lines):
            match = self.NODE_PATTERN.match(line)
            if not match:
                continue
            at = None
            if match.group("x") is not None:
                at = (float(match.group("x")), float(match.group("y")))
            result.append(
                NodeInfo(
                    options=[o.strip() for o in match.group("options").split(",")],
                    text=match.group("text"),
                    name=match.group("name") or "",
                    at=at,
                    line=number,
                )
            )
        return result

    def find_node(self, name: str) -> Optional[NodeInfo]:
        for info in self.nodes():
            if info.name == name:
                return info
        return None

    def classify(self) -> InspectionResult:
        """Split nodes into pin numbers, pin names, function labels and legend."""
        result = InspectionResult()
        for info in self.nodes():
            if info.at is not None:
                result.legend_entries.append(info)
            elif info.is_boxed:
                result.function_labels.append(info)
            elif info.name:
                result.pin_names.append(info)
            else:
                result.pin_numbers.append(info)
        return result

    def chain(self, position: int) -> List[str]:
        """Label texts of a pin's chain, pin name first."""
        prefix = f"p{position}label"
        return [
            info.text
            for info in self.nodes()
            if info.name.startswith(prefix) and info.name[len(prefix):].isdigit()
        ]

    def color_definitions(self) -> Dict[str, Tuple[float, float, float]]:
        colors = {}
        for line in self.lines:
            match = self.COLOR_PATTERN.match(line)
            if match:
                colors[match.group("name")] = (
                    float(match.group("r")),
                    float(match.group("g")),
                    float(match.group("b")),
                )
        return colors

    def coordinates(self) -> Dict[str, float]:
        """Outline coordinate names mapped to their fractional edge position."""
        found = {}
        for line in self.lines:
            match = self.COORDINATE_PATTERN.search(line)
            if match:
                found[match.group("name")] = float(match.group("pos"))
        return found


def visual_diff(expected: str, actual: str, context_lines: int = 2) -> str:
    """
    Line-by-line diff between two rendered documents.

    Differing lines are shown with expected (E) and actual (A) versions and a
    marker row under the first differing column.

    Args:
        expected: The expected markup
        actual: The actual markup
        context_lines: Number of matching lines to show around differences

    Returns:
        A formatted string showing the differences
    """
    exp_lines = expected.split("\n")
    act_lines = actual.split("\n")
    max_lines = max(len(exp_lines), len(act_lines))

    def line_at(lines: List[str], i: int) -> str:
        return lines[i] if i < len(lines) else ""

    output: List[str] = ["=" * 60, "VISUAL DIFF", "=" * 60]

    diff_indices = [
        i
        for i in range(max_lines)
        if line_at(exp_lines, i) != line_at(act_lines, i)
    ]
    if not diff_indices:
        output.append("No differences found.")
        return "\n".join(output)

    output.append(f"Found {len(diff_indices)} differing line(s)")
    output.append("")

    shown = set()
    for i in diff_indices:
        shown.update(
            range(max(0, i - context_lines), min(max_lines, i + context_lines + 1))
        )

    previous = -2
    for i in sorted(shown):
        if i > previous + 1:
            output.append("...")
        exp_line = line_at(exp_lines, i)
        act_line = line_at(act_lines, i)
        if exp_line == act_line:
            output.append(f"{i:3d}:   {act_line}")
        else:
            output.append(f"{i:3d}: E |{exp_line}|")
            output.append(f"     A |{act_line}|")
            column = len(os.path.commonprefix([exp_line, act_line]))
            output.append(" " * (8 + column) + "^")
            output.append(f"     First difference at col {column}")
        previous = i

    return "\n".join(output)
