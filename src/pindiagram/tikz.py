"""
TikZ markup primitives.

Handles text escaping, number formatting, and the append-only document
builder that collects markup fragments and yields the final bytes.

Only one escape is ever applied to display text: ``_`` becomes ``\\_``.
Other characters that are special to LaTeX pass through unchanged, so names
containing them must be avoided by the data source.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

ENCODING = "utf-8"


class Section(Enum):
    """Emission sections, in the only order a document may use them."""

    PREAMBLE = 1
    PACKAGE = 2
    LEGEND = 3
    LABELS = 4
    CLOSING = 5


def latex_escape(text: str) -> str:
    """
    Escape display text for the typesetter.

    Not idempotent: escaping ``PA\\_1`` again gives ``PA\\\\_1``.

    >>> latex_escape("PA_1")
    'PA\\\\_1'
    """
    return text.replace("_", "\\_")


def format_number(value: float) -> str:
    """Format a coordinate; integral values print without a decimal point."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class Fragment:
    """
    An immutable piece of markup.

    Attributes:
        text: Markup text, ending with a newline.
        section: Emission section the fragment belongs to.
        defines: Names (coordinates or nodes) this fragment introduces.
        references: Names this fragment positions itself against.
        source: What produced the fragment, for debug traces.
    """

    text: str
    section: Section
    defines: Tuple[str, ...] = ()
    references: Tuple[str, ...] = ()
    source: str = ""


class DocumentBuilder:
    """
    Append-only collection of fragments.

    Sections must be appended in non-decreasing order. ``build`` joins the
    fragments into one immutable byte string.
    """

    def __init__(self):
        self._fragments: List[Fragment] = []

    def append(self, fragment: Fragment) -> None:
        last = self._fragments[-1].section if self._fragments else None
        if last is not None and fragment.section.value < last.value:
            raise ValueError(
                f"{fragment.section.name} fragment appended after {last.name}"
            )
        self._fragments.append(fragment)

    def extend(self, fragments) -> None:
        for fragment in fragments:
            self.append(fragment)

    @property
    def fragments(self) -> Tuple[Fragment, ...]:
        return tuple(self._fragments)

    def __len__(self) -> int:
        return len(self._fragments)

    def text(self) -> str:
        return "".join(fragment.text for fragment in self._fragments)

    def build(self) -> bytes:
        return self.text().encode(ENCODING)


def node(
    options: List[str],
    text: str,
    name: str = "",
    at: Optional[Tuple[float, float]] = None,
) -> str:
    """
    Format a ``\\node`` command.

    Args:
        options: Node options, joined with ", ".
        text: Already-escaped node text.
        name: Optional node name.
        at: Optional absolute position.

    Returns:
        The command followed by a newline.
    """
    parts = [f"\\node[{', '.join(options)}]"]
    if at is not None:
        parts.append(f"at ({format_number(at[0])}, {format_number(at[1])})")
    if name:
        parts.append(f"({name})")
    return " ".join(parts) + f" {{{text}}};\n"


def color_name(peripheral: str) -> str:
    """Name of the color defined for a peripheral."""
    return f"color{peripheral}"


def fill(peripheral: str, tint: int) -> str:
    """Node option filling with a tint of the peripheral's color."""
    return f"fill={color_name(peripheral)}!{tint}"


def pin_coordinate_name(position: int) -> str:
    """Name of the outline coordinate of a pin."""
    return f"P{position}"


def label_name(position: int, index: int) -> str:
    """Name of the index-th label of a pin's chain (0 is the pin name)."""
    return f"p{position}label{index}"
