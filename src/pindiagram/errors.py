"""
Exceptions raised while building a pinout diagram.

Every error aborts the whole render. A half-emitted diagram would reference
coordinates that were never defined, so nothing is returned on failure.
"""


class PinDiagramError(Exception):
    """Base class for all pindiagram errors."""

    pass


class UnsupportedPackage(PinDiagramError):
    """Raised for unrecognized package identifiers or unimplemented variants."""

    pass


class InvalidPinCount(PinDiagramError):
    """Raised when a pin count is not a positive multiple of 4."""

    pass


class InvalidPinPosition(PinDiagramError):
    """Raised when a pin position is not an integer within the package."""

    pass


class PackageTooSmallForLegend(PinDiagramError):
    """Raised when the legend would have no rows for the package size."""

    pass


class InvalidSide(PinDiagramError, AssertionError):
    """Raised when a side index outside 0..3 reaches the side tables."""

    pass


class ForwardReferenceError(PinDiagramError):
    """Raised when emitted markup references a name not defined before it."""

    pass


class UnknownMcu(PinDiagramError, KeyError):
    """Raised when the MCU database has no entry for a model."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""
