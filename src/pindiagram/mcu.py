"""
MCU database.

A database is a directory holding one JSON file per model, named
``<MODEL>.json``:

    {
        "package": "LQFP48",
        "pins": [
            {"position": 1, "name": "VBAT", "type": "Power"},
            {"position": 12, "name": "PA2", "type": "I/O",
             "functions": ["USART2_TX", "TIM2_CH3"]}
        ]
    }

Pins keep the order of the file, and each pin keeps the order of its
functions.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Union

from .errors import PinDiagramError, UnknownMcu
from .models import Mcu, Pin
from .sides import parse_pin_position

logger = logging.getLogger(__name__)

DATABASE_ENV = "PINDIAGRAM_DATABASE"
DEFAULT_DATABASE = "mcu"
SUFFIX = ".json"


def default_database_path() -> Path:
    """``$PINDIAGRAM_DATABASE`` if set, else ``./mcu``."""
    return Path(os.environ.get(DATABASE_ENV, DEFAULT_DATABASE))


def parse_pin(data: Dict[str, Any]) -> Pin:
    """Build a Pin from one entry of a model file's ``pins`` list."""
    if "position" not in data or "name" not in data:
        raise PinDiagramError(f"Pin entry needs 'position' and 'name': {data!r}")
    return Pin(
        position=parse_pin_position(data["position"]),
        name=str(data["name"]),
        functions=tuple(str(f) for f in data.get("functions", ())),
        type=str(data.get("type", "")),
    )


def parse_mcu(model: str, data: Dict[str, Any]) -> Mcu:
    """Build an Mcu from the decoded contents of a model file."""
    if "package" not in data:
        raise PinDiagramError(f"{model}: missing 'package'")
    return Mcu(
        model=model,
        package=str(data["package"]),
        pins=[parse_pin(pin) for pin in data.get("pins", [])],
    )


class McuDatabase:
    """
    Read-only access to a directory of MCU model files.

    Example:
        >>> database = McuDatabase("mcu")
        >>> database.models_matching("STM32F4")
        ['STM32F401CCUx', 'STM32F429ZITx']
        >>> mcu = database.load("STM32F429ZITx")
    """

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else default_database_path()

    def list(self) -> List[str]:
        """All model names, sorted."""
        if not self.path.is_dir():
            logger.warning("MCU database %s does not exist", self.path)
            return []
        return sorted(p.stem for p in self.path.glob(f"*{SUFFIX}") if p.is_file())

    def models_matching(self, pattern: str) -> List[str]:
        """Model names containing ``pattern``, sorted."""
        return [model for model in self.list() if pattern in model]

    def load(self, model: str) -> Mcu:
        """
        Load one model.

        Raises:
            UnknownMcu: If the name is not a plain model name or there is
                no file for the model.
            InvalidPinPosition: If a pin position is not an integer.
            PinDiagramError: If the file is not valid JSON or lacks fields.
        """
        if not model or model in (".", "..") or "/" in model or "\\" in model:
            raise UnknownMcu(f"Invalid MCU model name {model!r}")
        path = self.path / f"{model}{SUFFIX}"
        if not path.is_file():
            raise UnknownMcu(f"Could not find MCU {model!r} in {self.path}")

        logger.debug("Loading %s", path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise PinDiagramError(f"{path}: invalid JSON: {e}") from e

        mcu = parse_mcu(model, data)
        logger.debug("%s: package %s, %d pins", model, mcu.package, len(mcu.pins))
        return mcu
