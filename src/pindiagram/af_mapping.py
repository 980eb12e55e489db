"""
Alternate function mapping across MCU families.

GPIO assignments are identical across all models of a family, apart from
pins missing on smaller packages, so models are grouped by family: the first
nine characters of the model name (e.g. "STM32F429").
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Set

from .mcu import McuDatabase

logger = logging.getLogger(__name__)

FAMILY_LENGTH = 9


def family_of(model: str) -> str:
    """
    Family of a model name.

    >>> family_of("STM32F429ZITx")
    'STM32F429'
    """
    return model[:FAMILY_LENGTH]


@dataclass
class AlternateFunctionMapping:
    """
    Which pins carry which alternate functions, per family.

    Attributes:
        families: Families of all scanned models.
        functions: Alternate function -> GPIO name -> families carrying it.
    """

    families: Set[str] = field(default_factory=set)
    functions: Dict[str, Dict[str, Set[str]]] = field(default_factory=dict)

    def add(self, family: str, gpio: str, function: str) -> None:
        gpios = self.functions.setdefault(function, {})
        gpios.setdefault(gpio, set()).add(family)

    def format(self) -> str:
        """Families, then functions, then per function its GPIOs, all sorted."""
        lines = ["MCU families matching the specified pattern:"]
        lines.extend(f"  {family}" for family in sorted(self.families))
        lines.append("")
        lines.append("Alternate functions matching the specified pattern:")
        lines.extend(f"  {function}" for function in sorted(self.functions))
        lines.append("")
        for function in sorted(self.functions):
            lines.append(f"{function}:")
            gpios = self.functions[function]
            for gpio in sorted(gpios):
                lines.append(f"  {gpio} ({', '.join(sorted(gpios[gpio]))})")
        return "\n".join(lines) + "\n"


def map_alternate_functions(
    database: McuDatabase, af_pattern: str, mcu_pattern: str
) -> AlternateFunctionMapping:
    """
    Collect alternate functions containing ``af_pattern`` over all models
    containing ``mcu_pattern``.

    For example, ``af_pattern="ART"`` matches every UART and USART function.
    """
    mapping = AlternateFunctionMapping()
    models = database.models_matching(mcu_pattern)
    logger.info("Scanning %d models", len(models))

    for model in models:
        family = family_of(model)
        mapping.families.add(family)
        mcu = database.load(model)
        for pin in mcu.pins:
            for function in pin.functions:
                if af_pattern in function:
                    mapping.add(family, pin.name, function)

    return mapping
