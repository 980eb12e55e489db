"""
Command line entry points.

    pindiagram STM32F429ZITx -p USART1 -p SPI2 -o pinout.tex
    pindiagram-af-mapping ART STM32F4
"""

import argparse
import logging
import sys
from typing import List, Optional

from .af_mapping import map_alternate_functions
from .colors import DEFAULT_SEED
from .errors import PinDiagramError, UnknownMcu
from .generator import DiagramGenerator
from .mcu import DATABASE_ENV, McuDatabase

logger = logging.getLogger(__name__)

EXIT_UNKNOWN_MCU = 1
EXIT_ERROR = 2


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )


def _add_database_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--database",
        default=None,
        help=f"Directory of MCU model files (default: ${DATABASE_ENV}, else ./mcu)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pindiagram",
        description="Generate LaTeX/TikZ pinout diagrams for microcontrollers.",
    )
    parser.add_argument("model", help='Model of the MCU (for example "STM32F429ZITx")')
    parser.add_argument(
        "-o",
        "--output",
        help="Output path; if not specified, the TeX code is written to stdout",
    )
    parser.add_argument(
        "-p",
        "--peripheral",
        action="append",
        default=[],
        help="Peripheral to show (repeatable); all peripherals if none is given",
    )
    parser.add_argument("--png", help="Also write a PNG preview to this path")
    parser.add_argument(
        "--seed", type=int, default=DEFAULT_SEED, help="Seed for peripheral colors"
    )
    parser.add_argument(
        "--strict-legend",
        action="store_true",
        help="Fail on packages too small for the legend row formula",
    )
    _add_database_argument(parser)
    return parser


def build_af_mapping_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pindiagram-af-mapping",
        description="List alternate function mappings for groups of MCUs.",
    )
    parser.add_argument(
        "af_pattern",
        help='Peripheral or AF pattern ("ART" matches all UART and USART AFs)',
    )
    parser.add_argument(
        "mcu_pattern", help='MCU pattern ("STM32F4" matches all F4 MCUs)'
    )
    _add_database_argument(parser)
    return parser


def _print_known_models(database: McuDatabase) -> None:
    print("Could not find the specified MCU. The following MCUs are supported:")
    for model in database.list():
        print(f"  {model}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of ``pindiagram``. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    database = McuDatabase(args.database)
    logger.info("Loading MCU info...")
    try:
        mcu = database.load(args.model)
    except UnknownMcu:
        _print_known_models(database)
        return EXIT_UNKNOWN_MCU
    except PinDiagramError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR
    logger.info("Package: %s", mcu.package)

    generator = DiagramGenerator(seed=args.seed, legend_fallback=not args.strict_legend)
    peripherals = set(args.peripheral)
    try:
        document = generator.generate(mcu, peripherals)
        if args.output:
            with open(args.output, "wb") as f:
                f.write(document)
        else:
            sys.stdout.buffer.write(document)
            sys.stdout.flush()
        if args.png:
            generator.save_png(mcu, args.png, peripherals)
    except (PinDiagramError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR
    return 0


def af_mapping_main(argv: Optional[List[str]] = None) -> int:
    """Entry point of ``pindiagram-af-mapping``."""
    args = build_af_mapping_parser().parse_args(argv)
    _setup_logging(args.verbose)

    logger.info("Loading MCU info...")
    try:
        mapping = map_alternate_functions(
            McuDatabase(args.database), args.af_pattern, args.mcu_pattern
        )
    except PinDiagramError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    sys.stdout.write(mapping.format())
    return 0


if __name__ == "__main__":
    sys.exit(main())
