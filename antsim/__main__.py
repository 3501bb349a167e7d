"""Entry point for ``python -m antsim``.

Headless driver: loads a save file (or generates a scenario from the
YAML config), advances it a number of ticks, logs a summary and
optionally writes the resulting save.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys

from antsim.errors import AntSimError
from antsim.persistence.document import dumps, loads
from antsim.simulation.config import SimulationConfig
from antsim.simulation.engine import SimulationEngine

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

logger = logging.getLogger("antsim")


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="antsim",
        description="antsim - headless ant foraging simulation",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=None,
        help="Path to YAML config file (default: config/default.yaml if present)",
    )
    parser.add_argument(
        "-l",
        "--load",
        type=pathlib.Path,
        default=None,
        help="Save file to start from (default: generate from config)",
    )
    parser.add_argument(
        "-t",
        "--ticks",
        type=int,
        default=100,
        help="Number of ticks to run (default: 100)",
    )
    parser.add_argument(
        "-o",
        "--save",
        type=pathlib.Path,
        default=None,
        help="Write the final state to this save file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every tick, harvest and delivery",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI args, build the engine, run it, report."""
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config_path = args.config
        if config_path is None and _DEFAULT_CONFIG.exists():
            config_path = _DEFAULT_CONFIG
        config = (
            SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
        )

        if args.load is not None:
            engine = SimulationEngine.from_document(
                loads(args.load.read_bytes()),
                config=config,
            )
        else:
            engine = SimulationEngine.from_config(config)
    except (AntSimError, OSError) as err:
        logger.error("could not start simulation: %s", err)
        return 1

    food_before = engine.board.total_food()
    engine.run(args.ticks)
    logger.info(
        "ran %d ticks: %d food collected in %d deliveries, %d in transit, "
        "%d left on the board (started with %d)",
        engine.tick,
        engine.colony.food_collected,
        engine.colony.deliveries,
        engine.colony.in_transit(),
        engine.board.total_food(),
        food_before,
    )

    if args.save is not None:
        try:
            args.save.write_text(dumps(engine.snapshot()))
        except OSError as err:
            logger.error("could not write %s: %s", args.save, err)
            return 1
        logger.info("saved state to %s", args.save)
    return 0


if __name__ == "__main__":
    sys.exit(main())
