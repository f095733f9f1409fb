from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .app import run_auto, run_gui, run_headless
from .exceptions import CatalogError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    configure_logging(default_level=level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="soul-reaper",
        description="Soul Reaper - incremental soul harvesting game",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--gui", action="store_true", help="Force GUI mode (Arcade)")
    mode.add_argument("--headless", action="store_true", help="Force headless mode (automatic player)")
    parser.add_argument("--max-steps", type=int, default=None, help="Stop headless play after N updates")
    parser.add_argument("--tick-rate", type=float, default=30.0, help="Headless updates per second (0 = unthrottled)")
    parser.add_argument("--clicks-per-second", type=float, default=5.0, help="Automatic reaps per second in headless mode")
    parser.add_argument("--no-auto-buy", dest="auto_buy", action="store_false", help="Headless player never buys upgrades")
    parser.add_argument("--catalog", type=Path, default=None, help="YAML catalog of upgrades and achievements")
    parser.add_argument("--settings", type=Path, default=None, help="YAML settings overlay")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    kwargs = dict(
        max_steps=args.max_steps,
        tick_rate=args.tick_rate,
        clicks_per_second=args.clicks_per_second,
        auto_buy=args.auto_buy,
        catalog_path=args.catalog,
        settings_path=args.settings,
    )
    try:
        # Honor CLI over env vars
        if args.gui:
            os.environ["SOUL_REAPER_GUI"] = "1"
            os.environ.pop("SOUL_REAPER_HEADLESS", None)
            return run_gui(**kwargs)

        if args.headless:
            os.environ["SOUL_REAPER_HEADLESS"] = "1"
            os.environ.pop("SOUL_REAPER_GUI", None)
            return run_headless(**kwargs)

        return run_auto(**kwargs)
    except CatalogError as e:
        logger.error("Invalid configuration: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
