from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .catalog import load_catalog
from .core.events import AchievementUnlocked
from .engine.game_state import GameState
from .engine.loop import GameConfig, GameEngine
from .settings import Settings
from .ui.hud import achievement_line, format_hud

logger = logging.getLogger(__name__)


def _arcade_available() -> bool:
    try:
        import arcade  # noqa: F401
        return True
    except Exception:
        return False


def run_gui(catalog_path: Optional[Path] = None, settings_path: Optional[Path] = None, **headless_kwargs) -> int:
    """Run the game in an Arcade window if available, otherwise fall back to headless.

    Returns:
        Process exit code (0 on success).
    """
    if not _arcade_available():
        logger.warning("Arcade not available; falling back to headless mode")
        return run_headless(catalog_path=catalog_path, settings_path=settings_path, **headless_kwargs)

    from .ui.window import SoulReaperWindow

    settings = Settings.load(settings_path)
    game = GameState(load_catalog(catalog_path))
    window = SoulReaperWindow(game, settings)
    try:
        logger.info("Launching Arcade window")
        window.run()
        logger.info("Arcade loop finished")
        return 0
    except Exception:
        logger.exception("Unhandled exception in GUI loop; exiting with code 1")
        return 1


def _announce(evt: AchievementUnlocked) -> None:
    print(f"{evt.name} Unlocked!")


def run_headless(
    max_steps: Optional[int] = 120,
    tick_rate: float = 30.0,
    clicks_per_second: float = 5.0,
    auto_buy: bool = True,
    catalog_path: Optional[Path] = None,
    settings_path: Optional[Path] = None,
) -> int:
    """Run an automatic player in a headless console loop.

    Args:
        max_steps: Stop after N updates; defaults to 120.
        tick_rate: Target updates per second for headless mode.
        clicks_per_second: Automatic reaps per second.
        auto_buy: Buy the cheapest affordable upgrade each update.
    """
    if max_steps is None:
        # Safety in CI/headless: always bound the loop
        max_steps = 120

    print("Soul Reaper (headless)")
    print("Press Ctrl+C to exit. Running...\n")

    settings = Settings.load(settings_path)
    engine = GameEngine(
        GameConfig(
            tick_rate=tick_rate,
            max_steps=max_steps,
            clicks_per_second=clicks_per_second,
            auto_buy=auto_buy,
        ),
        catalog=load_catalog(catalog_path),
        cadence=settings.scheduler,
    )
    engine.game.event_bus.subscribe(AchievementUnlocked, _announce)
    try:
        engine.run()
    except KeyboardInterrupt:
        engine.stop()
        print("Interrupted by user")
        return 130
    except Exception:
        logger.exception("Unhandled exception in headless loop")
        return 1

    snap = engine.game.snapshot()
    for line in format_hud(snap):
        print(line)
    for ach in snap.achievements:
        print(achievement_line(ach))
    print(f"Loop complete (steps={engine.step})")
    return 0


def run_auto(**kwargs) -> int:
    """Run GUI if available and not explicitly overridden, else headless.

    Honors environment overrides:
      - SOUL_REAPER_HEADLESS=1 forces headless.
      - SOUL_REAPER_GUI=1 forces GUI (if arcade importable).
    """
    if os.getenv("SOUL_REAPER_HEADLESS") == "1":
        return run_headless(**kwargs)

    if os.getenv("SOUL_REAPER_GUI") == "1":
        return run_gui(**kwargs)

    return run_gui(**kwargs)
