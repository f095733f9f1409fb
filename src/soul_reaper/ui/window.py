from __future__ import annotations

import logging
from typing import Optional

try:
    import arcade  # type: ignore
except Exception:  # pragma: no cover - optional for test envs
    arcade = None

from ..engine.game_state import GameState
from ..engine.scheduler import PassiveScheduler
from ..engine.timers import ArcadeTimerBackend
from ..settings import Settings
from .hud import HUDPresenter, achievement_line, format_hud, upgrade_line
from .toasts import AchievementToasts

logger = logging.getLogger(__name__)

ROW_HEIGHT = 28
MARGIN = 24

HELP_TEXT = (
    "Click the reaping field (or press SPACE) to collect souls.\n"
    "Press 1-9 or click an upgrade to buy it; prices grow with every purchase.\n"
    "Soul Minions reap on their own, faster with every minion you own.\n"
    "Press H to close this help, ESC to quit."
)

_KEY_DIGITS = ("KEY_1", "KEY_2", "KEY_3", "KEY_4", "KEY_5", "KEY_6", "KEY_7", "KEY_8", "KEY_9")


class SoulReaperWindow:
    """Arcade view over a GameState.

    Only created when Arcade is available. All game rules live in GameState;
    this class renders snapshots and forwards input.
    """

    def __init__(self, game: GameState, settings: Optional[Settings] = None) -> None:
        if arcade is None:
            raise RuntimeError("Arcade package is not installed; cannot create window")
        self.settings = settings or Settings()
        win = self.settings.window
        self._window = arcade.Window(win.width, win.height, title=win.title)
        self._window.on_draw = self.on_draw
        self._window.on_update = self.on_update
        self._window.on_mouse_press = self.on_mouse_press
        self._window.on_key_press = self.on_key_press
        self._window.on_close = self.close
        self._window.background_color = arcade.color.BLACK
        self.game = game
        self.scheduler = PassiveScheduler(game, ArcadeTimerBackend(), self.settings.scheduler)
        self.toasts = AchievementToasts(self.settings.ui.toast_seconds)
        self.toasts.attach(game.event_bus)
        self.show_help = False
        self._souls_label = ""
        self.hud = HUDPresenter(game.event_bus, self)
        self.hud.start(game.souls)
        logger.info("Arcade window initialized (%dx%d)", win.width, win.height)

    @property
    def width(self) -> int:
        return self._window.width

    @property
    def height(self) -> int:
        return self._window.height

    def run(self) -> None:
        arcade.run()

    # HudSink
    def update_souls(self, amount: int) -> None:
        self._souls_label = f"{amount} souls"

    def _upgrade_row_top(self, index: int) -> float:
        return self.height - MARGIN - 40 - index * ROW_HEIGHT

    def on_draw(self):
        self._window.clear()
        snap = self.game.snapshot()
        half = self.width / 2

        # Reaping field
        arcade.draw_lrbt_rectangle_filled(MARGIN, half - MARGIN, MARGIN, self.height - MARGIN, (28, 18, 36))
        arcade.draw_text(
            self._souls_label,
            half / 2,
            self.height / 2,
            arcade.color.GHOST_WHITE,
            font_size=28,
            anchor_x="center",
        )
        arcade.draw_text("REAP", half / 2, self.height / 2 - 48, arcade.color.ASH_GREY, font_size=16, anchor_x="center")
        for i, line in enumerate(format_hud(snap)):
            arcade.draw_text(line, MARGIN * 2, MARGIN * 2 + i * 22, arcade.color.ASH_GREY, font_size=13)

        # Upgrades
        arcade.draw_text("Upgrades", half, self.height - MARGIN - 12, arcade.color.GHOST_WHITE, font_size=16)
        for i, view in enumerate(snap.upgrades):
            color = arcade.color.DARK_SPRING_GREEN if view.affordable else arcade.color.GRAY
            hotkey = i + 1 if i < len(_KEY_DIGITS) else None
            arcade.draw_text(upgrade_line(view, hotkey), half, self._upgrade_row_top(i) - 18, color, font_size=12)

        # Achievements
        top = self._upgrade_row_top(len(snap.upgrades)) - MARGIN
        arcade.draw_text("Achievements", half, top, arcade.color.GHOST_WHITE, font_size=16)
        for i, view in enumerate(snap.achievements):
            color = arcade.color.GOLD if view.unlocked else arcade.color.GRAY
            arcade.draw_text(achievement_line(view), half, top - (i + 1) * 22, color, font_size=12)

        if self.toasts.current:
            arcade.draw_text(
                self.toasts.current,
                self.width / 2,
                self.height - MARGIN * 2,
                arcade.color.GOLD,
                font_size=20,
                anchor_x="center",
            )

        if self.show_help:
            arcade.draw_lrbt_rectangle_filled(0, self.width, 0, self.height, (0, 0, 0, 220))
            arcade.draw_text(
                HELP_TEXT,
                MARGIN * 2,
                self.height / 2 + 60,
                arcade.color.GHOST_WHITE,
                font_size=16,
                multiline=True,
                width=int(self.width - MARGIN * 4),
            )

    def on_update(self, delta_time: float):
        self.toasts.update(delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        if self.show_help or button != arcade.MOUSE_BUTTON_LEFT:
            return
        if x < self.width / 2:
            self.game.click()
            return
        for i, upgrade in enumerate(self.game.upgrades):
            top = self._upgrade_row_top(i)
            if top - ROW_HEIGHT < y <= top:
                self.game.purchase(upgrade.id)
                return

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == arcade.key.ESCAPE:
            self.close()
            return
        if symbol == arcade.key.H:
            self.show_help = not self.show_help
            return
        if self.show_help:
            return
        if symbol == arcade.key.SPACE:
            self.game.click()
            return
        upgrades = self.game.upgrades
        for i, name in enumerate(_KEY_DIGITS[: len(upgrades)]):
            if symbol == getattr(arcade.key, name):
                self.game.purchase(upgrades[i].id)
                return

    def close(self) -> None:
        self.scheduler.close()
        self.toasts.detach()
        self.hud.stop()
        self._window.close()
