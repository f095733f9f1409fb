from dataclasses import dataclass
from typing import List, Optional, Protocol

from ..core.events import EventBus, SoulsChangedEvent
from ..engine.game_state import AchievementView, GameSnapshot, UpgradeView
from ..economy.upgrades import UpgradeKind


class HudSink(Protocol):
    """A UI sink that receives soul updates. This abstracts away Arcade UI."""

    def update_souls(self, amount: int) -> None:  # pragma: no cover - interface
        ...


@dataclass
class HUDPresenter:
    """Presenter that listens to SoulsChangedEvent and updates a HUD sink."""

    bus: EventBus
    sink: HudSink
    _current: int = 0

    @property
    def current(self) -> int:
        return self._current

    def start(self, initial_amount: int) -> None:
        self._current = max(0, int(initial_amount))
        self.sink.update_souls(self._current)
        self.bus.subscribe(SoulsChangedEvent, self._on_souls_changed)

    def stop(self) -> None:
        self.bus.unsubscribe(SoulsChangedEvent, self._on_souls_changed)

    def _on_souls_changed(self, evt: SoulsChangedEvent) -> None:
        self._current = evt.new_amount
        self.sink.update_souls(self._current)


def _fmt_effect(effect: float) -> str:
    return f"{effect:g}"


def format_hud(snapshot: GameSnapshot) -> List[str]:
    return [
        f"Souls: {snapshot.souls}",
        f"Souls per click: {snapshot.per_click_yield}",
        f"Passive: {snapshot.passive_rate} per tick",
        f"Total upgrades: {snapshot.total_upgrades}",
    ]


def upgrade_line(view: UpgradeView, hotkey: Optional[int] = None) -> str:
    prefix = f"[{hotkey}] " if hotkey is not None else ""
    if view.kind is UpgradeKind.PASSIVE:
        effect = "auto-reaps each tick"
    else:
        effect = f"+{_fmt_effect(view.effect)} per click"
    return f"{prefix}{view.name} (Lv {view.owned}) - Cost: {view.cost} - {effect}"


def achievement_line(view: AchievementView) -> str:
    mark = "[x]" if view.unlocked else "[ ]"
    return f"{mark} {view.name}: {view.description}"
