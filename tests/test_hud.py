from typing import List

from soul_reaper.core.events import EventBus
from soul_reaper.economy.wallet import SoulWallet
from soul_reaper.engine.game_state import GameState
from soul_reaper.ui.hud import HUDPresenter, HudSink, achievement_line, format_hud, upgrade_line


class DummySink(HudSink):
    def __init__(self) -> None:
        self.values: List[int] = []

    def update_souls(self, amount: int) -> None:
        self.values.append(amount)


def test_hud_receives_soul_updates():
    bus = EventBus()
    wallet = SoulWallet(event_bus=bus)
    sink = DummySink()
    presenter = HUDPresenter(bus=bus, sink=sink)

    presenter.start(initial_amount=wallet.souls)

    wallet.collect(10, reason="click")
    wallet.spend(3, reason="purchase")

    # Sequence: initial push, collect, spend
    assert sink.values == [0, 10, 7]
    assert presenter.current == 7

    presenter.stop()
    wallet.collect(1, reason="click")
    assert sink.values == [0, 10, 7]


def test_format_hud_lines():
    game = GameState()
    game.wallet.collect(300, reason="grant")
    game.purchase("scythe")
    game.purchase("rift")
    lines = format_hud(game.snapshot())
    assert lines == [
        "Souls: 190",
        "Souls per click: 2",
        "Passive: 2 per tick",
        "Total upgrades: 2",
    ]


def test_upgrade_and_achievement_lines():
    game = GameState()
    snap = game.snapshot()
    assert upgrade_line(snap.upgrades[0], 1) == "[1] Rusty Scythe (Lv 0) - Cost: 10 - +1 per click"
    assert upgrade_line(snap.upgrades[3]) == "Soul Minion (Lv 0) - Cost: 100 - auto-reaps each tick"
    assert achievement_line(snap.achievements[0]) == "[ ] First Soul: Souls needed: 10"

    for _ in range(10):
        game.click()
    assert achievement_line(game.snapshot().achievements[0]) == "[x] First Soul: Souls needed: 10"
