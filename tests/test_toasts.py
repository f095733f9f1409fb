import pytest

from soul_reaper.core.events import AchievementUnlocked, EventBus
from soul_reaper.engine.game_state import GameState
from soul_reaper.ui.toasts import AchievementToasts


def test_toasts_show_one_message_at_a_time():
    bus = EventBus()
    toasts = AchievementToasts(duration=2.5)
    toasts.attach(bus)

    bus.emit(AchievementUnlocked(name="First Soul"))
    bus.emit(AchievementUnlocked(name="Novice Harvester"))
    assert toasts.current == "First Soul Unlocked!"
    assert toasts.pending == 1

    toasts.update(2.0)
    assert toasts.current == "First Soul Unlocked!"
    toasts.update(0.5)
    assert toasts.current == "Novice Harvester Unlocked!"
    toasts.update(2.5)
    assert toasts.current is None
    assert toasts.pending == 0


def test_toasts_follow_game_unlocks():
    game = GameState()
    toasts = AchievementToasts()
    toasts.attach(game.event_bus)
    game.wallet.collect(99, reason="grant")
    game.click()
    # First Soul and Novice Harvester unlock in the same pass, in catalog order
    assert toasts.current == "First Soul Unlocked!"
    assert toasts.pending == 1

    toasts.detach()
    game.wallet.collect(5000, reason="grant")
    game.click()
    assert toasts.pending == 1


def test_invalid_duration():
    with pytest.raises(ValueError):
        AchievementToasts(duration=0)
