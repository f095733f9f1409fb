import pytest

from soul_reaper.engine.game_state import GameState
from soul_reaper.engine.scheduler import CadenceConfig, PassiveScheduler, SchedulerState, interval_for
from soul_reaper.engine.timers import ManualClock
from soul_reaper.exceptions import CatalogError


@pytest.mark.parametrize("units,expected", [(1, 1000), (2, 900), (5, 600), (9, 200), (20, 200)])
def test_cadence_formula(units, expected):
    assert interval_for(units) == expected


def test_no_units_means_no_interval():
    assert interval_for(0) is None
    assert interval_for(-1) is None


def test_custom_cadence():
    cfg = CadenceConfig(base_ms=500, step_ms=50, floor_ms=300)
    assert interval_for(1, cfg) == 500
    assert interval_for(3, cfg) == 400
    assert interval_for(10, cfg) == 300


def test_invalid_cadence():
    with pytest.raises(CatalogError):
        CadenceConfig(floor_ms=0)
    with pytest.raises(CatalogError):
        CadenceConfig(base_ms=100, floor_ms=200)
    with pytest.raises(CatalogError):
        CadenceConfig(step_ms=-1)


def make_game(souls: int = 10_000):
    game = GameState()
    game.wallet.collect(souls, reason="grant")
    clock = ManualClock()
    scheduler = PassiveScheduler(game, clock)
    return game, clock, scheduler


def test_idle_until_passive_purchase():
    game, clock, scheduler = make_game()
    assert scheduler.state is SchedulerState.IDLE
    assert scheduler.interval_ms is None
    assert clock.active_timers == 0

    game.purchase("scythe")
    assert scheduler.state is SchedulerState.IDLE

    game.purchase("rift")
    assert scheduler.state is SchedulerState.RUNNING
    assert scheduler.interval_ms == 1000
    assert clock.active_timers == 1


def test_ticks_at_cadence():
    game, clock, scheduler = make_game()
    game.purchase("rift")
    souls = game.souls
    rate = game.passive_rate

    clock.advance(999)
    assert game.souls == souls
    clock.advance(1)
    assert game.souls == souls + rate
    assert scheduler.ticks_fired == 1


def test_rearm_on_each_passive_purchase_keeps_single_timer():
    game, clock, scheduler = make_game()
    for expected in (1000, 900, 800, 700):
        game.purchase("rift")
        assert scheduler.interval_ms == expected
        assert clock.active_timers == 1


def test_reconfigure_is_idempotent():
    game, clock, scheduler = make_game()
    game.purchase("rift")
    game.purchase("rift")
    for _ in range(5):
        assert scheduler.reconfigure() is SchedulerState.RUNNING
    assert clock.active_timers == 1
    assert scheduler.interval_ms == 900

    souls = game.souls
    clock.advance(1800)
    assert game.souls == souls + 2 * game.passive_rate


def test_rearm_restarts_interval():
    game, clock, scheduler = make_game()
    game.purchase("rift")
    clock.advance(600)
    game.purchase("rift")
    souls = game.souls
    # Fresh 900ms interval counted from the purchase
    clock.advance(899)
    assert game.souls == souls
    clock.advance(1)
    assert game.souls == souls + game.passive_rate


def test_stop_and_close():
    game, clock, scheduler = make_game()
    game.purchase("rift")
    scheduler.stop()
    assert scheduler.state is SchedulerState.IDLE
    assert clock.active_timers == 0

    souls = game.souls
    clock.advance(5000)
    assert game.souls == souls

    scheduler.close()
    game.purchase("rift")
    assert scheduler.state is SchedulerState.IDLE
    assert clock.active_timers == 0


def test_existing_units_arm_on_construction():
    game = GameState()
    game.wallet.collect(1000, reason="grant")
    game.purchase("rift")
    clock = ManualClock()
    scheduler = PassiveScheduler(game, clock, CadenceConfig(base_ms=250))
    assert scheduler.state is SchedulerState.RUNNING
    assert scheduler.interval_ms == 250
