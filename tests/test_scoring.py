from __future__ import annotations

import pytest

from binbreak.enums import Segment
from binbreak.models import GameMode
from binbreak.scoring import ScoringPolicy

MODES = [GameMode(4), GameMode(8), GameMode(12), GameMode(16), GameMode(16, Segment.HIGH_NIBBLE)]


@pytest.mark.parametrize("mode", MODES, ids=lambda m: m.key)
@pytest.mark.parametrize("fraction", [0.0, 0.3, 1.0])
def test_longer_streaks_pay_more_and_speed_up(mode, fraction):
    p = ScoringPolicy()
    prev_points, prev_budget = None, None
    for streak in range(0, 60):
        points, budget = p.on_correct(mode, streak, fraction)
        assert budget >= p.floor_for(mode)
        if prev_points is not None:
            assert points >= prev_points
            assert budget <= prev_budget
        prev_points, prev_budget = points, budget


def test_budget_strictly_shrinks_until_the_floor():
    p = ScoringPolicy()
    mode = GameMode(8)
    budgets = [p.time_budget(mode, s) for s in range(30)]
    for a, b in zip(budgets, budgets[1:]):
        assert b < a or b == p.floor_for(mode)
    assert budgets[0] == 12.0
    assert budgets[-1] == 5.0


def test_speed_bonus_is_non_negative_and_rewards_time_left():
    p = ScoringPolicy()
    assert p.points(1, 0.0) == 10
    assert p.points(1, 1.0) == 15
    assert p.points(1, -3.0) == 10
    assert p.points(1, 7.0) == 15


def test_streak_curve_matches_defaults():
    p = ScoringPolicy(speed_bonus=0)
    assert [p.points(s, 0.5) for s in (1, 2, 3)] == [10, 12, 14]


def test_reset_budget_is_the_base_budget():
    p = ScoringPolicy()
    for mode in MODES:
        assert p.on_incorrect_or_timeout(mode, 12) == p.base_budget(mode)
        assert p.on_incorrect_or_timeout(mode, 12) >= p.time_budget(mode, 12)


def test_nibble_modes_use_the_nibble_budget():
    p = ScoringPolicy()
    assert p.base_budget(GameMode(16, Segment.LOW_NIBBLE)) == 8.0
    assert p.base_budget(GameMode(16)) == 20.0


def test_floor_above_a_base_budget_is_rejected():
    with pytest.raises(ValueError):
        ScoringPolicy(budget_floor=50.0)
    with pytest.raises(ValueError):
        ScoringPolicy(budget_floor=6.0, base_budgets={4: 5.0})


def test_floor_equal_to_base_keeps_the_budget_flat():
    p = ScoringPolicy(budget_floor=8.0)
    assert p.time_budget(GameMode(4), 0) == 8.0
    assert p.time_budget(GameMode(4), 10) == 8.0
    assert p.time_budget(GameMode(8), 10) == 8.0


def test_policy_is_pure():
    p = ScoringPolicy()
    mode = GameMode(8)
    first = [p.on_correct(mode, s, 0.4) for s in range(10)]
    second = [p.on_correct(mode, s, 0.4) for s in range(10)]
    assert first == second


def test_bonus_life_schedule():
    p = ScoringPolicy(bonus_life_every=5)
    assert [s for s in range(1, 16) if p.grants_life(s)] == [5, 10, 15]
    assert not ScoringPolicy(bonus_life_every=0).grants_life(5)


def test_bad_parameters_are_refused():
    with pytest.raises(ValueError):
        ScoringPolicy(budget_step=0)
    with pytest.raises(ValueError):
        ScoringPolicy(base_points=-1)
    with pytest.raises(ValueError):
        ScoringPolicy().time_budget(GameMode(4), -1)
