from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, NamedTuple

from .models import GameMode

# seconds per round at streak 0, keyed by the width of the guessed segment
DEFAULT_BASE_BUDGETS: Dict[int, float] = {4: 8.0, 8: 12.0, 12: 16.0, 16: 20.0}


class Award(NamedTuple):
    points: int
    next_budget: float


@dataclass(frozen=True)
class ScoringPolicy:
    """Points and countdown lengths as pure functions of streak and speed.

    ``points = base + streak_bonus * (streak - 1) + floor(speed_bonus * fraction)``
    where ``streak`` already counts the guess being scored. The time budget
    shrinks by ``budget_step`` per streak until ``budget_floor``; a miss
    resets it to the mode's base budget.
    """

    base_points: int = 10
    streak_bonus: int = 2
    speed_bonus: int = 5
    budget_step: float = 0.5
    budget_floor: float = 5.0
    bonus_life_every: int = 5
    base_budgets: Dict[int, float] = field(default_factory=lambda: dict(DEFAULT_BASE_BUDGETS))

    def __post_init__(self) -> None:
        if self.base_points < 0 or self.streak_bonus < 0 or self.speed_bonus < 0:
            raise ValueError("point parameters must be non-negative")
        if self.budget_step <= 0:
            raise ValueError("budget_step must be positive so the timer speeds up")
        if self.budget_floor <= 0:
            raise ValueError("budget_floor must be positive")
        budgets = {**DEFAULT_BASE_BUDGETS, **self.base_budgets}
        if any(v <= 0 for v in budgets.values()):
            raise ValueError("base budgets must be positive")
        shortest = min(budgets[w] for w in DEFAULT_BASE_BUDGETS)
        if self.budget_floor > shortest:
            raise ValueError(f"budget_floor {self.budget_floor} exceeds the shortest base budget {shortest}")

    def base_budget(self, mode: GameMode) -> float:
        try:
            return float(self.base_budgets[mode.segment_width])
        except KeyError:
            return float(DEFAULT_BASE_BUDGETS[mode.segment_width])

    def floor_for(self, mode: GameMode) -> float:
        return float(self.budget_floor)

    def time_budget(self, mode: GameMode, streak: int) -> float:
        _check_streak(streak)
        base = self.base_budget(mode)
        return max(self.floor_for(mode), base - self.budget_step * streak)

    def points(self, streak: int, remaining_fraction: float) -> int:
        _check_streak(streak)
        frac = max(0.0, min(1.0, float(remaining_fraction)))
        speed = int(math.floor(self.speed_bonus * frac))
        return self.base_points + self.streak_bonus * max(0, streak - 1) + speed

    def on_correct(self, mode: GameMode, streak: int, remaining_fraction: float) -> Award:
        return Award(self.points(streak, remaining_fraction), self.time_budget(mode, streak))

    def on_incorrect_or_timeout(self, mode: GameMode, streak: int) -> float:
        _check_streak(streak)
        return self.base_budget(mode)

    def grants_life(self, streak: int) -> bool:
        every = self.bonus_life_every
        return every > 0 and streak > 0 and streak % every == 0


def _check_streak(streak: int) -> None:
    if streak < 0:
        raise ValueError(f"streak must be >= 0, got {streak}")


__all__ = ["Award", "ScoringPolicy", "DEFAULT_BASE_BUDGETS"]
