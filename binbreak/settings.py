# binbreak/settings.py
from __future__ import annotations
from typing import Any, Dict

from .scoring import DEFAULT_BASE_BUDGETS, ScoringPolicy

# ------------- snapshot (runtime) -------------

def make_runtime_settings(CFG: Dict[str, Any]) -> Dict[str, Any]:
    """Flat settings dict for the running game, built from the config tree."""
    timing = CFG.get("timing", {}) or {}
    scoring = CFG.get("scoring", {}) or {}
    base = timing.get("base_budget", {}) or {}
    return {
        "tick_sec":         float(timing.get("tick_sec", 0.1)),
        "budget_step":      float(timing.get("budget_step", 0.5)),
        "budget_floor":     float(timing.get("budget_floor", 5.0)),
        "base_budgets":     {int(k): float(v) for k, v in base.items()},
        "base_points":      int(scoring.get("base_points", 10)),
        "streak_bonus":     int(scoring.get("streak_bonus", 2)),
        "speed_bonus":      int(scoring.get("speed_bonus", 5)),
        "bonus_life_every": int(scoring.get("bonus_life_every", 5)),
        "lives":            int(CFG.get("lives", 3)),
        "fps":              int(CFG.get("display", {}).get("fps", 60)),
        "fullscreen":       bool(CFG.get("display", {}).get("fullscreen", False)),
        "last_mode":        str(CFG.get("last_mode", "8")),
    }

# ------------- clamp -------------

def clamp_settings(s: Dict[str, Any]) -> None:
    """Clamp ranges in place, matching _sanitize_cfg() in binbreak/config.py."""
    s["tick_sec"]    = max(0.01, min(1.0, float(s.get("tick_sec", 0.1))))
    s["budget_step"] = max(0.05, min(5.0, float(s.get("budget_step", 0.5))))
    budgets = dict(DEFAULT_BASE_BUDGETS)
    budgets.update({int(k): float(v) for k, v in (s.get("base_budgets") or {}).items()})
    s["base_budgets"] = {k: max(1.0, min(120.0, v)) for k, v in budgets.items()}
    s["budget_floor"] = max(0.5, min(min(s["base_budgets"].values()), float(s.get("budget_floor", 5.0))))
    for key, default in (("base_points", 10), ("streak_bonus", 2), ("speed_bonus", 5)):
        s[key] = max(0, min(1000, int(s.get(key, default))))
    s["bonus_life_every"] = max(0, min(99, int(s.get("bonus_life_every", 5))))
    s["lives"]            = max(1, min(9, int(s.get("lives", 3))))
    s["fps"]              = max(30, min(240, int(s.get("fps", 60))))

# ------------- policy -------------

def make_policy(settings: Dict[str, Any]) -> ScoringPolicy:
    clamp_settings(settings)
    return ScoringPolicy(
        base_points=settings["base_points"],
        streak_bonus=settings["streak_bonus"],
        speed_bonus=settings["speed_bonus"],
        budget_step=settings["budget_step"],
        budget_floor=settings["budget_floor"],
        bonus_life_every=settings["bonus_life_every"],
        base_budgets=dict(settings["base_budgets"]),
    )
