import json
import os

from binbreak import config
from binbreak.models import GameMode
from binbreak.settings import make_policy, make_runtime_settings


def fresh():
    return config._deepcopy(config.DEFAULT_CFG)


def test_config_path_comes_from_environment():
    assert config.CONFIG_PATH == os.environ["BINBREAK_CONFIG"]
    assert os.path.exists(config.CONFIG_PATH)


def test_merge_is_deep():
    cfg = config._merge(fresh(), {"timing": {"budget_step": 1.0}, "lives": 5})
    assert cfg["timing"]["budget_step"] == 1.0
    assert cfg["timing"]["tick_sec"] == 0.1
    assert cfg["lives"] == 5


def test_sanitize_clamps_out_of_range_values():
    cfg = config._merge(fresh(), {
        "timing": {"tick_sec": 0, "budget_step": "fast", "budget_floor": 99, "base_budget": {"8": 500}},
        "scoring": {"base_points": -4},
        "lives": 42,
        "display": {"windowed_size": "huge", "fps": 5},
    })
    cfg = config._sanitize_cfg(cfg)
    t = cfg["timing"]
    assert t["tick_sec"] == 0.01
    assert t["budget_step"] == 0.05
    assert t["base_budget"]["8"] == 120.0
    assert t["budget_floor"] == 8.0  # never above the shortest base budget
    assert cfg["scoring"]["base_points"] == 0
    assert cfg["lives"] == 9
    assert cfg["display"]["windowed_size"] == [960, 600]
    assert cfg["display"]["fps"] == 30


def test_sanitize_makes_score_path_absolute():
    cfg = config._sanitize_cfg(fresh())
    assert os.path.isabs(cfg["highscores"]["path"])
    assert cfg["highscores"]["path"].endswith("highscores.json")


def test_save_config_merges_into_file():
    assert config.save_config({"last_mode": "16/hi"})
    with open(config.CONFIG_PATH, encoding="utf-8") as f:
        data = json.load(f)
    assert data["last_mode"] == "16/hi"
    assert "timing" in data
    assert "config_path" not in data


def test_policy_from_settings():
    cfg = config._sanitize_cfg(config._merge(fresh(), {
        "timing": {"budget_step": 1.0, "base_budget": {"4": 6.0}},
        "scoring": {"bonus_life_every": 0},
    }))
    settings = make_runtime_settings(cfg)
    policy = make_policy(settings)
    assert policy.budget_step == 1.0
    assert policy.base_budget(GameMode(4)) == 6.0
    assert policy.time_budget(GameMode(4), 3) == 5.0
    assert not policy.grants_life(5)
    assert settings["lives"] == 3


def test_sanitize_survives_wrong_types():
    cfg = config._merge(fresh(), {"timing": {"base_budget": []}, "scoring": "many"})
    cfg = config._sanitize_cfg(cfg)
    assert cfg["timing"]["base_budget"] == {"4": 8.0, "8": 12.0, "12": 16.0, "16": 20.0}
    assert cfg["scoring"]["base_points"] == 10


def test_sanitize_drops_unknown_widths():
    cfg = config._merge(fresh(), {"timing": {"base_budget": {"32": 2.0, "x": 1.0}}})
    cfg = config._sanitize_cfg(cfg)
    assert set(cfg["timing"]["base_budget"]) == {"4", "8", "12", "16"}
    assert cfg["timing"]["budget_floor"] == 5.0
    assert make_policy(make_runtime_settings(cfg)).base_budget(GameMode(8)) == 12.0
