# binbreak/config.py
from __future__ import annotations
import json, logging, os
from typing import Dict, Any

from pathlib import Path
PKG_DIR = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)

def _abs(path: str) -> str:
    # absolute paths are kept as given
    p = Path(path)
    return str(p) if p.is_absolute() else str((PKG_DIR / p).resolve())

PACKAGE_DIR = os.path.dirname(__file__)
CONFIG_PATH = os.environ.get("BINBREAK_CONFIG") or os.path.join(PACKAGE_DIR, "config.json")

DEFAULT_CFG: Dict[str, Any] = {
    "display": {"fullscreen": False, "fps": 60, "windowed_size": [960, 600]},
    "timing": {
        "tick_sec": 0.1,
        "base_budget": {"4": 8.0, "8": 12.0, "12": 16.0, "16": 20.0},
        "budget_step": 0.5,
        "budget_floor": 5.0,
    },
    "scoring": {"base_points": 10, "streak_bonus": 2, "speed_bonus": 5, "bonus_life_every": 5},
    "lives": 3,
    "highscores": {"path": "highscores.json"},
    "last_mode": "8",
}

def _deepcopy(obj):
    return json.loads(json.dumps(obj))

def _merge(dst: dict, src: dict) -> dict:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _merge(dst[k], v)
        else:
            dst[k] = v
    return dst

def _clamp(v, lo, hi, cast=float):
    try:
        return cast(max(lo, min(hi, cast(v))))
    except (TypeError, ValueError):
        return cast(lo)

def _sanitize_cfg(cfg: dict) -> dict:
    for section in ("display", "timing", "scoring", "highscores"):
        if not isinstance(cfg.get(section), dict):
            cfg[section] = _deepcopy(DEFAULT_CFG[section])
    t = cfg["timing"]
    t["tick_sec"]     = _clamp(t.get("tick_sec", 0.1), 0.01, 1.0)
    t["budget_step"]  = _clamp(t.get("budget_step", 0.5), 0.05, 5.0)
    user_base = t.get("base_budget")
    if not isinstance(user_base, dict):
        user_base = {}
    # only the known widths; anything else would skew the floor clamp
    base = {width: _clamp(user_base.get(width, default), 1.0, 120.0)
            for width, default in DEFAULT_CFG["timing"]["base_budget"].items()}
    t["base_budget"] = base
    t["budget_floor"] = _clamp(t.get("budget_floor", 5.0), 0.5, min(base.values()))
    s = cfg["scoring"]
    s["base_points"]      = _clamp(s.get("base_points", 10), 0, 1000, int)
    s["streak_bonus"]     = _clamp(s.get("streak_bonus", 2), 0, 1000, int)
    s["speed_bonus"]      = _clamp(s.get("speed_bonus", 5), 0, 1000, int)
    s["bonus_life_every"] = _clamp(s.get("bonus_life_every", 5), 0, 99, int)
    cfg["lives"] = _clamp(cfg["lives"], 1, 9, int)
    if "fps" in cfg["display"]:
        cfg["display"]["fps"] = _clamp(cfg["display"]["fps"], 30, 240, int)
    ws = cfg["display"].get("windowed_size", [960, 600])
    if isinstance(ws, (list, tuple)) and len(ws) == 2 and all(isinstance(x, (int, float)) for x in ws):
        w, h = max(320, min(10000, int(ws[0]))), max(240, min(10000, int(ws[1])))
        cfg["display"]["windowed_size"] = [w, h]
    else:
        cfg["display"]["windowed_size"] = [960, 600]
    cfg["last_mode"] = str(cfg.get("last_mode", "8"))

    hs = cfg.setdefault("highscores", {})
    hs["path"] = _abs(str(hs.get("path", "highscores.json")))
    cfg["config_path"] = str(Path(CONFIG_PATH).resolve())
    return cfg

def save_config(partial_cfg: dict) -> bool:
    try:
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            base = json.load(f)
        if not isinstance(base, dict): base = {}
    except FileNotFoundError:
        base = {}
    except (OSError, ValueError) as exc:
        logger.warning("config %s unreadable, rewriting: %s", CONFIG_PATH, exc)
        base = {}
    merged = _merge(base, partial_cfg)
    merged.pop("config_path", None)
    try:
        with open(CONFIG_PATH, "w", encoding="utf-8") as f:
            json.dump(merged, f, ensure_ascii=False, indent=2)
    except OSError as exc:
        logger.warning("could not save config %s: %s", CONFIG_PATH, exc)
        return False
    return True

def load_config() -> dict:
    cfg = _deepcopy(DEFAULT_CFG)
    try:
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            user = json.load(f)
        if isinstance(user, dict):
            _merge(cfg, user)
    except FileNotFoundError:
        save_config(cfg)
    except (OSError, ValueError) as exc:
        logger.warning("ignoring broken config %s: %s", CONFIG_PATH, exc)
    return _sanitize_cfg(cfg)

def persist_windowed_size(width: int, height: int) -> None:
    CFG.setdefault("display", {})["windowed_size"] = [int(width), int(height)]
    save_config({"display": {"windowed_size": CFG["display"]["windowed_size"]}})

def persist_last_mode(key: str) -> None:
    CFG["last_mode"] = str(key)
    save_config({"last_mode": CFG["last_mode"]})

CFG = load_config()
