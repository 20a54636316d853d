import os
import tempfile
from pathlib import Path

import pytest

# Keep the config module away from the package directory during tests
_CFG_DIR = Path(tempfile.mkdtemp(prefix="binbreak-test-"))
os.environ.setdefault("BINBREAK_CONFIG", str(_CFG_DIR / "config.json"))
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from binbreak.challenge import ChallengeGenerator  # noqa: E402
from binbreak.engine import SessionEngine  # noqa: E402
from binbreak.highscores import HighScoreStore, MemoryBackend  # noqa: E402
from binbreak.scoring import ScoringPolicy  # noqa: E402


class FakeClock:
    def __init__(self, t: float = 100.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> float:
        self.t += seconds
        return self.t


class ScriptedGenerator(ChallengeGenerator):
    """Hands out queued targets first, then falls back to random draws."""

    def __init__(self, targets=(), seed: int = 7) -> None:
        import random

        super().__init__(random.Random(seed))
        self.targets = list(targets)

    def _pick_target(self, mode):
        if self.targets:
            return self.targets.pop(0)
        return super()._pick_target(mode)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def policy() -> ScoringPolicy:
    return ScoringPolicy()


@pytest.fixture()
def make_engine(policy):
    def _make(targets=(), lives: int = 3) -> SessionEngine:
        return SessionEngine(ScriptedGenerator(targets), policy, lives=lives)

    return _make


@pytest.fixture()
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture()
def store(backend) -> HighScoreStore:
    s = HighScoreStore(backend)
    s.load()
    return s
