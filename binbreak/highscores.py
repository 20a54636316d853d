from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Protocol

from .errors import PersistenceError
from .models import GameMode, SessionResult

logger = logging.getLogger(__name__)


class ScoreBackend(Protocol):
    def read_all(self) -> Dict[str, int]: ...

    def write_all(self, scores: Mapping[str, int]) -> None: ...


# ---- Backends ----

class JsonFileBackend:
    """Scores as a flat ``{"<mode key>": best}`` JSON object on disk."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def read_all(self) -> Dict[str, int]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError, RecursionError) as exc:
            raise PersistenceError(f"cannot read high scores: {exc}", path=str(self.path)) from exc
        if not isinstance(raw, dict):
            raise PersistenceError("high score file is not a JSON object", path=str(self.path))
        out: Dict[str, int] = {}
        for k, v in raw.items():
            if isinstance(v, bool) or not isinstance(v, int) or v < 0:
                logger.warning("ignoring malformed high score %r=%r in %s", k, v, self.path)
                continue
            out[str(k)] = v
        return out

    def write_all(self, scores: Mapping[str, int]) -> None:
        data = json.dumps(dict(scores), indent=2, sort_keys=True).encode("utf-8")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=self.path.name, dir=self.path.parent)
        except OSError as exc:
            raise PersistenceError(f"cannot write high scores: {exc}", path=str(self.path)) from exc
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise PersistenceError(f"cannot write high scores: {exc}", path=str(self.path)) from exc
        finally:
            if os.path.exists(tmp_name):
                try:
                    os.remove(tmp_name)
                except OSError:
                    logger.debug("could not remove temp file %s", tmp_name, exc_info=True)


class MemoryBackend:
    def __init__(self, scores: Optional[Mapping[str, int]] = None) -> None:
        self.scores: Dict[str, int] = dict(scores or {})
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    def read_all(self) -> Dict[str, int]:
        if self.fail_reads:
            raise PersistenceError("memory backend read failure")
        return dict(self.scores)

    def write_all(self, scores: Mapping[str, int]) -> None:
        if self.fail_writes:
            raise PersistenceError("memory backend write failure")
        self.scores = dict(scores)
        self.writes += 1


# ---- Store ----

@dataclass(frozen=True)
class HighScoreEntry:
    mode: GameMode
    best_score: int


@dataclass(frozen=True)
class RecordOutcome:
    is_new_record: bool
    previous_best: int
    error: Optional[PersistenceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class HighScoreStore:
    """Per-mode best scores, loaded once and written through on new records."""

    def __init__(self, backend: ScoreBackend) -> None:
        self.backend = backend
        self._entries: Dict[GameMode, HighScoreEntry] = {}
        # keys this version cannot parse; kept so they survive a write
        self._foreign: Dict[str, int] = {}

    def load(self) -> Mapping[GameMode, HighScoreEntry]:
        self._entries.clear()
        self._foreign.clear()
        try:
            raw = self.backend.read_all()
        except PersistenceError as exc:
            logger.warning("high scores unavailable, starting empty: %s", exc)
            raw = {}
        for key, best in raw.items():
            mode = GameMode.from_key(key)
            if mode is None:
                self._foreign[key] = int(best)
                continue
            entry = self._entries.get(mode)
            if entry is None or best > entry.best_score:
                self._entries[mode] = HighScoreEntry(mode, int(best))
        logger.debug("loaded %d high scores", len(self._entries))
        return self.table()

    def table(self) -> Mapping[GameMode, HighScoreEntry]:
        return MappingProxyType(dict(self._entries))

    def best(self, mode: GameMode) -> int:
        entry = self._entries.get(mode)
        return entry.best_score if entry else 0

    def record_result(self, result: SessionResult) -> RecordOutcome:
        previous = self.best(result.mode)
        if result.final_score <= previous:
            return RecordOutcome(is_new_record=False, previous_best=previous)

        payload = dict(self._foreign)
        payload.update({m.key: e.best_score for m, e in self._entries.items()})
        payload[result.mode.key] = int(result.final_score)
        try:
            self.backend.write_all(payload)
        except PersistenceError as exc:
            logger.warning("could not save high score for %s: %s", result.mode.key, exc)
            return RecordOutcome(is_new_record=False, previous_best=previous, error=exc)

        self._entries[result.mode] = HighScoreEntry(result.mode, int(result.final_score))
        logger.info("new high score %d for %s (was %d)", result.final_score, result.mode.key, previous)
        return RecordOutcome(is_new_record=True, previous_best=previous)


__all__ = [
    "ScoreBackend",
    "JsonFileBackend",
    "MemoryBackend",
    "HighScoreEntry",
    "RecordOutcome",
    "HighScoreStore",
]
