from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .engine import SessionEngine
from .highscores import HighScoreStore, RecordOutcome
from .input_queue import EventMerger, InputQueue
from .models import Event, GameMode, SessionState

logger = logging.getLogger(__name__)


class SessionRunner:
    """Feeds the merged event stream into the engine, one event at a time.

    When a session reaches game over the result goes to the high score store
    exactly once; the outcome stays on ``record`` for the renderer.
    """

    def __init__(
        self,
        engine: SessionEngine,
        store: HighScoreStore,
        now_fn: Callable[[], float],
        *,
        iq: Optional[InputQueue] = None,
        tick_interval: float = 0.1,
    ) -> None:
        self.engine = engine
        self.store = store
        self.iq = iq or InputQueue()
        self.merger = EventMerger(self.iq, now_fn, tick_interval=tick_interval)
        self.state: Optional[SessionState] = None
        self.record: Optional[RecordOutcome] = None
        self.previous_best = 0
        self._committed = False

    def start(self, mode: GameMode) -> SessionState:
        self.iq.clear()
        self.record = None
        self._committed = False
        self.previous_best = self.store.best(mode)
        self.state = self.engine.start(mode, self.merger.now())
        return self.state

    def push(self, event: Event) -> None:
        self.iq.push(event)

    def pump(self, limit: int = 64) -> List[SessionState]:
        """Process every ready event; returns the states that changed."""
        changed: List[SessionState] = []
        if self.state is None:
            return changed
        for _ in range(limit):
            # one clock read: the merger's choice and the engine's verdict share it
            now = self.merger.now()
            event = self.merger.next_event(self.state, now)
            if event is None:
                break
            new_state = self.engine.apply(self.state, event, now)
            if new_state is not self.state:
                changed.append(new_state)
                self.state = new_state
            if self.state.is_over:
                self._commit()
                self.iq.clear()
                break
        return changed

    def _commit(self) -> None:
        if self._committed or self.state is None or self.state.result is None:
            return
        self._committed = True
        self.record = self.store.record_result(self.state.result)
        if not self.record.ok:
            logger.warning("score kept for this run only: %s", self.record.error)


__all__ = ["SessionRunner"]
