from __future__ import annotations

from collections import deque
from typing import Callable, Deque, List, Optional

from .models import Abort, Event, SessionState, Tick


class InputQueue:
    def __init__(self) -> None:
        self._q: Deque[Event] = deque()

    def push(self, event: Event) -> None:
        self._q.append(event)

    def pop(self) -> Optional[Event]:
        return self._q.popleft() if self._q else None

    def pop_all(self) -> list[Event]:
        out: List[Event] = list(self._q)
        self._q.clear()
        return out

    def has_abort(self) -> bool:
        return any(isinstance(e, Abort) for e in self._q)

    def clear(self) -> None:
        self._q.clear()

    def __len__(self) -> int:
        return len(self._q)


class EventMerger:
    """Single ordered stream over decoded input and the periodic tick.

    ``next_event`` hands out one event per call. A pending abort beats
    everything; a strictly elapsed deadline beats queued input; queued input
    beats the periodic tick.
    """

    def __init__(self, iq: InputQueue, now_fn: Callable[[], float], *, tick_interval: float = 0.1) -> None:
        if tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        self.iq = iq
        self._now = now_fn
        self.tick_interval = float(tick_interval)
        self._next_tick = self._now() + self.tick_interval

    def now(self) -> float:
        return self._now()

    def next_event(self, state: Optional[SessionState], now: Optional[float] = None) -> Optional[Event]:
        """One event for ``state``; pass ``now`` so the caller judges it at the same instant."""
        if now is None:
            now = self._now()
        if self.iq.has_abort():
            self.iq.clear()
            return Abort()
        if state is not None and state.current is not None and state.current.expired(now):
            self._next_tick = now + self.tick_interval
            return Tick()
        event = self.iq.pop()
        if event is not None:
            return event
        if now >= self._next_tick:
            self._next_tick = now + self.tick_interval
            return Tick()
        return None


__all__ = ["InputQueue", "EventMerger"]
