from __future__ import annotations

import math
from typing import Callable, Dict, Tuple

from .constants import (
    PULSE_BASE_DURATION,
    PULSE_BASE_MAX_SCALE,
    PULSE_KIND_DURATION,
    PULSE_KIND_SCALE,
    SHAKE_AMPLITUDE_FACT,
    SHAKE_DURATION,
    SHAKE_FREQ_HZ,
)
from .enums import Verdict


class EffectsManager:
    """Short-lived pulses and screen shake driven by round verdicts."""

    def __init__(self, now_fn: Callable[[], float]):
        self.now = now_fn

        # shake
        self.shake_start = 0.0
        self.shake_until = 0.0

        # pulses
        self._pulses: Dict[str, Tuple[float, float]] = {k: (0.0, 0.0) for k in PULSE_KIND_SCALE}

    def clear_transients(self):
        self.shake_start = self.shake_until = 0.0
        self._pulses = {k: (0.0, 0.0) for k in self._pulses}

    # ---------- triggers ----------
    def trigger_shake(self, duration: float = SHAKE_DURATION):
        now = self.now()
        self.shake_start = now
        self.shake_until = now + max(0.01, duration)

    def trigger_pulse(self, kind: str, duration: float | None = None):
        if kind not in self._pulses:
            return
        dur = float(duration if duration is not None else PULSE_KIND_DURATION.get(kind, PULSE_BASE_DURATION))
        now = self.now()
        self._pulses[kind] = (now, now + max(1e-3, dur))

    def on_verdict(self, verdict: Verdict, *, streak: int = 0) -> None:
        if verdict is Verdict.CORRECT:
            self.trigger_pulse("score")
            self.trigger_pulse("bits")
            if streak and streak % 5 == 0:
                self.trigger_pulse("streak")
        elif verdict.costs_life:
            self.trigger_shake()
        elif verdict is Verdict.REJECTED:
            self.trigger_pulse("timer")

    # ---------- queries ----------
    def pulse_scale(self, kind: str) -> float:
        start, until = self._pulses.get(kind, (0.0, 0.0))
        if start <= 0.0:
            return 1.0
        now = self.now()
        if now >= until:
            return 1.0
        t = max(0.0, min(1.0, (now - start) / max(1e-6, until - start)))
        max_scale = float(PULSE_BASE_MAX_SCALE) * float(PULSE_KIND_SCALE.get(kind, 1.0))
        return 1.0 + (max_scale - 1.0) * math.sin(math.pi * t)

    def is_pulse_active(self, kind: str) -> bool:
        start, until = self._pulses.get(kind, (0.0, 0.0))
        return start > 0.0 and self.now() < until

    def shake_offset(self, screen_w: int) -> tuple[float, float]:
        now = self.now()
        if now >= self.shake_until:
            return (0.0, 0.0)
        sh_t = max(0.0, min(1.0, (now - self.shake_start) / SHAKE_DURATION))
        amp = screen_w * SHAKE_AMPLITUDE_FACT * (1.0 - sh_t)
        phase = 2.0 * math.pi * SHAKE_FREQ_HZ * (now - self.shake_start)
        return (amp * math.sin(phase), 0.5 * amp * math.cos(phase * 0.9))


__all__ = ["EffectsManager"]
