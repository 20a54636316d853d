from __future__ import annotations

import logging
import random
from typing import Optional

from .models import GameMode, RoundState, to_bits

logger = logging.getLogger(__name__)


class ChallengeGenerator:
    """Draws round targets and builds the bits shown for them.

    Nibble modes embed the 4-bit target at the mode's offset inside a full
    width number; the surrounding bits are random filler. The previous target
    is never drawn twice in a row unless the segment only has one value.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.previous: Optional[int] = None

    def reset(self) -> None:
        self.previous = None

    def next_challenge(self, mode: GameMode, *, time_budget: float, now: float) -> RoundState:
        target = self._pick_target(mode)
        value = self._embed(mode, target)
        self.previous = target
        # RoundState refuses anything out of range or mis-encoded
        state = RoundState(
            mode=mode,
            target=target,
            bits=to_bits(value, mode.bit_width),
            time_budget=float(time_budget),
            started_at=float(now),
        )
        logger.debug("new round %s target=%d budget=%.2fs", mode.key, target, time_budget)
        return state

    def _pick_target(self, mode: GameMode) -> int:
        count = mode.max_value + 1
        prev = self.previous
        if prev is None or count <= 1 or not 0 <= prev < count:
            return self.rng.randrange(count)
        # uniform over every value except the previous one
        v = self.rng.randrange(count - 1)
        return v + 1 if v >= prev else v

    def _embed(self, mode: GameMode, target: int) -> int:
        if mode.focus is None:
            return target
        filler = self.rng.getrandbits(mode.bit_width)
        mask = mode.max_value << mode.segment_offset
        return (filler & ~mask) | (target << mode.segment_offset)


__all__ = ["ChallengeGenerator"]
