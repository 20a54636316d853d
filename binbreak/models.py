from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional, Sequence, Tuple, Union

from .enums import Phase, Segment, Verdict
from .errors import InvariantViolation

NIBBLE = 4
VALID_WIDTHS: Tuple[int, ...] = (4, 8, 12, 16)


class Scene(Enum):
    MENU = auto()
    GAME = auto()
    OVER = auto()


def to_bits(value: int, width: int) -> Tuple[int, ...]:
    """Unsigned binary expansion of ``value``, most significant bit first."""
    if value < 0 or value >= (1 << width):
        raise InvariantViolation(f"{value} does not fit in {width} bits")
    return tuple((value >> shift) & 1 for shift in range(width - 1, -1, -1))


def from_bits(bits: Sequence[int]) -> int:
    out = 0
    for b in bits:
        out = (out << 1) | int(b)
    return out


# ---- Modes ----

@dataclass(frozen=True)
class GameMode:
    bit_width: int
    focus: Optional[Segment] = None

    def __post_init__(self) -> None:
        if self.bit_width not in VALID_WIDTHS:
            raise InvariantViolation(f"unsupported bit width: {self.bit_width!r}")
        focus = Segment(self.focus) if self.focus is not None else None
        # a "focus" covering the whole number is the plain mode
        if focus is Segment.FULL_WIDTH or self.bit_width == NIBBLE:
            focus = None
        object.__setattr__(self, "focus", focus)

    @property
    def segment_width(self) -> int:
        return NIBBLE if self.focus is not None else self.bit_width

    @property
    def segment_offset(self) -> int:
        """Bit position (from the LSB) where the guessed segment starts."""
        if self.focus is Segment.HIGH_NIBBLE:
            return self.bit_width - NIBBLE
        return 0

    @property
    def max_value(self) -> int:
        return (1 << self.segment_width) - 1

    @property
    def focus_span(self) -> Tuple[int, int]:
        """Slice (start, stop) of the MSB-first display holding the segment."""
        stop = self.bit_width - self.segment_offset
        return stop - self.segment_width, stop

    @property
    def key(self) -> str:
        if self.focus is None:
            return str(self.bit_width)
        return f"{self.bit_width}/{self.focus.value}"

    @property
    def label(self) -> str:
        if self.focus is Segment.LOW_NIBBLE:
            return f"{self.bit_width} bit low nibble"
        if self.focus is Segment.HIGH_NIBBLE:
            return f"{self.bit_width} bit high nibble"
        return f"{self.bit_width} bit"

    @classmethod
    def from_key(cls, key: str) -> Optional["GameMode"]:
        width_s, _, focus_s = str(key).strip().partition("/")
        try:
            width = int(width_s)
            focus = Segment(focus_s) if focus_s else None
            return cls(width, focus)
        except (ValueError, InvariantViolation):
            return None


# ---- Rounds ----

@dataclass(frozen=True)
class RoundState:
    mode: GameMode
    target: int
    bits: Tuple[int, ...]
    time_budget: float
    started_at: float

    def __post_init__(self) -> None:
        m = self.mode
        if not math.isfinite(self.time_budget) or self.time_budget <= 0:
            raise InvariantViolation(f"time budget must be positive, got {self.time_budget!r}")
        if not 0 <= self.target <= m.max_value:
            raise InvariantViolation(f"target {self.target} outside [0, {m.max_value}] for {m.key}")
        if len(self.bits) != m.bit_width or any(b not in (0, 1) for b in self.bits):
            raise InvariantViolation(f"display bits {self.bits!r} invalid for {m.key}")
        start, stop = m.focus_span
        if from_bits(self.bits[start:stop]) != self.target:
            raise InvariantViolation("displayed segment does not encode the target")

    @property
    def deadline(self) -> float:
        return self.started_at + self.time_budget

    def remaining(self, now: float) -> float:
        return max(0.0, self.deadline - now)

    def remaining_fraction(self, now: float) -> float:
        return max(0.0, min(1.0, self.remaining(now) / self.time_budget))

    def expired(self, now: float) -> bool:
        # an exact tie still belongs to the player
        return now > self.deadline

    def grouped(self, sep: str = " ") -> str:
        """Bits as text in groups of four, e.g. ``1010 1011``."""
        raw = "".join(str(b) for b in self.bits)
        return sep.join(raw[i:i + NIBBLE] for i in range(0, len(raw), NIBBLE))


# ---- Sessions ----

@dataclass(frozen=True)
class SessionResult:
    mode: GameMode
    final_score: int
    longest_streak: int
    rounds: int = 0
    aborted: bool = False


@dataclass(frozen=True)
class SessionState:
    mode: GameMode
    lives: int
    max_lives: int
    current: Optional[RoundState]
    phase: Phase = Phase.PLAYING
    streak: int = 0
    max_streak: int = 0
    score: int = 0
    rounds: int = 0
    entry: str = ""
    verdict: Optional[Verdict] = None
    last_points: int = 0
    result: Optional[SessionResult] = None

    def __post_init__(self) -> None:
        if min(self.lives, self.streak, self.score, self.max_streak) < 0:
            raise InvariantViolation("lives, streak and score must be non-negative")
        playing = self.phase is Phase.PLAYING and self.lives > 0
        if (self.current is not None) != playing:
            raise InvariantViolation(f"round presence does not match phase {self.phase.value}")
        if (self.result is not None) != (self.phase is Phase.GAME_OVER):
            raise InvariantViolation("a result exists exactly when the session is over")

    @property
    def is_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    def evolve(self, **changes) -> "SessionState":
        return replace(self, **changes)

    def hearts(self) -> str:
        alive = min(self.lives, self.max_lives)
        return "♥" * alive + "·" * max(0, self.max_lives - alive)


# ---- Events ----

@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Digit:
    value: str


@dataclass(frozen=True)
class Erase:
    pass


@dataclass(frozen=True)
class Confirm:
    pass


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class Abort:
    pass


@dataclass(frozen=True)
class Navigate:
    direction: int


Event = Union[Tick, Digit, Erase, Confirm, Skip, Abort, Navigate]


__all__ = [
    "NIBBLE", "VALID_WIDTHS", "Scene", "to_bits", "from_bits",
    "GameMode", "RoundState", "SessionResult", "SessionState",
    "Tick", "Digit", "Erase", "Confirm", "Skip", "Abort", "Navigate", "Event",
]
