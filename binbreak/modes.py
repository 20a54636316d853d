from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .enums import Segment
from .models import GameMode


@dataclass(frozen=True)
class ModeProfile:
    mode: GameMode
    label: str
    order: int

    @property
    def key(self) -> str:
        return self.mode.key


DEFAULT_PROFILES: List[ModeProfile] = [
    ModeProfile(GameMode(4), "nibble      4 bit", 0),
    ModeProfile(GameMode(8, Segment.LOW_NIBBLE), "byte lo     4 of 8 bit", 1),
    ModeProfile(GameMode(8, Segment.HIGH_NIBBLE), "byte hi     4 of 8 bit", 2),
    ModeProfile(GameMode(8), "byte        8 bit", 3),
    ModeProfile(GameMode(12), "hexlet     12 bit", 4),
    ModeProfile(GameMode(16, Segment.LOW_NIBBLE), "word lo     4 of 16 bit", 5),
    ModeProfile(GameMode(16, Segment.HIGH_NIBBLE), "word hi     4 of 16 bit", 6),
    ModeProfile(GameMode(16), "word       16 bit", 7),
]

DEFAULT_MODE = GameMode(8)


class ModeRegistry:
    def __init__(self, profiles: Optional[List[ModeProfile]] = None, *, initial: Optional[GameMode] = None) -> None:
        self.modes = sorted(list(profiles or DEFAULT_PROFILES), key=lambda profile: profile.order)
        if not self.modes:
            raise ValueError("mode catalog is empty")
        self.idx = self.find(initial or DEFAULT_MODE)
        if self.idx is None:
            self.idx = 0

    def current(self) -> ModeProfile:
        return self.modes[self.idx]

    def find(self, mode: GameMode) -> Optional[int]:
        return next((i for i, p in enumerate(self.modes) if p.mode == mode), None)

    def next_index(self, delta: int) -> Optional[int]:
        target = self.idx + (1 if delta > 0 else -1)
        if 0 <= target < len(self.modes):
            return target
        return None

    def set_index(self, index: int) -> None:
        if 0 <= index < len(self.modes):
            self.idx = index

    def navigate(self, direction: int) -> ModeProfile:
        """Move the selection one step; stays put at either end."""
        if direction:
            to_idx = self.next_index(direction)
            if to_idx is not None:
                self.set_index(to_idx)
        return self.current()

    def __iter__(self):
        return iter(self.modes)

    def __len__(self) -> int:
        return len(self.modes)


__all__ = ["ModeProfile", "ModeRegistry", "DEFAULT_PROFILES", "DEFAULT_MODE"]
