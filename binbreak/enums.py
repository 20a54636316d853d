from enum import Enum


class Segment(str, Enum):
    LOW_NIBBLE  = "lo"
    HIGH_NIBBLE = "hi"
    FULL_WIDTH  = "full"


class Phase(str, Enum):
    PLAYING   = "PLAYING"
    GAME_OVER = "GAME_OVER"


class Verdict(str, Enum):
    CORRECT   = "CORRECT"
    INCORRECT = "INCORRECT"
    TIMEOUT   = "TIMEOUT"
    SKIPPED   = "SKIPPED"
    REJECTED  = "REJECTED"
    ABORTED   = "ABORTED"

    @property
    def costs_life(self) -> bool:
        return self in (Verdict.INCORRECT, Verdict.TIMEOUT, Verdict.SKIPPED)
