from __future__ import annotations


class BinbreakError(Exception):
    """Base error for the game core."""


class InvariantViolation(BinbreakError):
    """A generator, policy or state produced data that must never be shown."""


class PersistenceError(BinbreakError):
    """High score storage could not be read or written."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


__all__ = ["BinbreakError", "InvariantViolation", "PersistenceError"]
