from __future__ import annotations

import logging
from typing import Optional

from .challenge import ChallengeGenerator
from .enums import Phase, Verdict
from .models import (
    Abort,
    Confirm,
    Digit,
    Erase,
    Event,
    GameMode,
    SessionResult,
    SessionState,
    Skip,
)
from .scoring import ScoringPolicy

logger = logging.getLogger(__name__)

DEFAULT_LIVES = 3


class SessionEngine:
    """Turns (state, event, now) into the next session state.

    States are frozen snapshots; ``apply`` never mutates its input. Wrong
    guesses, skips and timeouts are ordinary transitions. Once the session is
    over every event returns the same state, so the result exists once.
    """

    def __init__(
        self,
        generator: Optional[ChallengeGenerator] = None,
        policy: Optional[ScoringPolicy] = None,
        *,
        lives: int = DEFAULT_LIVES,
    ) -> None:
        self.generator = generator or ChallengeGenerator()
        self.policy = policy or ScoringPolicy()
        self.lives = int(lives)

    # ---- Lifecycle ----

    def start(self, mode: GameMode, now: float, *, lives: Optional[int] = None) -> SessionState:
        lives = self.lives if lives is None else int(lives)
        if lives <= 0:
            raise ValueError("a session needs at least one life")
        self.generator.reset()
        budget = self.policy.time_budget(mode, 0)
        logger.info("session start mode=%s lives=%d", mode.key, lives)
        return SessionState(
            mode=mode,
            lives=lives,
            max_lives=lives,
            current=self.generator.next_challenge(mode, time_budget=budget, now=now),
        )

    def apply(self, state: SessionState, event: Event, now: float) -> SessionState:
        if state.phase is Phase.GAME_OVER:
            return state

        if isinstance(event, Abort):
            return self._finish(state, verdict=Verdict.ABORTED, aborted=True)

        if state.current.expired(now):
            return self._miss(state, Verdict.TIMEOUT, now)

        if isinstance(event, Digit):
            return self._type_digit(state, event.value)
        if isinstance(event, Erase):
            return state.evolve(entry=state.entry[:-1], verdict=None)
        if isinstance(event, Skip):
            return self._miss(state, Verdict.SKIPPED, now)
        if isinstance(event, Confirm):
            return self._confirm(state, now)
        # Tick, Navigate: only the deadline check above applies
        return state

    # ---- Input ----

    def _type_digit(self, state: SessionState, value: str) -> SessionState:
        value = str(value)
        max_len = len(str(state.mode.max_value))
        if len(value) != 1 or value not in "0123456789" or len(state.entry) >= max_len:
            return state.evolve(verdict=Verdict.REJECTED)
        return state.evolve(entry=state.entry + value, verdict=None)

    def _confirm(self, state: SessionState, now: float) -> SessionState:
        guess = parse_guess(state.entry, state.mode.max_value)
        if guess is None:
            logger.debug("rejected entry %r", state.entry)
            return state.evolve(entry="", verdict=Verdict.REJECTED)
        if guess == state.current.target:
            return self._hit(state, now)
        return self._miss(state, Verdict.INCORRECT, now)

    # ---- Transitions ----

    def _hit(self, state: SessionState, now: float) -> SessionState:
        streak = state.streak + 1
        points, budget = self.policy.on_correct(
            state.mode, streak, state.current.remaining_fraction(now)
        )
        lives = state.lives
        if self.policy.grants_life(streak) and lives < state.max_lives:
            lives += 1
        return state.evolve(
            streak=streak,
            max_streak=max(state.max_streak, streak),
            score=state.score + points,
            lives=lives,
            rounds=state.rounds + 1,
            entry="",
            verdict=Verdict.CORRECT,
            last_points=points,
            current=self.generator.next_challenge(state.mode, time_budget=budget, now=now),
        )

    def _miss(self, state: SessionState, verdict: Verdict, now: float) -> SessionState:
        lives = state.lives - 1
        rounds = state.rounds + 1
        if lives <= 0:
            return self._finish(state, verdict=verdict, lives=0, rounds=rounds)
        budget = self.policy.on_incorrect_or_timeout(state.mode, state.streak)
        return state.evolve(
            lives=lives,
            streak=0,
            rounds=rounds,
            entry="",
            verdict=verdict,
            last_points=0,
            current=self.generator.next_challenge(state.mode, time_budget=budget, now=now),
        )

    def _finish(
        self,
        state: SessionState,
        *,
        verdict: Verdict,
        aborted: bool = False,
        lives: Optional[int] = None,
        rounds: Optional[int] = None,
    ) -> SessionState:
        rounds = state.rounds if rounds is None else rounds
        result = SessionResult(
            mode=state.mode,
            final_score=state.score,
            longest_streak=state.max_streak,
            rounds=rounds,
            aborted=aborted,
        )
        logger.info(
            "session over mode=%s score=%d longest_streak=%d aborted=%s",
            result.mode.key, result.final_score, result.longest_streak, aborted,
        )
        return state.evolve(
            phase=Phase.GAME_OVER,
            lives=state.lives if lives is None else lives,
            streak=0 if verdict.costs_life else state.streak,
            rounds=rounds,
            current=None,
            entry="",
            verdict=verdict,
            last_points=0,
            result=result,
        )


def parse_guess(entry: str, max_value: int) -> Optional[int]:
    """Decimal guess in ``[0, max_value]`` or None for malformed input."""
    text = (entry or "").strip()
    if not text.isdigit() or not text.isascii():
        return None
    value = int(text)
    if value > max_value:
        return None
    return value


__all__ = ["SessionEngine", "parse_guess", "DEFAULT_LIVES"]
