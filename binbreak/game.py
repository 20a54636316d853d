from __future__ import annotations

import logging
import time
from typing import Dict, Optional, Tuple

import pygame

from .challenge import ChallengeGenerator
from .config import CFG, persist_last_mode, persist_windowed_size
from .constants import *  # noqa: F401,F403
from .engine import SessionEngine
from .enums import Verdict
from .fx import EffectsManager
from .highscores import HighScoreStore, JsonFileBackend
from .models import Abort, Confirm, Digit, Erase, Event, GameMode, Navigate, Scene, SessionState, Skip
from .modes import ModeProfile, ModeRegistry
from .runner import SessionRunner
from .settings import make_policy, make_runtime_settings
from .ui_components import BitStrip, TimeBar

logger = logging.getLogger(__name__)

_KEYPAD_DIGITS = {getattr(pygame, f"K_KP{d}"): str(d) for d in range(10)}


def decode_key(key: int, unicode: str = "") -> Optional[Event]:
    """Translate one key press into a core input event."""
    if key in (pygame.K_ESCAPE, pygame.K_q):
        return Abort()
    if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
        return Confirm()
    if key == pygame.K_BACKSPACE:
        return Erase()
    if key == pygame.K_s:
        return Skip()
    if key in (pygame.K_LEFT, pygame.K_UP):
        return Navigate(-1)
    if key in (pygame.K_RIGHT, pygame.K_DOWN):
        return Navigate(+1)
    if key in _KEYPAD_DIGITS:
        return Digit(_KEYPAD_DIGITS[key])
    if unicode and unicode.isprintable() and not unicode.isspace():
        # letters and symbols reach the engine and get rejected there
        return Digit(unicode)
    return None


class Game:

    # ---- Core lifecycle wiring ----

    def __init__(self, screen: pygame.Surface, *, store: Optional[HighScoreStore] = None, now_fn=time.monotonic):
        self.screen = screen
        self.cfg = CFG
        self._now_fn = now_fn
        self.scene: Scene = Scene.MENU

        self.w, self.h = self.screen.get_size()
        self.clock = pygame.time.Clock()
        self.last_windowed_size = tuple(CFG.get("display", {}).get("windowed_size", WINDOWED_DEFAULT_SIZE))
        self._font_cache: Dict[Tuple[int, bool], pygame.font.Font] = {}

        # --- Rules & persistence ---
        self.settings = make_runtime_settings(CFG)
        self.policy = make_policy(self.settings)
        self.store = store or HighScoreStore(JsonFileBackend(CFG["highscores"]["path"]))
        self.store.load()
        self.engine = SessionEngine(ChallengeGenerator(), self.policy, lives=self.settings["lives"])
        self.runner = SessionRunner(self.engine, self.store, self.now, tick_interval=self.settings["tick_sec"])

        # --- Mode menu ---
        self.modes = ModeRegistry(initial=GameMode.from_key(self.settings["last_mode"]))

        # --- Render helpers ---
        self.fx = EffectsManager(self.now)
        self.bit_strip = BitStrip(self)
        self.timebar = TimeBar(self)

    @property
    def state(self) -> Optional[SessionState]:
        return self.runner.state

    def now(self) -> float:
        return self._now_fn()

    def start_game(self) -> None:
        profile = self.modes.current()
        persist_last_mode(profile.key)
        self.fx.clear_transients()
        self.runner.start(profile.mode)
        self.scene = Scene.GAME

    def back_to_menu(self) -> None:
        self.scene = Scene.MENU

    def shutdown(self) -> None:
        """Close a running session as aborted so its score still counts."""
        if self.scene is not Scene.GAME or self.state is None or self.state.is_over:
            return
        self.runner.push(Abort())
        self.update()

    # ---- Window ----

    def font(self, px: int, *, bold: bool = False) -> pygame.font.Font:
        key = (max(6, int(px)), bold)
        f = self._font_cache.get(key)
        if f is None:
            f = pygame.font.Font(None, key[0])
            f.set_bold(bold)
            self._font_cache[key] = f
        return f

    def _set_display_mode(self, fullscreen: bool) -> None:
        if fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(self.last_windowed_size, WINDOWED_FLAGS)
        self.w, self.h = self.screen.get_size()

    def handle_resize(self, width: int, height: int) -> None:
        self.screen = pygame.display.set_mode((width, height), WINDOWED_FLAGS)
        self.w, self.h = self.screen.get_size()
        self.last_windowed_size = (self.w, self.h)
        persist_windowed_size(self.w, self.h)

    # ---- Input ----

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Returns False when the player asked to quit from the menu."""
        if event.type == pygame.VIDEORESIZE:
            self.handle_resize(event.w, event.h)
            return True
        if event.type != pygame.KEYDOWN:
            return True

        decoded = decode_key(event.key, getattr(event, "unicode", ""))

        if self.scene is Scene.MENU:
            if isinstance(decoded, Abort):
                return False
            if isinstance(decoded, Navigate):
                self.modes.navigate(decoded.direction)
            elif isinstance(decoded, Confirm):
                self.start_game()
            return True

        if self.scene is Scene.OVER:
            if isinstance(decoded, Confirm) or event.key == pygame.K_SPACE:
                self.start_game()
            elif isinstance(decoded, Abort):
                self.back_to_menu()
            return True

        if decoded is not None:
            self.runner.push(decoded)
        return True

    def update(self) -> None:
        if self.scene is not Scene.GAME:
            return
        for st in self.runner.pump():
            if st.verdict is not None:
                self.fx.on_verdict(st.verdict, streak=st.streak)
        if self.state is not None and self.state.is_over:
            self.scene = Scene.OVER

    # ---- Rendering ----

    def draw_text(self, text: str, *, pos: Tuple[float, float], size: int = FONT_SIZE_MID,
                  color=INK, bold: bool = False, center: bool = True, shadow: bool = True) -> pygame.Rect:
        font = self.font(size, bold=bold)
        surf = font.render(text, True, color)
        rect = surf.get_rect(center=(int(pos[0]), int(pos[1]))) if center else surf.get_rect(topleft=pos)
        if shadow:
            sh = font.render(text, True, (0, 0, 0))
            self.screen.blit(sh, rect.move(*TEXT_SHADOW_OFFSET))
        self.screen.blit(surf, rect)
        return rect

    def _mode_color(self, profile: ModeProfile) -> Tuple[int, int, int]:
        if profile.mode.focus is not None:
            return NIBBLE_MODE_COLOR
        return MODE_COLORS.get(profile.mode.bit_width, INK)

    def _draw_menu(self) -> None:
        self.draw_text("BINBREAK", pos=(self.w / 2, self.h * 0.16), size=FONT_SIZE_BIG, color=ACCENT, bold=True)
        row_h = int(FONT_SIZE_MID * 1.4)
        top = int(self.h * 0.30)
        left = int(self.w * 0.24)
        for i, profile in enumerate(self.modes):
            selected = i == self.modes.idx
            y = top + i * row_h
            if selected:
                pygame.draw.rect(self.screen, (40, 40, 40), (left - 16, y - 4, int(self.w * 0.52) + 32, row_h),
                                 border_radius=UI_RADIUS)
            marker = "»" if selected else " "
            self.draw_text(f"{marker} {profile.label.upper()}", pos=(left, y), color=self._mode_color(profile),
                           bold=selected, center=False, shadow=False)
            best = self.store.best(profile.mode)
            self.draw_text(f"best {best}", pos=(left + int(self.w * 0.52) - 100, y), color=HUD_LABEL_COLOR,
                           center=False, shadow=False)
        self.draw_text("Up/Down select   Enter play   Esc quit", pos=(self.w / 2, self.h * 0.92),
                       size=FONT_SIZE_SMALL, color=HUD_LABEL_COLOR)

    def _draw_hud(self, st: SessionState) -> None:
        y = int(self.h * HUD_TOP_MARGIN_FACTOR) + HUD_LABEL_FONT_SIZE
        cols = (
            ("MODE", st.mode.label, 1.0),
            ("SCORE", str(st.score), self.fx.pulse_scale("score")),
            ("STREAK", str(st.streak), self.fx.pulse_scale("streak")),
            ("BEST", str(max(self.runner.previous_best, 0)), 1.0),
            ("LIVES", st.hearts(), 1.0),
        )
        for i, (label, value, scale) in enumerate(cols):
            x = self.w * (i + 0.5) / len(cols)
            self.draw_text(label, pos=(x, y), size=HUD_LABEL_FONT_SIZE, color=HUD_LABEL_COLOR, shadow=False)
            color = ACCENT if label == "BEST" and st.score > self.runner.previous_best else HUD_VALUE_COLOR
            self.draw_text(value, pos=(x, y + HUD_VALUE_FONT_SIZE), size=int(HUD_VALUE_FONT_SIZE * scale), color=color)

    def _feedback_line(self, st: SessionState) -> Tuple[str, Tuple[int, int, int]]:
        v = st.verdict
        if v is Verdict.CORRECT:
            return f"gained {st.last_points} points", GOOD
        if v is Verdict.INCORRECT:
            return "wrong, lost a life", BAD
        if v is Verdict.TIMEOUT:
            return "timeout, lost a life", BAD
        if v is Verdict.SKIPPED:
            return "skipped, lost a life", WARN
        if v is Verdict.REJECTED:
            return f"enter a number from 0 to {st.mode.max_value}", WARN
        return "", INK

    def _draw_gameplay(self) -> None:
        st = self.state
        if st is None or st.current is None:
            return
        now = self.now()
        dx, dy = self.fx.shake_offset(self.w)
        rnd = st.current
        self._draw_hud(st)
        self.bit_strip.draw(rnd, (int(self.w / 2 + dx), int(self.h * BIT_Y_FACTOR + dy)),
                            scale=self.fx.pulse_scale("bits"))
        entry = st.entry + ("_" if int(now * 2) % 2 == 0 else " ")
        self.draw_text(f"> {entry}", pos=(self.w / 2, self.h * ENTRY_Y_FACTOR), size=ENTRY_FONT_SIZE, bold=True)
        text, color = self._feedback_line(st)
        if text:
            self.draw_text(text, pos=(self.w / 2, self.h * ENTRY_Y_FACTOR + ENTRY_FONT_SIZE), color=color)
        self.timebar.draw(rnd, now)
        self.draw_text("digits type   Enter confirm   Backspace erase   S skip   Esc quit",
                       pos=(self.w / 2, self.h - 14), size=FONT_SIZE_SMALL, color=HUD_LABEL_COLOR, shadow=False)

    def _draw_over(self) -> None:
        st = self.state
        if st is None or st.result is None:
            return
        res = st.result
        rec = self.runner.record
        cy = self.h * 0.22
        self.draw_text("GAME OVER", pos=(self.w / 2, cy), size=FONT_SIZE_BIG, color=BAD, bold=True)
        lines = [
            (f"Final Score: {res.final_score}", INK),
            (f"Previous High: {self.runner.previous_best}", HUD_LABEL_COLOR),
            (f"Rounds Played: {res.rounds}", HUD_LABEL_COLOR),
            (f"Max Streak: {res.longest_streak}", HUD_LABEL_COLOR),
        ]
        if rec is not None and rec.is_new_record:
            lines.insert(0, ("NEW HIGH SCORE!", ACCENT))
        if rec is not None and not rec.ok:
            lines.append(("high score could not be saved", WARN))
        if st.lives == 0:
            lines.append(("You lost all your lives.", BAD))
        for i, (text, color) in enumerate(lines):
            self.draw_text(text, pos=(self.w / 2, cy + 70 + i * 38), color=color)
        self.draw_text("Press Enter to restart or Esc for the menu", pos=(self.w / 2, self.h * 0.88),
                       size=FONT_SIZE_SMALL, color=HUD_LABEL_COLOR)

    def draw(self) -> None:
        self.screen.fill(BG)
        if self.scene is Scene.MENU:
            self._draw_menu()
        elif self.scene is Scene.GAME:
            self._draw_gameplay()
        else:
            self._draw_over()
        pygame.display.flip()


__all__ = ["Game", "decode_key"]
