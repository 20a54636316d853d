from __future__ import annotations

from typing import TYPE_CHECKING

import pygame

from .constants import *  # noqa: F401,F403
from .models import NIBBLE, RoundState

if TYPE_CHECKING:
    from .game import Game


class BitStrip:
    """Draws the displayed bits; the guessed nibble is lit, filler is dimmed."""

    def __init__(self, game: "Game") -> None:
        self.g = game

    def draw(self, rnd: RoundState, center: tuple[int, int], *, scale: float = 1.0) -> pygame.Rect:
        g = self.g
        font = g.font(int(BIT_FONT_SIZE * scale), bold=True)
        cell_w = font.size("0")[0] + 6
        nibble_gap = int(cell_w * BIT_GAP_FACTOR)
        n = len(rnd.bits)
        groups = max(1, n // NIBBLE)
        total_w = n * cell_w + (groups - 1) * nibble_gap
        x = center[0] - total_w // 2
        y = center[1] - font.get_height() // 2

        start, stop = rnd.mode.focus_span
        focused = rnd.mode.focus is not None
        for i, bit in enumerate(rnd.bits):
            if i and i % NIBBLE == 0:
                x += nibble_gap
            inside = start <= i < stop
            color = ACCENT if (focused and inside) else (DIM if focused else INK)
            surf = font.render(str(bit), True, color)
            g.screen.blit(surf, (x + (cell_w - surf.get_width()) // 2, y))
            x += cell_w

        if focused:
            # underline the guessed nibble
            left = center[0] - total_w // 2 + start * cell_w + (start // NIBBLE) * nibble_gap
            line_y = y + font.get_height() + 4
            pygame.draw.line(g.screen, ACCENT, (left, line_y), (left + NIBBLE * cell_w, line_y), 3)
        return pygame.Rect(center[0] - total_w // 2, y, total_w, font.get_height())


class TimeBar:
    """Countdown for the running round; one notch per whole second of budget."""

    def __init__(self, game: "Game") -> None:
        self.g = game

    @staticmethod
    def color_for(remaining: float, ratio: float) -> tuple[int, int, int]:
        if ratio <= TIMER_BAR_CRIT_TIME or remaining <= 1.0:
            return TIMER_BAR_CRIT_COLOR
        if ratio <= TIMER_BAR_WARN_TIME:
            return TIMER_BAR_WARN_COLOR
        return TIMER_BAR_FILL

    def draw(self, rnd: RoundState, now: float) -> pygame.Rect:
        g = self.g
        remaining = rnd.remaining(now)
        ratio = rnd.remaining_fraction(now)

        width = int(g.w * TIMER_BAR_WIDTH_FACTOR)
        height = max(1, int(TIMER_BAR_HEIGHT * g.fx.pulse_scale("timer")))
        frame = pygame.Rect((g.w - width) // 2, g.h - int(g.h * TIMER_BOTTOM_MARGIN_FACTOR) - height, width, height)

        pygame.draw.rect(g.screen, TIMER_BAR_BG, frame, border_radius=TIMER_BAR_BORDER_RADIUS)
        filled = frame.copy()
        filled.width = int(width * ratio)
        if filled.width > 0:
            pygame.draw.rect(g.screen, self.color_for(remaining, ratio), filled,
                             border_radius=TIMER_BAR_BORDER_RADIUS)

        whole = int(rnd.time_budget)
        for sec in range(1, whole + 1):
            x = frame.left + int(width * sec / rnd.time_budget)
            if x >= frame.right:
                break
            pygame.draw.line(g.screen, TIMER_BAR_BG, (x, frame.top + 2), (x, frame.bottom - 3), 1)

        pygame.draw.rect(g.screen, TIMER_BAR_BORDER, frame, width=TIMER_BAR_BORDER_W,
                         border_radius=TIMER_BAR_BORDER_RADIUS)

        knob_x = frame.left + filled.width
        pygame.draw.rect(g.screen, ACCENT, (knob_x - TIMER_POSITION_INDICATOR_W // 2,
                                            frame.top - TIMER_POSITION_INDICATOR_PAD,
                                            TIMER_POSITION_INDICATOR_W,
                                            height + TIMER_POSITION_INDICATOR_PAD * 2))

        label = g.font(FONT_SIZE_MID).render(f"{remaining:.2f} seconds left", True, TIMER_BAR_TEXT_COLOR)
        g.screen.blit(label, label.get_rect(midbottom=(frame.centerx, frame.top - TIMER_LABEL_GAP)))
        return frame


__all__ = ["BitStrip", "TimeBar"]
