from __future__ import annotations

import pygame

from .config import CFG


# --- Palette ----------------------------------------------------------------
BG = (8, 10, 12)                 # window background
INK = (235, 235, 235)            # primary text colour
ACCENT = (255, 210, 90)          # accent colour for highlights
DIM = (90, 96, 110)              # bits outside the guessed nibble
GOOD = (110, 230, 130)
BAD = (235, 90, 90)
WARN = (255, 170, 80)

# Menu colours per display width, easy (green) to hard (pink)
MODE_COLORS = {
    4:  (100, 255, 100),
    8:  (125, 120, 255),
    12: (200, 100, 255),
    16: (255, 80, 150),
}
NIBBLE_MODE_COLOR = (100, 220, 255)

# --- Layout ----------------------------------------------------------------
FPS = int(CFG.get("display", {}).get("fps", 60))
TEXT_SHADOW_OFFSET = (2, 2)
UI_RADIUS = 8
WINDOWED_DEFAULT_SIZE = tuple(CFG.get("display", {}).get("windowed_size", (960, 600)))
WINDOWED_FLAGS = pygame.RESIZABLE

# --- Bits -------------------------------------------------------------------
BIT_FONT_SIZE = 72
BIT_GAP_FACTOR = 0.35             # extra space between nibbles, relative to a bit cell
BIT_Y_FACTOR = 0.40
ENTRY_Y_FACTOR = 0.60
ENTRY_FONT_SIZE = 56

# --- Pulse / shake ----------------------------------------------------------
PULSE_BASE_DURATION = 0.30
PULSE_BASE_MAX_SCALE = 1.18
PULSE_KIND_SCALE = {
    "bits":   1.00,
    "streak": 1.06,
    "score":  1.10,
    "timer":  1.10,
}
PULSE_KIND_DURATION = {
    "bits":   0.30,
    "streak": 0.30,
    "score":  0.26,
    "timer":  0.40,
}
SHAKE_DURATION = 0.12
SHAKE_AMPLITUDE_FACT = 0.012
SHAKE_FREQ_HZ = 18.0

# --- Timer bar --------------------------------------------------------------
TIMER_BAR_WIDTH_FACTOR = 0.66
TIMER_BAR_HEIGHT = 18
TIMER_BAR_BG = (40, 40, 50)
TIMER_BAR_FILL = (90, 200, 255)
TIMER_BAR_BORDER = (160, 180, 200)
TIMER_BAR_BORDER_W = 2
TIMER_BAR_WARN_COLOR = WARN
TIMER_BAR_CRIT_COLOR = (220, 80, 80)
TIMER_BAR_WARN_TIME = 0.50
TIMER_BAR_CRIT_TIME = 0.25
TIMER_BAR_BORDER_RADIUS = UI_RADIUS
TIMER_BOTTOM_MARGIN_FACTOR = 0.06
TIMER_BAR_TEXT_COLOR = INK
TIMER_LABEL_GAP = 8
TIMER_POSITION_INDICATOR_W = 4
TIMER_POSITION_INDICATOR_PAD = 3

# --- HUD --------------------------------------------------------------------
FONT_SIZE_SMALL = 18
FONT_SIZE_MID = 26
FONT_SIZE_BIG = 60
HUD_LABEL_FONT_SIZE = 20
HUD_VALUE_FONT_SIZE = 36
HUD_LABEL_COLOR = (180, 200, 230)
HUD_VALUE_COLOR = INK
HUD_TOP_MARGIN_FACTOR = 0.04
