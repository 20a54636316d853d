from __future__ import annotations

import os
import sys

import pygame

from .config import CFG
from .constants import FPS
from .game import Game
from .logging_config import configure_logging

# ============================== MAIN LOOP ============================== #
def main():
    configure_logging()
    os.environ['SDL_VIDEO_WINDOW_POS'] = "0,0"
    pygame.init()
    pygame.key.set_repeat()
    fullscreen = bool(CFG.get("display", {}).get("fullscreen", False))
    screen = pygame.display.set_mode((1, 1))  # tiny placeholder; real size set next
    game = Game(screen)
    game._set_display_mode(fullscreen)
    pygame.display.set_caption("binbreak")

    try:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    break
                if not game.handle_event(event):
                    running = False
                    break
            game.update()
            game.draw()
            game.clock.tick(int(game.settings.get("fps", FPS)))
    except KeyboardInterrupt:
        pass
    finally:
        # a round still running ends as an abort so its score is recorded
        game.shutdown()
        pygame.quit()
    return 0

if __name__ == "__main__":
    sys.exit(main())
