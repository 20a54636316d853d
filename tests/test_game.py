import pygame
import pytest

from binbreak.game import Game
from binbreak.models import Confirm, Digit, GameMode, Scene

FOUR = GameMode(4)


@pytest.fixture()
def game(store, clock, make_engine):
    pygame.display.init()
    screen = pygame.display.set_mode((320, 240))
    g = Game(screen, store=store, now_fn=clock)
    g.engine = g.runner.engine = make_engine([11, 3])
    g.modes.set_index(g.modes.find(FOUR))
    yield g
    pygame.display.quit()


def test_shutdown_mid_round_records_the_score(game, store):
    game.start_game()
    for event in (Digit("1"), Digit("1"), Confirm()):
        game.runner.push(event)
    game.update()
    assert game.state.score == 15

    game.shutdown()
    assert game.state.is_over
    assert game.state.result.aborted
    assert game.scene is Scene.OVER
    assert store.best(FOUR) == 15


def test_shutdown_from_menu_does_nothing(game, store):
    game.shutdown()
    assert game.state is None
    assert game.scene is Scene.MENU
    assert store.best(FOUR) == 0


def test_shutdown_after_game_over_records_once(game, store, backend):
    game.start_game()
    game.shutdown()
    writes = backend.writes
    game.shutdown()
    assert backend.writes == writes
