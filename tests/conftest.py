"""
Shared pytest fixtures for settlers tests.

Game fixtures are function-scoped so tests can mutate them freely.
"""

from datetime import datetime, timedelta, timezone
import os
import sys
from typing import Callable, Optional

import pytest

# Ensure the package is importable when running tests without installing.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from settlers.game_options import new_option  # noqa: E402
from settlers.models import Game, GameState  # noqa: E402


NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed "current time" for duration calculations."""
    return NOW


@pytest.fixture
def make_game() -> Callable[..., Game]:
    """Factory for games with a given state, start offset and options."""

    def _make(
        name: str = "game1",
        state: int = GameState.ROLL_OR_CARD,
        elapsed: timedelta = timedelta(seconds=125),
        options: Optional[dict] = None,
    ) -> Game:
        game = Game.new(name, options, start_time=NOW - elapsed)
        game.game_state = state
        return game

    return _make


@pytest.fixture
def four_player_game(make_game) -> Game:
    """4-player game: Alice, vacant seat, built-in bot, Carol."""
    game = make_game()
    game.sit_down(0, "Alice").total_vp = 12
    game.sit_down(2, "Bot7", is_robot=True, is_built_in_robot=True).total_vp = 5
    game.sit_down(3, "Carol").total_vp = 8
    return game


@pytest.fixture
def six_player_game(make_game) -> Game:
    """6-player game using the PL option, with two seats filled."""
    game = make_game(
        name="big",
        state=GameState.PLAY1,
        options={"PL": new_option("PL", int_value=6), "NT": new_option("NT", bool_value=True)},
    )
    game.sit_down(0, "Dana").total_vp = 3
    game.sit_down(5, "droid", is_robot=True).total_vp = 4
    return game
