"""Data model for a game saved to, or loaded from, a file.

To save, use :meth:`SavedGameModel.from_game` on a live game.
To load, start with an empty ``SavedGameModel()`` hydrated by the codec,
then attach a game in the LOADING state (:meth:`SavedGameModel.create_loading_game`
does both steps) and call :meth:`SavedGameModel.resume_play`.

This standalone model is cleaner than serializing the whole Game with its
board and pieces.

Not thread-safe: callers saving a game which is still being played should
hold that game's lock while calling ``from_game``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr

from ..errors import (
    ConstraintViolationError,
    InvalidStateError,
    SavedGameLoadError,
    UnsupportedOperationError,
)
from ..game_options import pack_options, parse_options
from ..metrics import RESUME_CONSTRAINT_FAILURES, record_savegame_operation
from ..models import Game, GameState, Player, game_duration_seconds, state_name, utcnow

logger = logging.getLogger(__name__)

# Current model version: 2300 for v2.3.00
MODEL_VERSION = 2300

# Games can't be saved during initial placement
MIN_STATE_FOR_SAVE = GameState.ROLL_OR_CARD


# =============================================================================
# Lifecycle phases
# =============================================================================


@dataclass(frozen=True)
class Unloaded:
    """Empty model, or hydrated from a file with no game attached yet."""


@dataclass(frozen=True)
class Loading:
    """Game attached in LOADING state, waiting for resume_play."""
    game: Game


@dataclass(frozen=True)
class Loaded:
    """Game saved into this model, or resumed from it; ready to play."""
    game: Game


ModelPhase = Union[Unloaded, Loading, Loaded]


# =============================================================================
# Data model
# =============================================================================


class PlayerInfo(BaseModel):
    """Info on one player position sitting in the game, or a vacant seat"""
    name: Optional[str] = None
    is_seat_vacant: bool = Field(False, alias="isSeatVacant")
    total_vp: int = Field(0, ge=0, alias="totalVP")
    is_robot: bool = Field(False, alias="isRobot")
    is_built_in_robot: bool = Field(False, alias="isBuiltInRobot")

    class Config:
        populate_by_name = True

    @classmethod
    def from_player(cls, player: Player, is_vacant: bool) -> "PlayerInfo":
        return cls(
            name=player.name,
            is_seat_vacant=is_vacant,
            total_vp=player.total_vp,
            is_robot=player.is_robot,
            is_built_in_robot=player.is_built_in_robot,
        )


class Constraint(ABC):
    """A condition which must hold before resuming a loaded game.

    For example, player 3 must be a "faster" built-in bot, or be a certain
    third-party bot class. Constraints can be ignored when resuming.
    """

    name: str = "constraint"

    @abstractmethod
    def evaluate(self, model: "SavedGameModel", game: Game) -> bool:
        """True if the loaded game may resume."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class SavedGameModel(BaseModel):
    """Fields written to a saved game file, plus the resume state machine.

    Data fields use the file's camelCase names as aliases.
    """

    # Model version when saved, in same format as MODEL_VERSION
    model_version: int = Field(0, alias="modelVersion")
    # Game minimum client version, from Game.client_version_min_required()
    game_version: int = Field(0, alias="gameVersion")
    game_name: str = Field("", alias="gameName")
    # Packed game options, or None
    game_options: Optional[str] = Field(None, alias="gameOptions")
    game_duration_seconds: int = Field(0, ge=0, alias="gameDurationSeconds")
    game_state: int = Field(0, alias="gameState")
    # One per seat; length is the game's max_players
    player_seats: List[PlayerInfo] = Field(default_factory=list, alias="playerSeats")

    _phase: ModelPhase = PrivateAttr(default_factory=Unloaded)
    _constraints: List[Constraint] = PrivateAttr(default_factory=list)

    class Config:
        populate_by_name = True
        protected_namespaces = ()

    @classmethod
    def from_game(
        cls,
        game: Game,
        model_version: int = MODEL_VERSION,
        now: Optional[datetime] = None,
    ) -> "SavedGameModel":
        """Create a model to save as a game file. Doesn't change the game.

        Args:
            game: Game to save; state must be ROLL_OR_CARD or higher
            model_version: Format version to record
            now: Time to measure the game's duration to; defaults to now

        Raises:
            InvalidStateError: if game state < ROLL_OR_CARD, is LOADING,
                or isn't a recognized state
        """
        state = game.game_state
        try:
            GameState(state)
        except ValueError:
            logger.warning("Can't save game %s in unrecognized state %s", game.name, state)
            raise InvalidStateError(
                f"Unrecognized game state {state}",
                required_state=MIN_STATE_FOR_SAVE.name,
                current_state=str(state),
            ) from None
        if state < MIN_STATE_FOR_SAVE or state == GameState.LOADING:
            logger.warning(
                "Can't save game %s in state %s", game.name, state_name(state)
            )
            raise InvalidStateError(
                f"Game state must be at least {MIN_STATE_FOR_SAVE.name} to save",
                required_state=MIN_STATE_FOR_SAVE.name,
                current_state=state_name(state),
            )

        model = cls(
            model_version=model_version,
            game_version=game.client_version_min_required(),
            game_name=game.name,
            game_options=pack_options(game.game_options),
            game_duration_seconds=game_duration_seconds(game.start_time, now),
            game_state=int(state),
            player_seats=[
                PlayerInfo.from_player(game.get_player(pn), game.is_seat_vacant(pn))
                for pn in range(game.max_players)
            ],
        )
        model._phase = Loaded(game)

        logger.info(
            "Saved game %s: state %s, %ds elapsed, %d seats",
            model.game_name,
            state_name(model.game_state),
            model.game_duration_seconds,
            len(model.player_seats),
        )
        return model

    @property
    def phase(self) -> ModelPhase:
        return self._phase

    @property
    def constraints(self) -> List[Constraint]:
        return list(self._constraints)

    def add_constraint(self, constraint: Constraint) -> None:
        """Register a constraint to check when resuming."""
        self._constraints.append(constraint)

    def get_game(self) -> Optional[Game]:
        """The completely loaded game, or the game which was saved into this model.

        None while nothing is attached or while still LOADING.
        """
        if isinstance(self._phase, Loaded):
            return self._phase.game
        return None

    def check_loadable(self, current_model_version: int = MODEL_VERSION) -> None:
        """Check a hydrated model before building a game from it.

        Raises:
            SavedGameLoadError: if the model version is newer than
                current_model_version, or game_state can't be resumed
        """
        if self.model_version > current_model_version:
            raise SavedGameLoadError(
                f"Unsupported model version {self.model_version}, "
                f"newer than {current_model_version}",
                model_version=self.model_version,
            )
        self._check_game_state()

    def _check_game_state(self) -> None:
        try:
            state = GameState(self.game_state)
        except ValueError:
            raise SavedGameLoadError(
                f"Unrecognized game state {self.game_state}",
                context={"game_state": self.game_state},
            ) from None
        if state < MIN_STATE_FOR_SAVE or state == GameState.LOADING:
            raise SavedGameLoadError(
                f"Can't resume a game saved in state {state.name}",
                context={"game_state": state.name},
            )

    def attach_game(self, game: Game) -> None:
        """Attach a newly constructed game which is in the LOADING state.

        Raises:
            UnsupportedOperationError: if a game is already attached, or
                ``game`` isn't LOADING
            SavedGameLoadError: if game_state can't be resumed, or the game's
                max_players doesn't match the number of saved seats
        """
        if not isinstance(self._phase, Unloaded):
            raise UnsupportedOperationError("Model already has a game")
        if game.game_state != GameState.LOADING:
            raise UnsupportedOperationError(
                "Game must be LOADING to attach",
                required_state=GameState.LOADING.name,
                current_state=state_name(game.game_state),
            )
        self._check_game_state()
        if game.max_players != len(self.player_seats):
            raise SavedGameLoadError(
                f"Game has {game.max_players} seats but {len(self.player_seats)} were saved",
                context={"max_players": game.max_players, "player_seats": len(self.player_seats)},
            )

        self._phase = Loading(game)

    def create_loading_game(self) -> Game:
        """Build a Game from this model's fields, in LOADING state, and attach it.

        Seat count comes from the saved options, so it's checked against
        the saved seats by attach_game. Start time is set back by the saved
        duration.
        """
        game = Game.new(
            self.game_name,
            parse_options(self.game_options),
            start_time=utcnow() - timedelta(seconds=self.game_duration_seconds),
        )
        game.game_state = GameState.LOADING
        self.attach_game(game)

        for pn, seat in enumerate(self.player_seats):
            if seat.is_seat_vacant:
                continue
            player = game.sit_down(
                pn,
                seat.name or "",
                is_robot=seat.is_robot,
                is_built_in_robot=seat.is_built_in_robot,
            )
            player.total_vp = seat.total_vp

        logger.debug("Game %s loaded, waiting to resume", game.name)
        return game

    def resume_play(self, ignore_constraints: bool = False) -> Game:
        """Resume play of a loaded game: Check any constraints, update game state.

        Args:
            ignore_constraints: If true, don't check any Constraints

        Returns:
            Game ready to play, with game_state same as when it was saved

        Raises:
            UnsupportedOperationError: if the attached game isn't LOADING
            ConstraintViolationError: if a constraint isn't met; game stays LOADING
        """
        phase = self._phase
        if not isinstance(phase, Loading) or phase.game.game_state != GameState.LOADING:
            current = None if isinstance(phase, Unloaded) else state_name(phase.game.game_state)
            record_savegame_operation("resume", ok=False)
            raise UnsupportedOperationError(
                "Game must be LOADING to resume play",
                required_state=GameState.LOADING.name,
                current_state=current,
            )

        game = phase.game
        if not ignore_constraints:
            for constraint in self._constraints:
                if not constraint.evaluate(self, game):
                    RESUME_CONSTRAINT_FAILURES.labels(constraint=constraint.name).inc()
                    record_savegame_operation("resume", ok=False)
                    logger.warning(
                        "Game %s not resumed: constraint %s not met",
                        game.name,
                        constraint.name,
                    )
                    raise ConstraintViolationError(
                        f"Constraint not met: {constraint.name}",
                        constraint=constraint,
                    )

        game.game_state = self.game_state
        self._phase = Loaded(game)
        record_savegame_operation("resume", ok=True)
        logger.info("Resumed game %s in state %s", game.name, state_name(self.game_state))
        return game
