"""
Pydantic Models for the live game, as seen by the savegame layer.

The rules engine owns the authoritative game; these models carry the
fields which are read when saving and written when loading.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from enum import IntEnum
from datetime import datetime, timedelta, timezone

from .game_options import (
    DEFAULT_MAX_PLAYERS,
    GameOption,
    max_players_for,
    min_client_version,
)


class GameState(IntEnum):
    """Game state machine values.

    Numeric order matters: initial placement states are all below
    ROLL_OR_CARD, and normal play states are above it.
    """
    NEW = 0
    READY = 1
    READY_RESET_WAIT_ROBOT_DISMISS = 4
    START1A = 5
    START1B = 6
    START2A = 10
    START2B = 11
    START3A = 12
    START3B = 13
    STARTS_WAITING_FOR_PICK_GOLD_RESOURCE = 14
    ROLL_OR_CARD = 15
    PLAY1 = 20
    PLACING_ROAD = 30
    PLACING_SETTLEMENT = 31
    PLACING_CITY = 32
    PLACING_ROBBER = 33
    PLACING_PIRATE = 34
    PLACING_SHIP = 35
    PLACING_FREE_ROAD1 = 40
    PLACING_FREE_ROAD2 = 41
    PLACING_INV_ITEM = 42
    WAITING_FOR_DISCARDS = 50
    WAITING_FOR_ROB_CHOOSE_PLAYER = 51
    WAITING_FOR_DISCOVERY = 52
    WAITING_FOR_MONOPOLY = 53
    WAITING_FOR_ROBBER_OR_PIRATE = 54
    WAITING_FOR_ROB_CLOTH_OR_RESOURCE = 55
    WAITING_FOR_PICK_GOLD_RESOURCE = 56
    SPECIAL_BUILDING = 100
    LOADING = 990
    OVER = 1000
    RESET_OLD = 1001


def state_name(state: int) -> str:
    """Name of a state tag, or its number if not recognized"""
    try:
        return GameState(state).name
    except ValueError:
        return str(state)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(when: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when


def game_duration_seconds(start_time: datetime, now: Optional[datetime] = None) -> int:
    """Whole seconds from start_time to now, rounding half up.

    Used by both saved games and the game stats report so their durations
    agree exactly. Either time may be naive; naive times are UTC.
    """
    if now is None:
        now = utcnow()
    elapsed_ms = (as_utc(now) - as_utc(start_time)) // timedelta(milliseconds=1)
    return max(0, (elapsed_ms + 500) // 1000)


class Player(BaseModel):
    """Player sitting at one seat"""
    player_number: int = Field(alias="playerNumber")
    name: Optional[str] = None
    total_vp: int = Field(0, ge=0, alias="totalVP")
    is_robot: bool = Field(False, alias="isRobot")
    is_built_in_robot: bool = Field(False, alias="isBuiltInRobot")

    class Config:
        populate_by_name = True


class Game(BaseModel):
    """Live game: name, options, seats and current state"""
    name: str
    game_options: Optional[Dict[str, GameOption]] = Field(None, alias="gameOptions")
    max_players: int = Field(DEFAULT_MAX_PLAYERS, alias="maxPlayers")
    game_state: int = Field(GameState.NEW, alias="gameState")
    start_time: datetime = Field(default_factory=utcnow, alias="startTime")
    players: List[Player] = Field(default_factory=list)
    seat_vacant: List[bool] = Field(default_factory=list, alias="seatVacant")

    class Config:
        populate_by_name = True

    @classmethod
    def new(
        cls,
        name: str,
        game_options: Optional[Dict[str, GameOption]] = None,
        start_time: Optional[datetime] = None,
    ) -> "Game":
        """New game in state NEW with every seat vacant.

        The number of seats comes from the ``PL`` option, if set.
        """
        max_players = max_players_for(game_options)
        return cls(
            name=name,
            game_options=game_options,
            max_players=max_players,
            start_time=start_time or utcnow(),
            players=[Player(player_number=pn) for pn in range(max_players)],
            seat_vacant=[True] * max_players,
        )

    def get_player(self, player_number: int) -> Player:
        return self.players[player_number]

    def is_seat_vacant(self, player_number: int) -> bool:
        return self.seat_vacant[player_number]

    def sit_down(
        self,
        player_number: int,
        name: str,
        is_robot: bool = False,
        is_built_in_robot: bool = False,
    ) -> Player:
        """Seat a player; returns the seat's Player."""
        player = self.players[player_number]
        player.name = name
        player.is_robot = is_robot
        player.is_built_in_robot = is_built_in_robot
        self.seat_vacant[player_number] = False
        return player

    def client_version_min_required(self) -> int:
        """Minimum client version needed to join, or -1 for any version"""
        return min_client_version(self.game_options)
