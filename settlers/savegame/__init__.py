"""Saving games to files and resuming them later."""

from .model import (
    MIN_STATE_FOR_SAVE,
    MODEL_VERSION,
    Constraint,
    Loaded,
    Loading,
    ModelPhase,
    PlayerInfo,
    SavedGameModel,
    Unloaded,
)
from .codec import FILENAME_EXTENSION, dumps, load_game, loads, save_game

__all__ = [
    "Constraint",
    "FILENAME_EXTENSION",
    "Loaded",
    "Loading",
    "MIN_STATE_FOR_SAVE",
    "MODEL_VERSION",
    "ModelPhase",
    "PlayerInfo",
    "SavedGameModel",
    "Unloaded",
    "dumps",
    "load_game",
    "loads",
    "save_game",
]
