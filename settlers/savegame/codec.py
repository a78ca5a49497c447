"""JSON reading and writing of saved games.

The file holds the SavedGameModel fields under their camelCase names::

    {"modelVersion": 2300, "gameVersion": 1108, "gameName": "game1",
     "gameOptions": "PL=6", "gameDurationSeconds": 125, "gameState": 15,
     "playerSeats": [{"name": "Alice", "isSeatVacant": false, ...}, ...]}
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import pydantic

from ..errors import InvalidArgumentError, SavedGameLoadError
from ..metrics import record_savegame_operation
from ..models import Game
from .model import MODEL_VERSION, SavedGameModel

logger = logging.getLogger(__name__)

FILENAME_EXTENSION = ".game.json"

PathLike = Union[str, Path]


def dumps(model: SavedGameModel, indent: Optional[int] = 2) -> str:
    """Serialize a model's data fields to JSON."""
    return model.model_dump_json(by_alias=True, indent=indent)


def loads(text: Union[str, bytes], current_model_version: int = MODEL_VERSION) -> SavedGameModel:
    """Parse and check a saved game; no game is attached yet.

    Raises:
        SavedGameLoadError: if the JSON doesn't match the model, the model
            version is newer than current_model_version, or the saved
            game state can't be resumed
    """
    try:
        model = SavedGameModel.model_validate_json(text)
    except pydantic.ValidationError as e:
        raise SavedGameLoadError(
            f"Can't parse saved game: {e.error_count()} error(s)",
            context={"first_error": e.errors()[0]["msg"]},
        ) from e

    model.check_loadable(current_model_version)
    return model


def _save_path(directory: PathLike, filename: str) -> Path:
    if not filename or "/" in filename or "\\" in filename or ".." in filename:
        raise InvalidArgumentError(f"Bad savegame filename: {filename!r}", argument="filename")

    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Savegame directory not found: {directory}")

    if not filename.endswith(FILENAME_EXTENSION):
        filename += FILENAME_EXTENSION
    return directory / filename


def save_game(
    game: Game,
    directory: PathLike,
    filename: str,
    model_version: int = MODEL_VERSION,
    now: Optional[datetime] = None,
) -> Path:
    """Save a game to ``<directory>/<filename>.game.json``.

    Returns:
        Path of the written file

    Raises:
        InvalidStateError: if the game is still in initial placement
        InvalidArgumentError: if filename contains a path
        FileNotFoundError: if directory doesn't exist
    """
    path = _save_path(directory, filename)
    try:
        model = SavedGameModel.from_game(game, model_version=model_version, now=now)
        path.write_text(dumps(model), encoding="utf-8")
    except Exception:
        record_savegame_operation("save", ok=False)
        raise

    record_savegame_operation("save", ok=True)
    logger.info("Saved game %s to %s", game.name, path)
    return path


def load_game(
    directory: PathLike,
    filename: str,
    current_model_version: int = MODEL_VERSION,
) -> SavedGameModel:
    """Load a saved game file and attach a new game in LOADING state.

    Call ``resume_play()`` on the returned model to continue the game.

    Raises:
        SavedGameLoadError: if the file contents can't be loaded
        InvalidArgumentError: if filename contains a path
        FileNotFoundError: if directory or file doesn't exist
    """
    path = _save_path(directory, filename)
    try:
        model = loads(path.read_bytes(), current_model_version)
        model.create_loading_game()
    except Exception:
        record_savegame_operation("load", ok=False)
        raise

    record_savegame_operation("load", ok=True)
    logger.info("Loaded game %s from %s", model.game_name, path)
    return model
