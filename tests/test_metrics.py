"""Tests for savegame counters and the warnings logged when a save or resume is refused."""

import logging

import pytest
from prometheus_client import REGISTRY

from settlers.errors import (
    ConstraintViolationError,
    InvalidStateError,
    SavedGameLoadError,
    UnsupportedOperationError,
)
from settlers.models import GameState
from settlers.savegame import Constraint, SavedGameModel, load_game, save_game


class NeverMet(Constraint):
    name = "never_met"

    def evaluate(self, model, game) -> bool:
        return False


@pytest.fixture(autouse=True)
def _propagate_settlers_logs(monkeypatch):
    # The CLI sets up the "settlers" logger without propagation; caplog listens on root.
    monkeypatch.setattr(logging.getLogger("settlers"), "propagate", True)


def _operations(operation: str, outcome: str) -> float:
    value = REGISTRY.get_sample_value(
        "settlers_savegame_operations_total",
        {"operation": operation, "outcome": outcome},
    )
    return value or 0.0


def _constraint_failures(name: str) -> float:
    value = REGISTRY.get_sample_value(
        "settlers_resume_constraint_failures_total", {"constraint": name}
    )
    return value or 0.0


def _warnings(caplog) -> list:
    return [
        record.getMessage()
        for record in caplog.records
        if record.levelno == logging.WARNING
    ]


class TestSavegameOperationCounters:
    """Each save, load and resume bumps exactly one outcome."""

    def test_save_ok(self, four_player_game, now, tmp_path):
        before = _operations("save", "ok")
        save_game(four_player_game, tmp_path, "game1", now=now)
        assert _operations("save", "ok") == before + 1

    def test_save_error(self, make_game, tmp_path):
        before_ok = _operations("save", "ok")
        before_error = _operations("save", "error")
        with pytest.raises(InvalidStateError):
            save_game(make_game(state=GameState.START1A), tmp_path, "early")
        assert _operations("save", "error") == before_error + 1
        assert _operations("save", "ok") == before_ok

    def test_load_ok(self, four_player_game, now, tmp_path):
        save_game(four_player_game, tmp_path, "game1", now=now)
        before = _operations("load", "ok")
        load_game(tmp_path, "game1")
        assert _operations("load", "ok") == before + 1

    def test_load_error(self, tmp_path):
        (tmp_path / "bad.game.json").write_text("{}")
        before = _operations("load", "error")
        with pytest.raises(SavedGameLoadError):
            load_game(tmp_path, "bad")
        assert _operations("load", "error") == before + 1

    def test_resume_error_when_not_loading(self):
        before = _operations("resume", "error")
        with pytest.raises(UnsupportedOperationError):
            SavedGameModel().resume_play()
        assert _operations("resume", "error") == before + 1

    def test_resume_ok(self, four_player_game, now, tmp_path):
        save_game(four_player_game, tmp_path, "game1", now=now)
        model = load_game(tmp_path, "game1")
        before = _operations("resume", "ok")
        model.resume_play()
        assert _operations("resume", "ok") == before + 1


class TestConstraintFailures:

    def test_counted_by_constraint_name(self, four_player_game, now, tmp_path, caplog):
        save_game(four_player_game, tmp_path, "game1", now=now)
        model = load_game(tmp_path, "game1")
        model.add_constraint(NeverMet())
        before_failures = _constraint_failures("never_met")
        before_error = _operations("resume", "error")
        caplog.set_level(logging.WARNING)

        with pytest.raises(ConstraintViolationError):
            model.resume_play()

        assert _constraint_failures("never_met") == before_failures + 1
        assert _operations("resume", "error") == before_error + 1
        assert any(
            "not resumed" in message and "never_met" in message
            for message in _warnings(caplog)
        )

    def test_ignored_constraints_not_counted(self, four_player_game, now, tmp_path):
        save_game(four_player_game, tmp_path, "game1", now=now)
        model = load_game(tmp_path, "game1")
        model.add_constraint(NeverMet())
        before = _constraint_failures("never_met")
        model.resume_play(ignore_constraints=True)
        assert _constraint_failures("never_met") == before


class TestRefusedSaveWarnings:

    def test_early_state(self, make_game, now, caplog):
        caplog.set_level(logging.WARNING)
        with pytest.raises(InvalidStateError):
            SavedGameModel.from_game(make_game(state=GameState.START3B), now=now)
        assert any("Can't save game game1" in message for message in _warnings(caplog))

    def test_unrecognized_state(self, make_game, now, caplog):
        caplog.set_level(logging.WARNING)
        with pytest.raises(InvalidStateError):
            SavedGameModel.from_game(make_game(state=17), now=now)
        assert any("unrecognized state 17" in message for message in _warnings(caplog))
