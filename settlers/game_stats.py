"""Game statistics report for the server's debug commands."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from .models import Game, game_duration_seconds, state_name


def game_stats_lines(game: Game, now: Optional[datetime] = None) -> List[str]:
    """Lines describing a game's age, state and seats.

    Duration is rounded the same way as in saved games.
    """
    seconds = game_duration_seconds(game.start_time, now)
    minutes, secs = divmod(seconds, 60)

    lines = [
        f"-- Game statistics: {game.name}",
        f"-- Game started: {minutes} minutes {secs} seconds ago",
        f"-- State: {state_name(game.game_state)}",
    ]
    version = game.client_version_min_required()
    if version > 0:
        lines.append(f"-- Minimum client version: {version}")

    for pn in range(game.max_players):
        if game.is_seat_vacant(pn):
            lines.append(f"-- Seat {pn}: (vacant)")
            continue
        player = game.get_player(pn)
        kind = "built-in robot" if player.is_built_in_robot else ("robot" if player.is_robot else "human")
        lines.append(f"-- Seat {pn}: {player.name} ({kind}), {player.total_vp} VP")
    return lines
