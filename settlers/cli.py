"""settlers-savegame: inspect saved games and server feature lists.

Examples:
    settlers-savegame inspect saves/game1.game.json
    settlers-savegame stats saves/game1.game.json
    settlers-savegame features --decode ";ch;users;"
    settlers-savegame features --encode users ch
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ServerConfig, load_config
from .core.logging_config import configure_third_party_loggers, setup_logging
from .errors import SettlersError
from .game_stats import game_stats_lines
from .models import state_name
from .savegame import SavedGameModel, loads
from .server_features import ServerFeatures


def describe_model(model: SavedGameModel) -> List[str]:
    """Summary lines for a saved game."""
    minutes, secs = divmod(model.game_duration_seconds, 60)
    lines = [
        f"Game: {model.game_name}",
        f"Model version: {model.model_version}",
        f"Minimum client version: {model.game_version}",
        f"Options: {model.game_options or '(none)'}",
        f"State: {state_name(model.game_state)}",
        f"Duration: {minutes}m {secs:02d}s",
    ]
    for pn, seat in enumerate(model.player_seats):
        if seat.is_seat_vacant:
            lines.append(f"Seat {pn}: (vacant)")
            continue
        kind = "built-in robot" if seat.is_built_in_robot else ("robot" if seat.is_robot else "human")
        lines.append(f"Seat {pn}: {seat.name} ({kind}) {seat.total_vp} VP")
    return lines


def _cmd_inspect(args: argparse.Namespace, config: ServerConfig) -> int:
    model = loads(Path(args.path).read_bytes(), config.model_version)
    for line in describe_model(model):
        print(line)
    return 0


def _cmd_stats(args: argparse.Namespace, config: ServerConfig) -> int:
    model = loads(Path(args.path).read_bytes(), config.model_version)
    model.create_loading_game()
    game = model.resume_play(ignore_constraints=True)
    for line in game_stats_lines(game):
        print(line)
    return 0


def _cmd_features(args: argparse.Namespace, config: ServerConfig) -> int:
    if args.decode is not None:
        features = ServerFeatures.from_encoded(args.decode)
        for name in features.features:
            print(name)
        return 0

    features = ServerFeatures()
    for name in args.encode:
        features.add(name)
    print(features.encoded_list() or "")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="settlers-savegame",
        description="Inspect saved games and server feature lists",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("--log-level", default=None, help="Logging level (default from config)")
    sub = parser.add_subparsers(dest="command", required=True)

    inspect = sub.add_parser("inspect", help="Print a saved game's summary")
    inspect.add_argument("path", help="Path to a .game.json file")
    inspect.set_defaults(func=_cmd_inspect)

    stats = sub.add_parser("stats", help="Print game statistics for a saved game")
    stats.add_argument("path", help="Path to a .game.json file")
    stats.set_defaults(func=_cmd_stats)

    features = sub.add_parser("features", help="Encode or decode a server features list")
    group = features.add_mutually_exclusive_group(required=True)
    group.add_argument("--decode", metavar="TOKEN", help="Encoded list to decode")
    group.add_argument("--encode", metavar="NAME", nargs="+", help="Feature names to encode")
    features.set_defaults(func=_cmd_features)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        setup_logging("settlers", level=args.log_level or config.log_level)
        configure_third_party_loggers()
        return args.func(args, config)
    except (SettlersError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
