"""Command line front end for the scorekeeper.

Usage:
    python -m src.scorekeeper.cli [--data-dir DIR] COMMAND ...

Examples:
    python -m src.scorekeeper.cli add-game Catan --k-factor 24
    python -m src.scorekeeper.cli submit-match Catan Alice=1 Bob=2 Carol=2
    python -m src.scorekeeper.cli leaderboard Catan --csv catan.csv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from src.logging_config import setup_logging
from src.rating_engine.config import DEFAULT_K_FACTOR, DEFAULT_RATING
from src.scorekeeper.formatting import format_date, format_rating_change
from src.scorekeeper.game_registry import GameRegistry
from src.scorekeeper.leaderboard import (
    build_leaderboard,
    export_leaderboard_csv,
    get_game_stats,
)
from src.scorekeeper.match_controller import MatchController, MatchValidationError
from src.scorekeeper.records import Game
from src.scorekeeper.repository import Repository

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Multi-player Elo scorekeeper")
    parser.add_argument("--data-dir", type=Path, default=None)
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    add_p = sub.add_parser("add-game", help="Register a new game")
    add_p.add_argument("name")
    add_p.add_argument("--k-factor", type=float, default=DEFAULT_K_FACTOR)
    add_p.add_argument("--default-rating", type=float, default=DEFAULT_RATING)
    add_p.add_argument("--description", default=None)

    sub.add_parser("list-games", help="List registered games")

    del_p = sub.add_parser("delete-game", help="Delete a game and its history")
    del_p.add_argument("game")

    submit_p = sub.add_parser("submit-match", help="Record a match result")
    submit_p.add_argument("game")
    submit_p.add_argument("results", nargs="+", metavar="NAME=POSITION")
    submit_p.add_argument("--notes", default=None)

    board_p = sub.add_parser("leaderboard", help="Show a game's leaderboard")
    board_p.add_argument("game")
    board_p.add_argument("--csv", type=Path, default=None)

    matches_p = sub.add_parser("matches", help="Show a game's match history")
    matches_p.add_argument("game")

    export_p = sub.add_parser("export", help="Export all data as JSON")
    export_p.add_argument("--output", type=Path, default=None)

    import_p = sub.add_parser("import", help="Replace all data from a JSON export")
    import_p.add_argument("path", type=Path)

    sub.add_parser("clear", help="Delete all stored data")

    return parser


def parse_results(tokens: List[str]) -> List[Dict]:
    """Turn ``["Alice=1", "Bob=2"]`` into player result dicts.

    Raises:
        ValueError: If a token is not ``NAME=POSITION`` with an integer position.
    """
    results = []
    for token in tokens:
        name, sep, position = token.rpartition("=")
        if not sep:
            raise ValueError(f"Expected NAME=POSITION, got {token!r}")
        try:
            results.append({"player_name": name, "position": int(position)})
        except ValueError:
            raise ValueError(f"Position must be an integer in {token!r}") from None
    return results


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    repository = Repository(storage_dir=args.data_dir)
    registry = GameRegistry(repository)

    try:
        if args.command == "add-game":
            game = registry.create_game(
                args.name,
                k_factor=args.k_factor,
                default_rating=args.default_rating,
                description=args.description,
            )
            print(f"Created game {game.name} ({game.game_id})")
        elif args.command == "list-games":
            list_games(registry)
        elif args.command == "delete-game":
            game = _require_game(registry, args.game)
            registry.delete_game(game.game_id)
            print(f"Deleted game {game.name}")
        elif args.command == "submit-match":
            game = _require_game(registry, args.game)
            submit_match(repository, game, parse_results(args.results), args.notes)
        elif args.command == "leaderboard":
            game = _require_game(registry, args.game)
            show_leaderboard(repository, game, args.csv)
        elif args.command == "matches":
            game = _require_game(registry, args.game)
            show_matches(repository, game)
        elif args.command == "export":
            data = repository.export_data()
            if args.output:
                args.output.write_text(data, encoding="utf-8")
                print(f"Exported data to {args.output}")
            else:
                print(data)
        elif args.command == "import":
            if not repository.import_data(args.path.read_text(encoding="utf-8")):
                print(f"Error: {args.path} is not a valid export", file=sys.stderr)
                return 1
            print(f"Imported data from {args.path}")
        elif args.command == "clear":
            repository.clear_all_data()
            print("All data cleared")
    except MatchValidationError as e:
        for error in e.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1
    except (ValueError, LookupError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def _require_game(registry: GameRegistry, id_or_name: str) -> Game:
    game = registry.find_game(id_or_name)
    if game is None:
        raise LookupError(f"Game {id_or_name!r} not found")
    return game


def list_games(registry: GameRegistry) -> None:
    games = registry.list_games()
    if not games:
        print("No games registered")
        return
    for game in games:
        summary = registry.get_game_summary(game.game_id)
        print(
            f"{game.name} [{game.game_id}] K={game.k_factor:g} "
            f"start={game.default_rating:g} "
            f"matches={summary['matches']} players={summary['players']}"
        )


def submit_match(
    repository: Repository, game: Game, results: List[Dict], notes: Optional[str]
) -> None:
    match = MatchController(repository).submit_match(game.game_id, results, notes)
    print(f"Recorded {game.name} match {match.match_id}")
    for pr in sorted(match.player_results, key=lambda r: r.position):
        print(
            f"  #{pr.position} {pr.player_name}: {pr.previous_rating:g} -> "
            f"{pr.new_rating} ({format_rating_change(pr.rating_change)})"
        )


def show_leaderboard(repository: Repository, game: Game, csv_path: Optional[Path]) -> None:
    leaderboard = build_leaderboard(repository, game.game_id)
    if leaderboard.empty:
        print(f"No ratings recorded for {game.name} yet")
    else:
        columns = ["rank", "player_name", "rating", "games_played", "win_rate", "tier"]
        print(leaderboard[columns].to_string(index=False))

        stats = get_game_stats(repository, game.game_id)
        print(
            f"\n{stats['total_matches']} matches, {stats['total_players']} players, "
            f"average rating {stats['average_rating']:.0f}"
        )

    if csv_path is not None:
        export_leaderboard_csv(leaderboard, csv_path)
        print(f"Wrote {csv_path}")


def show_matches(repository: Repository, game: Game) -> None:
    matches = MatchController(repository).get_match_history(game.game_id)
    if not matches:
        print(f"No matches recorded for {game.name}")
        return
    for match in matches:
        line = ", ".join(
            f"{pr.player_name} #{pr.position} ({format_rating_change(pr.rating_change)})"
            for pr in sorted(match.player_results, key=lambda r: r.position)
        )
        print(f"{format_date(match.created_at)}  {line}")
        if match.notes:
            print(f"    {match.notes}")


if __name__ == "__main__":
    sys.exit(main())
