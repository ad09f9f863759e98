"""Per-game leaderboard and summary statistics."""

import logging
from collections import Counter
from pathlib import Path
from typing import Dict

import pandas as pd

from src.rating_engine.elo_calculator import calculate_win_rate, get_rating_tier
from src.scorekeeper.atomic_io import atomic_write_csv
from src.scorekeeper.config import RECENT_ACTIVITY_LIMIT
from src.scorekeeper.repository import Repository

logger = logging.getLogger(__name__)

LEADERBOARD_COLUMNS = [
    "rank",
    "player_id",
    "player_name",
    "rating",
    "games_played",
    "wins",
    "losses",
    "draws",
    "win_rate",
    "tier",
    "last_updated",
]


def build_leaderboard(repository: Repository, game_id: str) -> pd.DataFrame:
    """Rank every rated player of a game by rating, highest first.

    Rating records whose player no longer exists are skipped. Players on
    equal ratings keep their storage order.
    """
    players = {p.player_id: p for p in repository.get_players()}

    rows = []
    for record in repository.get_ratings_by_game(game_id):
        player = players.get(record.player_id)
        if player is None:
            logger.warning(
                "Rating for unknown player %s in game %s", record.player_id, game_id
            )
            continue

        rows.append(
            {
                "player_id": player.player_id,
                "player_name": player.name,
                "rating": record.rating,
                "games_played": record.games_played,
                "wins": record.wins,
                "losses": record.losses,
                "draws": record.draws,
                "win_rate": calculate_win_rate(record.wins, record.losses, record.draws),
                "tier": get_rating_tier(record.rating).name,
                "last_updated": record.last_updated,
            }
        )

    if not rows:
        return pd.DataFrame(columns=LEADERBOARD_COLUMNS)

    df = pd.DataFrame(rows)
    df = df.sort_values("rating", ascending=False, kind="stable").reset_index(drop=True)
    df.insert(0, "rank", range(1, len(df) + 1))
    return df[LEADERBOARD_COLUMNS]


def get_game_stats(repository: Repository, game_id: str) -> Dict:
    """Headline numbers for a game's leaderboard page."""
    matches = repository.get_matches_by_game(game_id)
    leaderboard = build_leaderboard(repository, game_id)

    appearances = Counter(
        pr.player_name for match in matches for pr in match.player_results
    )
    most_active = appearances.most_common(1)[0][0] if appearances else None

    recent = sorted(matches, key=lambda m: m.created_at, reverse=True)

    return {
        "total_matches": len(matches),
        "total_players": len(leaderboard),
        "average_rating": (
            float(leaderboard["rating"].mean()) if not leaderboard.empty else 0.0
        ),
        "total_games_played": int(leaderboard["games_played"].sum()),
        "most_active_player": most_active,
        "recent_activity": recent[:RECENT_ACTIVITY_LIMIT],
    }


def export_leaderboard_csv(leaderboard: pd.DataFrame, path: Path) -> Path:
    """Write a leaderboard DataFrame to CSV."""
    atomic_write_csv(leaderboard, path, index=False)
    logger.info("Exported %d leaderboard rows to %s", len(leaderboard), path)
    return path
