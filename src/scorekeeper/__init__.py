from src.scorekeeper.game_registry import GameRegistry
from src.scorekeeper.leaderboard import build_leaderboard, get_game_stats
from src.scorekeeper.match_controller import MatchController, MatchValidationError
from src.scorekeeper.records import (
    AppState,
    Game,
    Match,
    MatchPlayerResult,
    Player,
    PlayerGameRating,
)
from src.scorekeeper.repository import Repository

__all__ = [
    "AppState",
    "Game",
    "GameRegistry",
    "Match",
    "MatchController",
    "MatchPlayerResult",
    "MatchValidationError",
    "Player",
    "PlayerGameRating",
    "Repository",
    "build_leaderboard",
    "get_game_stats",
]
