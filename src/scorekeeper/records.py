"""Persistent record types - games, players, per-game ratings and matches."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
import uuid


def _now() -> str:
    return datetime.now().isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Game:
    """A game that matches can be recorded for."""

    game_id: str
    name: str
    k_factor: float
    default_rating: float
    created_at: str
    updated_at: str
    description: Optional[str] = None

    @classmethod
    def create(
        cls,
        name: str,
        k_factor: float,
        default_rating: float,
        description: Optional[str] = None,
    ) -> "Game":
        timestamp = _now()
        return cls(
            game_id=_new_id(),
            name=name,
            k_factor=k_factor,
            default_rating=default_rating,
            created_at=timestamp,
            updated_at=timestamp,
            description=description,
        )


@dataclass
class Player:
    """A named player, shared across all games."""

    player_id: str
    name: str
    created_at: str

    @classmethod
    def create(cls, name: str) -> "Player":
        return cls(player_id=_new_id(), name=name.strip(), created_at=_now())


@dataclass
class PlayerGameRating:
    """A player's rating and record in one game."""

    player_id: str
    game_id: str
    rating: float
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    last_updated: str = field(default_factory=_now)


@dataclass
class MatchPlayerResult:
    """One player's line in a match record (pre/post rating snapshot)."""

    player_id: str
    player_name: str
    position: int
    previous_rating: float
    new_rating: int
    rating_change: int


@dataclass
class Match:
    """Immutable record of a submitted match."""

    match_id: str
    game_id: str
    game_name: str
    player_results: List[MatchPlayerResult]
    created_at: str
    notes: Optional[str] = None

    @classmethod
    def create(
        cls,
        game_id: str,
        game_name: str,
        player_results: List[MatchPlayerResult],
        notes: Optional[str] = None,
    ) -> "Match":
        return cls(
            match_id=_new_id(),
            game_id=game_id,
            game_name=game_name,
            player_results=player_results,
            created_at=_now(),
            notes=notes,
        )


@dataclass
class AppState:
    """Every stored collection at once."""

    games: List[Game] = field(default_factory=list)
    players: List[Player] = field(default_factory=list)
    matches: List[Match] = field(default_factory=list)
    ratings: List[PlayerGameRating] = field(default_factory=list)
