"""Data models for the rating engine."""

from dataclasses import dataclass


@dataclass
class Participant:
    """One player's entry in a match, as fed to the rating engine."""

    player_id: str
    position: int  # Finishing rank, 1 = best; equal values are a draw
    current_rating: float


@dataclass
class RatingResult:
    """Outcome of a rating update for a single participant."""

    player_id: str
    previous_rating: float
    new_rating: int
    rating_change: int


@dataclass
class RatingTier:
    """Named rating band."""

    name: str
    min_rating: int
