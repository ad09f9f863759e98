"""Game registry - creates, edits and removes games."""

import logging
from typing import Dict, List, Optional

from src.rating_engine.config import DEFAULT_K_FACTOR, DEFAULT_RATING
from src.scorekeeper.config import (
    DEFAULT_RATING_MAX,
    DEFAULT_RATING_MIN,
    GAME_DESCRIPTION_MAX_LENGTH,
    GAME_NAME_MAX_LENGTH,
    GAME_NAME_MIN_LENGTH,
    K_FACTOR_MAX,
    K_FACTOR_MIN,
)
from src.scorekeeper.records import Game
from src.scorekeeper.repository import Repository

logger = logging.getLogger(__name__)


class GameRegistry:
    """Validates game settings and keeps the games collection up to date."""

    def __init__(self, repository: Repository):
        self.repository = repository

    def create_game(
        self,
        name: str,
        k_factor: float = DEFAULT_K_FACTOR,
        default_rating: float = DEFAULT_RATING,
        description: Optional[str] = None,
    ) -> Game:
        """
        Register a new game.

        Args:
            name: Display name (2-50 characters after trimming)
            k_factor: Elo K-factor (1-100)
            default_rating: Starting rating for new players (100-3000)
            description: Optional free text (up to 200 characters)

        Returns:
            The stored Game

        Raises:
            ValueError: If any setting is out of bounds
        """
        self._validate_name(name)
        self._validate_description(description)
        self._validate_k_factor(k_factor)
        self._validate_default_rating(default_rating)

        game = Game.create(
            name=name.strip(),
            k_factor=k_factor,
            default_rating=default_rating,
            description=(description or "").strip() or None,
        )
        self.repository.add_game(game)

        logger.info(
            "Created game %s: K=%s, default rating %s",
            game.name,
            game.k_factor,
            game.default_rating,
        )
        return game

    def update_game(self, game_id: str, **updates) -> Optional[Game]:
        """Validate and apply changes to an existing game.

        Returns:
            The updated Game, or None if no game has that id.
        """
        if "name" in updates:
            self._validate_name(updates["name"])
            updates["name"] = updates["name"].strip()
        if "description" in updates:
            self._validate_description(updates["description"])
            updates["description"] = (updates["description"] or "").strip() or None
        if "k_factor" in updates:
            self._validate_k_factor(updates["k_factor"])
        if "default_rating" in updates:
            self._validate_default_rating(updates["default_rating"])

        return self.repository.update_game(game_id, **updates)

    def delete_game(self, game_id: str) -> bool:
        return self.repository.delete_game(game_id)

    def list_games(self) -> List[Game]:
        return self.repository.get_games()

    def find_game(self, id_or_name: str) -> Optional[Game]:
        """Look a game up by id, falling back to a case-insensitive name match."""
        games = self.repository.get_games()
        for game in games:
            if game.game_id == id_or_name:
                return game
        key = id_or_name.strip().casefold()
        return next((g for g in games if g.name.casefold() == key), None)

    def get_game_summary(self, game_id: str) -> Dict[str, int]:
        """Number of matches and rated players recorded for a game."""
        return {
            "matches": len(self.repository.get_matches_by_game(game_id)),
            "players": len(self.repository.get_ratings_by_game(game_id)),
        }

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_name(name: str):
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValueError("Game name cannot be empty")
        if len(trimmed) < GAME_NAME_MIN_LENGTH:
            raise ValueError(
                f"Game name must be at least {GAME_NAME_MIN_LENGTH} characters"
            )
        if len(trimmed) > GAME_NAME_MAX_LENGTH:
            raise ValueError(
                f"Game name cannot exceed {GAME_NAME_MAX_LENGTH} characters"
            )

    @staticmethod
    def _validate_description(description: Optional[str]):
        if description and len(description) > GAME_DESCRIPTION_MAX_LENGTH:
            raise ValueError(
                f"Description cannot exceed {GAME_DESCRIPTION_MAX_LENGTH} characters"
            )

    @staticmethod
    def _validate_k_factor(k_factor: float):
        if not K_FACTOR_MIN <= k_factor <= K_FACTOR_MAX:
            raise ValueError(
                f"K-factor ({k_factor}) must be between {K_FACTOR_MIN} and {K_FACTOR_MAX}"
            )

    @staticmethod
    def _validate_default_rating(default_rating: float):
        if not DEFAULT_RATING_MIN <= default_rating <= DEFAULT_RATING_MAX:
            raise ValueError(
                f"Default rating ({default_rating}) must be between "
                f"{DEFAULT_RATING_MIN} and {DEFAULT_RATING_MAX}"
            )
