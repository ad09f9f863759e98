"""Repository - games, players, matches and ratings stored as JSON files.

Each collection lives in its own file and is always read and written whole:
load the list, change it in memory, write the full list back.
"""

import json
import logging
import shutil
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from src.rating_engine.config import DEFAULT_RATING
from src.scorekeeper.atomic_io import atomic_write_json
from src.scorekeeper.config import DATA_DIR, STORAGE_FILES
from src.scorekeeper.records import (
    AppState,
    Game,
    Match,
    MatchPlayerResult,
    Player,
    PlayerGameRating,
)

logger = logging.getLogger(__name__)

GAME_UPDATABLE_FIELDS = {"name", "description", "k_factor", "default_rating"}
RATING_UPDATABLE_FIELDS = {"rating", "games_played", "wins", "losses", "draws"}


def _name_key(name: str) -> str:
    return name.strip().casefold()


class Repository:
    """Local store for the four scorekeeper collections."""

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = storage_dir or DATA_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Raw collection access
    # ------------------------------------------------------------------

    def _collection_path(self, collection: str) -> Path:
        return self.storage_dir / STORAGE_FILES[collection]

    def _read_collection(self, collection: str) -> List[Dict]:
        """Load a collection, treating a missing or corrupt file as empty.

        A corrupt file is moved aside to ``<name>.corrupt`` so the next save
        does not overwrite its contents.
        """
        filepath = self._collection_path(collection)

        if not filepath.exists():
            return []

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Could not parse %s from %s: %s", collection, filepath, e)
            self._quarantine(filepath)
            return []
        except OSError as e:
            logger.warning("Could not read %s from %s: %s", collection, filepath, e)
            return []

        if not isinstance(data, list):
            logger.warning("Ignoring %s: expected a list in %s", collection, filepath)
            self._quarantine(filepath)
            return []

        return data

    @staticmethod
    def _quarantine(filepath: Path) -> Path:
        target = filepath.with_name(filepath.name + ".corrupt")
        shutil.move(str(filepath), str(target))
        logger.warning("Moved unreadable file to %s", target)
        return target

    def _write_collection(self, collection: str, items: List[Dict]):
        atomic_write_json(items, self._collection_path(collection))
        logger.debug("Saved %d %s", len(items), collection)

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    def get_games(self) -> List[Game]:
        return [self._dict_to_game(d) for d in self._read_collection("games")]

    def save_games(self, games: List[Game]):
        self._write_collection("games", [asdict(g) for g in games])

    def get_game(self, game_id: str) -> Optional[Game]:
        return next((g for g in self.get_games() if g.game_id == game_id), None)

    def add_game(self, game: Game) -> Game:
        games = self.get_games()
        games.append(game)
        self.save_games(games)
        logger.info("Added game %s (%s)", game.name, game.game_id)
        return game

    def update_game(self, game_id: str, **updates) -> Optional[Game]:
        """Apply field updates to a game.

        Returns:
            The updated Game, or None if no game has that id.

        Raises:
            ValueError: If an update names a field that cannot be changed.
        """
        unknown = set(updates) - GAME_UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update game fields: {sorted(unknown)}")

        games = self.get_games()
        for game in games:
            if game.game_id == game_id:
                for key, value in updates.items():
                    setattr(game, key, value)
                game.updated_at = datetime.now().isoformat()
                self.save_games(games)
                logger.info("Updated game %s: %s", game_id, sorted(updates))
                return game

        return None

    def delete_game(self, game_id: str) -> bool:
        """Delete a game together with its matches and ratings.

        Returns:
            True if deleted, False if not found.
        """
        games = self.get_games()
        remaining = [g for g in games if g.game_id != game_id]

        if len(remaining) == len(games):
            return False

        self.save_games(remaining)
        self.delete_matches_by_game(game_id)
        self.delete_ratings_by_game(game_id)

        logger.info("Deleted game %s", game_id)
        return True

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def get_players(self) -> List[Player]:
        return [self._dict_to_player(d) for d in self._read_collection("players")]

    def save_players(self, players: List[Player]):
        self._write_collection("players", [asdict(p) for p in players])

    def get_player_by_name(self, name: str) -> Optional[Player]:
        key = _name_key(name)
        return next((p for p in self.get_players() if _name_key(p.name) == key), None)

    def add_player(self, name: str) -> Player:
        """Return the player with this name (case-insensitive), creating it if new."""
        players = self.get_players()
        key = _name_key(name)

        for player in players:
            if _name_key(player.name) == key:
                return player

        player = Player.create(name)
        players.append(player)
        self.save_players(players)
        logger.info("Added player %s (%s)", player.name, player.player_id)
        return player

    # ------------------------------------------------------------------
    # Matches
    # ------------------------------------------------------------------

    def get_matches(self) -> List[Match]:
        return [self._dict_to_match(d) for d in self._read_collection("matches")]

    def save_matches(self, matches: List[Match]):
        self._write_collection("matches", [asdict(m) for m in matches])

    def add_match(self, match: Match) -> Match:
        matches = self.get_matches()
        matches.append(match)
        self.save_matches(matches)
        return match

    def get_matches_by_game(self, game_id: str) -> List[Match]:
        return [m for m in self.get_matches() if m.game_id == game_id]

    def delete_matches_by_game(self, game_id: str):
        matches = self.get_matches()
        self.save_matches([m for m in matches if m.game_id != game_id])

    # ------------------------------------------------------------------
    # Ratings
    # ------------------------------------------------------------------

    def get_ratings(self) -> List[PlayerGameRating]:
        return [self._dict_to_rating(d) for d in self._read_collection("ratings")]

    def save_ratings(self, ratings: List[PlayerGameRating]):
        self._write_collection("ratings", [asdict(r) for r in ratings])

    def get_player_rating(
        self, player_id: str, game_id: str
    ) -> Optional[PlayerGameRating]:
        return next(
            (
                r
                for r in self.get_ratings()
                if r.player_id == player_id and r.game_id == game_id
            ),
            None,
        )

    def update_player_rating(
        self, player_id: str, game_id: str, **updates
    ) -> PlayerGameRating:
        """Update a player's rating record for a game, creating it if missing.

        A new record starts from the game's default rating (or the global
        default when the game is unknown) before ``updates`` are applied.

        Raises:
            ValueError: If an update names a field that cannot be changed.
        """
        unknown = set(updates) - RATING_UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update rating fields: {sorted(unknown)}")

        ratings = self.get_ratings()
        record = next(
            (r for r in ratings if r.player_id == player_id and r.game_id == game_id),
            None,
        )

        if record is None:
            game = self.get_game(game_id)
            record = PlayerGameRating(
                player_id=player_id,
                game_id=game_id,
                rating=game.default_rating if game else DEFAULT_RATING,
            )
            ratings.append(record)

        for key, value in updates.items():
            setattr(record, key, value)
        record.last_updated = datetime.now().isoformat()

        self.save_ratings(ratings)
        return record

    def get_ratings_by_game(self, game_id: str) -> List[PlayerGameRating]:
        return [r for r in self.get_ratings() if r.game_id == game_id]

    def delete_ratings_by_game(self, game_id: str):
        ratings = self.get_ratings()
        self.save_ratings([r for r in ratings if r.game_id != game_id])

    # ------------------------------------------------------------------
    # Whole-store operations
    # ------------------------------------------------------------------

    def get_app_state(self) -> AppState:
        return AppState(
            games=self.get_games(),
            players=self.get_players(),
            matches=self.get_matches(),
            ratings=self.get_ratings(),
        )

    def export_data(self) -> str:
        """Serialize every collection to a single JSON document."""
        return json.dumps(asdict(self.get_app_state()), indent=2, ensure_ascii=False)

    def import_data(self, json_data: str) -> bool:
        """Replace every collection with the contents of an exported document.

        Returns:
            True on success, False if the document is malformed (nothing is
            written in that case).
        """
        try:
            data = json.loads(json_data)
            if not isinstance(data, dict) or not set(STORAGE_FILES).issubset(data):
                raise ValueError("Invalid data structure")

            games = [self._dict_to_game(d) for d in data["games"]]
            players = [self._dict_to_player(d) for d in data["players"]]
            matches = [self._dict_to_match(d) for d in data["matches"]]
            ratings = [self._dict_to_rating(d) for d in data["ratings"]]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Import rejected: %s", e)
            return False

        self.save_games(games)
        self.save_players(players)
        self.save_matches(matches)
        self.save_ratings(ratings)

        logger.info(
            "Imported %d games, %d players, %d matches, %d ratings",
            len(games),
            len(players),
            len(matches),
            len(ratings),
        )
        return True

    def clear_all_data(self):
        for collection in STORAGE_FILES:
            filepath = self._collection_path(collection)
            if filepath.exists():
                filepath.unlink()
        logger.info("Cleared all data in %s", self.storage_dir)

    # ------------------------------------------------------------------
    # Deserialization
    # ------------------------------------------------------------------

    @staticmethod
    def _dict_to_game(data: Dict) -> Game:
        return Game(
            game_id=data["game_id"],
            name=data["name"],
            k_factor=data["k_factor"],
            default_rating=data["default_rating"],
            created_at=data["created_at"],
            updated_at=data.get("updated_at", data["created_at"]),
            description=data.get("description"),
        )

    @staticmethod
    def _dict_to_player(data: Dict) -> Player:
        return Player(
            player_id=data["player_id"],
            name=data["name"],
            created_at=data["created_at"],
        )

    @staticmethod
    def _dict_to_match(data: Dict) -> Match:
        player_results = [
            MatchPlayerResult(
                player_id=pr["player_id"],
                player_name=pr["player_name"],
                position=pr["position"],
                previous_rating=pr["previous_rating"],
                new_rating=pr["new_rating"],
                rating_change=pr["rating_change"],
            )
            for pr in data["player_results"]
        ]
        return Match(
            match_id=data["match_id"],
            game_id=data["game_id"],
            game_name=data["game_name"],
            player_results=player_results,
            created_at=data["created_at"],
            notes=data.get("notes"),
        )

    @staticmethod
    def _dict_to_rating(data: Dict) -> PlayerGameRating:
        return PlayerGameRating(
            player_id=data["player_id"],
            game_id=data["game_id"],
            rating=data["rating"],
            games_played=data.get("games_played", 0),
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            draws=data.get("draws", 0),
            last_updated=data.get("last_updated", ""),
        )
