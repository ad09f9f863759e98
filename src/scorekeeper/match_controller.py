"""Match controller - validates a submitted result, rates it and records it."""

import logging
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from src.rating_engine.elo_calculator import rate, tally_outcomes
from src.rating_engine.models import Participant
from src.rating_engine.result_validator import ResultValidator, validate_player_name
from src.scorekeeper.formatting import format_rating_change
from src.scorekeeper.records import Match, MatchPlayerResult, PlayerGameRating
from src.scorekeeper.repository import Repository

logger = logging.getLogger(__name__)


class MatchValidationError(Exception):
    """Raised when a submitted match cannot be recorded.

    ``errors`` holds every problem found, not just the first.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class MatchController:
    """Orchestrates match submission.

    Coordinates between ResultValidator (input checks), the rating engine
    (new ratings) and the Repository (player, rating and match writes).
    """

    def __init__(self, repository: Repository):
        self.repository = repository
        self.validator = ResultValidator()

    def submit_match(
        self,
        game_id: str,
        player_results: Sequence[Mapping],
        notes: Optional[str] = None,
    ) -> Match:
        """Validate, rate and persist a match.

        Args:
            game_id: ID of the game the match was played in.
            player_results: ``{"player_name": str, "position": int}`` per
                player, position 1 being the winner.
            notes: Optional free-text notes stored with the match.

        Returns:
            The stored Match record with pre/post ratings for every player.

        Raises:
            MatchValidationError: If the ranking is malformed, a player name
                is invalid, or the game does not exist.
        """
        is_valid, errors = self.validator.validate(player_results)
        if not is_valid:
            logger.warning("Rejected match for game %s: %s", game_id, errors)
            raise MatchValidationError(errors)

        bad_names = [
            f'Invalid player name "{r["player_name"]}"'
            for r in player_results
            if not validate_player_name(r["player_name"])
        ]
        if bad_names:
            logger.warning("Rejected match for game %s: %s", game_id, bad_names)
            raise MatchValidationError(bad_names)

        game = self.repository.get_game(game_id)
        if game is None:
            raise MatchValidationError([f"Game {game_id} not found"])

        players = [self.repository.add_player(r["player_name"]) for r in player_results]
        positions: Dict[str, int] = {
            player.player_id: r["position"]
            for player, r in zip(players, player_results)
        }

        # Every rating change is applied to this one list and saved once.
        ratings = self.repository.get_ratings()
        records: Dict[str, PlayerGameRating] = {
            r.player_id: r for r in ratings if r.game_id == game.game_id
        }

        participants = []
        for player in players:
            record = records.get(player.player_id)
            participants.append(
                Participant(
                    player_id=player.player_id,
                    position=positions[player.player_id],
                    current_rating=(
                        record.rating if record is not None else game.default_rating
                    ),
                )
            )

        rating_results = rate(participants, game.k_factor)

        now = datetime.now().isoformat()
        match_results = []
        for player, result in zip(players, rating_results):
            position = positions[player.player_id]
            wins, losses, draws = tally_outcomes(
                position,
                [p for pid, p in positions.items() if pid != player.player_id],
            )

            record = records.get(player.player_id)
            if record is None:
                record = PlayerGameRating(
                    player_id=player.player_id,
                    game_id=game.game_id,
                    rating=game.default_rating,
                )
                ratings.append(record)

            record.rating = result.new_rating
            record.games_played += 1
            record.wins += wins
            record.losses += losses
            record.draws += draws
            record.last_updated = now

            match_results.append(
                MatchPlayerResult(
                    player_id=player.player_id,
                    player_name=player.name,
                    position=position,
                    previous_rating=result.previous_rating,
                    new_rating=result.new_rating,
                    rating_change=result.rating_change,
                )
            )

        match = Match.create(
            game_id=game.game_id,
            game_name=game.name,
            player_results=match_results,
            notes=(notes or "").strip() or None,
        )
        self._persist(match, ratings)

        logger.info(
            "Recorded %s match %s with %d players",
            game.name,
            match.match_id,
            len(match_results),
        )
        for mr in match_results:
            logger.info(
                "  %s: %s -> %s (%s)",
                mr.player_name,
                mr.previous_rating,
                mr.new_rating,
                format_rating_change(mr.rating_change),
            )

        return match

    def _persist(self, match: Match, ratings: List[PlayerGameRating]):
        """Write the match, then the updated ratings in a single save.

        If the ratings write fails the match list is restored, so the store
        is left as it was before the submission.
        """
        previous_matches = self.repository.get_matches()
        self.repository.save_matches(previous_matches + [match])

        try:
            self.repository.save_ratings(ratings)
        except Exception:
            logger.error("Saving ratings failed, removing match %s", match.match_id)
            self.repository.save_matches(previous_matches)
            raise

    def get_match_history(self, game_id: str) -> List[Match]:
        """Matches for a game, newest first."""
        matches = self.repository.get_matches_by_game(game_id)
        return sorted(matches, key=lambda m: m.created_at, reverse=True)
