"""Multi-player Elo rating calculation.

Each participant is scored against every other participant in the match as
if they had played a separate head-to-head game. The expected and actual
scores are averaged over all opponents, and the gap between the two averages
scaled by the game's K-factor is the rating change.
"""

import logging
import math
from typing import Iterable, List, Tuple

from src.rating_engine.config import (
    DRAW_SCORE,
    ELO_SCALE,
    LOSS_SCORE,
    RATING_FLOOR,
    RATING_TIERS,
    WIN_SCORE,
)
from src.rating_engine.models import Participant, RatingResult, RatingTier

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding toward +inf.

    Unlike the built-in ``round``, ties never go to the even neighbour:
    ``2.5 -> 3`` and ``-2.5 -> -2``.
    """
    return int(math.floor(value + 0.5))


def expected_score(rating: float, opponent_rating: float) -> float:
    """Probability that a player rated ``rating`` beats ``opponent_rating``."""
    return 1 / (1 + 10 ** ((opponent_rating - rating) / ELO_SCALE))


def actual_score(position: int, opponent_position: int) -> float:
    """Head-to-head score from finishing positions (lower position wins)."""
    if position < opponent_position:
        return WIN_SCORE
    if position == opponent_position:
        return DRAW_SCORE
    return LOSS_SCORE


def rate(participants: List[Participant], k_factor: float) -> List[RatingResult]:
    """Compute new ratings for every participant of one match.

    Args:
        participants: All players in the match, unique by ``player_id``.
            Must already have passed :class:`ResultValidator`.
        k_factor: Maximum rating swing for a single match.

    Returns:
        One :class:`RatingResult` per participant, in input order.
    """
    results: List[RatingResult] = []

    for player in participants:
        total_expected = 0.0
        total_actual = 0.0
        opponents = 0

        for opponent in participants:
            if opponent.player_id == player.player_id:
                continue
            total_expected += expected_score(
                player.current_rating, opponent.current_rating
            )
            total_actual += actual_score(player.position, opponent.position)
            opponents += 1

        if opponents == 0:
            results.append(
                RatingResult(
                    player_id=player.player_id,
                    previous_rating=player.current_rating,
                    new_rating=max(
                        RATING_FLOOR, round_half_up(player.current_rating)
                    ),
                    rating_change=0,
                )
            )
            continue

        avg_expected = total_expected / opponents
        avg_actual = total_actual / opponents
        change = k_factor * (avg_actual - avg_expected)

        # Both values round from the real-valued change independently.
        new_rating = max(RATING_FLOOR, round_half_up(player.current_rating + change))

        logger.debug(
            "%s: expected=%.4f actual=%.4f change=%.2f",
            player.player_id,
            avg_expected,
            avg_actual,
            change,
        )

        results.append(
            RatingResult(
                player_id=player.player_id,
                previous_rating=player.current_rating,
                new_rating=new_rating,
                rating_change=round_half_up(change),
            )
        )

    return results


def tally_outcomes(position: int, other_positions: Iterable[int]) -> Tuple[int, int, int]:
    """Count head-to-head wins, losses and draws against the other positions.

    Returns:
        ``(wins, losses, draws)`` tuple.
    """
    wins = losses = draws = 0
    for other in other_positions:
        if position < other:
            wins += 1
        elif position > other:
            losses += 1
        else:
            draws += 1
    return wins, losses, draws


def calculate_win_rate(wins: int, losses: int, draws: int) -> int:
    """Win rate as a whole percentage, with draws worth half a win."""
    total_games = wins + losses + draws
    if total_games == 0:
        return 0
    points = wins + draws * 0.5
    return round_half_up(points / total_games * 100)


def get_rating_tier(rating: float) -> RatingTier:
    """Highest tier whose minimum the rating reaches."""
    name, min_rating = RATING_TIERS[0]
    for tier_name, tier_min in RATING_TIERS:
        if rating >= tier_min:
            name, min_rating = tier_name, tier_min
        else:
            break
    return RatingTier(name=name, min_rating=min_rating)
