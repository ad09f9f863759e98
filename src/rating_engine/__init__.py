from src.rating_engine.elo_calculator import (
    actual_score,
    calculate_win_rate,
    expected_score,
    get_rating_tier,
    rate,
    round_half_up,
    tally_outcomes,
)
from src.rating_engine.models import Participant, RatingResult, RatingTier
from src.rating_engine.result_validator import ResultValidator, validate_player_name

__all__ = [
    "Participant",
    "RatingResult",
    "RatingTier",
    "ResultValidator",
    "actual_score",
    "calculate_win_rate",
    "expected_score",
    "get_rating_tier",
    "rate",
    "round_half_up",
    "tally_outcomes",
    "validate_player_name",
]
