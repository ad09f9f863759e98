"""Match result validation - decides whether a submitted ranking can be rated."""

import re
from collections import Counter
from typing import Dict, List, Mapping, Sequence, Tuple

from src.rating_engine.config import (
    MIN_PARTICIPANTS,
    PLAYER_NAME_MAX_LENGTH,
    PLAYER_NAME_MIN_LENGTH,
)

_PLAYER_NAME_RE = re.compile(r"[\w-]+")


class ResultValidator:
    """Validates the player names and positions of a submitted match.

    Every check runs on its own and all failures are reported together, so
    the caller can show the full list at once.
    """

    MIN_PLAYERS_ERROR = f"At least {MIN_PARTICIPANTS} players are required"
    DUPLICATE_NAMES_ERROR = "Player names must be unique"
    EMPTY_NAME_ERROR = "Player names cannot be empty"
    POSITION_RANGE_ERROR = "Positions must be between 1 and the number of players"
    START_POSITION_ERROR = "Positions must start from 1"
    NON_CONTIGUOUS_ERROR = "Positions must be contiguous"

    def validate(self, results: Sequence[Mapping]) -> Tuple[bool, List[str]]:
        """
        Validate a list of ``{"player_name": str, "position": int}`` entries.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        names = [str(r["player_name"]).strip() for r in results]
        positions = [r["position"] for r in results]

        if len(results) < MIN_PARTICIPANTS:
            errors.append(self.MIN_PLAYERS_ERROR)

        folded = [name.casefold() for name in names]
        if len(set(folded)) != len(folded):
            errors.append(self.DUPLICATE_NAMES_ERROR)

        if any(not name for name in names):
            errors.append(self.EMPTY_NAME_ERROR)

        if not all(1 <= pos <= len(results) for pos in positions):
            errors.append(self.POSITION_RANGE_ERROR)

        # An empty ranking has no first place either.
        if not positions or min(positions) != 1:
            errors.append(self.START_POSITION_ERROR)

        if not self._is_contiguous(positions):
            errors.append(self.NON_CONTIGUOUS_ERROR)

        return (len(errors) == 0, errors)

    @staticmethod
    def _is_contiguous(positions: Sequence[int]) -> bool:
        """
        Check positions form an unbroken ranking once ties are counted.

        A group of ``k`` players tied at ``p`` occupies slots ``p..p+k-1``,
        so the next occupied position must be ``p + k``.
        """
        if not positions:
            return True

        counts: Dict[int, int] = Counter(positions)
        expected_next = 1
        for pos in range(1, max(positions) + 1):
            count = counts.get(pos, 0)
            if count == 0:
                continue
            if pos != expected_next:
                return False
            expected_next = pos + count
        return True


def validate_player_name(name: str) -> bool:
    """Check a player name is 2-20 characters of letters, digits, ``_`` or ``-``."""
    trimmed = name.strip()
    if not PLAYER_NAME_MIN_LENGTH <= len(trimmed) <= PLAYER_NAME_MAX_LENGTH:
        return False
    return bool(_PLAYER_NAME_RE.fullmatch(trimmed))
