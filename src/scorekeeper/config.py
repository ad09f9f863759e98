from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data" / "scorekeeper"

# One JSON file per collection
STORAGE_FILES = {
    "games": "games.json",
    "players": "players.json",
    "matches": "matches.json",
    "ratings": "ratings.json",
}

# Game form bounds
GAME_NAME_MIN_LENGTH = 2
GAME_NAME_MAX_LENGTH = 50
GAME_DESCRIPTION_MAX_LENGTH = 200
K_FACTOR_MIN = 1
K_FACTOR_MAX = 100
DEFAULT_RATING_MIN = 100
DEFAULT_RATING_MAX = 3000

# Stats
RECENT_ACTIVITY_LIMIT = 5
