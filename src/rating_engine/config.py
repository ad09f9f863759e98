# Elo parameters
DEFAULT_K_FACTOR = 32
DEFAULT_RATING = 1500
ELO_SCALE = 400  # Rating gap at which the stronger side is 10x favoured
RATING_FLOOR = 0  # Ratings never drop below this

# Actual score per head-to-head outcome
WIN_SCORE = 1.0
DRAW_SCORE = 0.5
LOSS_SCORE = 0.0

# Rating tiers (name, minimum rating), ascending
RATING_TIERS = [
    ("Bronze", 0),
    ("Silver", 1200),
    ("Gold", 1400),
    ("Platinum", 1600),
    ("Diamond", 1800),
    ("Master", 2000),
    ("Grandmaster", 2200),
]

# Result validation
MIN_PARTICIPANTS = 2

# Player names (trimmed length)
PLAYER_NAME_MIN_LENGTH = 2
PLAYER_NAME_MAX_LENGTH = 20
