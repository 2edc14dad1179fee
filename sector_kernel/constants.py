"""
Sector Kernel — Threshold Constants (Default Values)

All magic numbers live here as module-level defaults.
"""

# --- Bayesian ranking ---
# Prior strength: a vote count equal to this weighs the entity's own
# mean and the global mean equally.
DEFAULT_MIN_VOTES: int = 5

# Entities below this many votes never appear on public leaderboards.
DEFAULT_MIN_EVIDENCE: int = 1

# --- Sorting ---
SORT_ASC: str = "asc"
SORT_DESC: str = "desc"
DEFAULT_SORT_COLUMN: str = "Servicos"
DEFAULT_SORT_DIRECTION: str = SORT_DESC

# --- Leaderboards ---
LEADERBOARD_LIMIT: int = 3

# Performance bands for efficiency/engagement percentages (0..100).
BAND_GOOD_MIN_PCT: float = 70.0
BAND_MEDIUM_MIN_PCT: float = 40.0
