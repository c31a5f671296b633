# Reveal window between the second flip of a pair and its resolution (seconds).
REVEAL_DELAY = 0.8
# How long freshly matched tiles keep their celebration marker.
MATCH_ANIMATION_DURATION = 0.75
# How long hinted tiles stay highlighted.
HINT_DURATION = 2.0
HINT_BUDGET = 3

# Countdown length for a single session (seconds).
MAX_TIME = 120

# Scoring
MATCH_BASE_POINTS = 100
STREAK_BONUS = 25
STRIKE_LIMIT = 3
STRIKE_PENALTY = 100

# Leaderboard persistence
LEADERBOARD_LIMIT = 10
LEADERBOARD_KEY = "pairpals.leaderboard"
HIGH_SCORE_KEY = "pairpals.high_score"

# Filler content
AVATAR_URL_TEMPLATE = "https://api.dicebear.com/9.x/fun-emoji/svg?seed={seed}"
