"""
ELO rating math for pairwise product decisions.

Expected score:  E = 1 / (1 + 10^((R_opponent - R_player) / 400))
New rating:      R' = R + K * (actual - E)

Skips never reach this module, so there is no tie outcome.
"""

from typing import Tuple

DEFAULT_RATING = 1500.0
DEFAULT_K_FACTOR = 32.0
RATING_SCALE = 400.0


def expected_score(rating: float, opponent_rating: float) -> float:
    return 1.0 / (1.0 + 10 ** ((opponent_rating - rating) / RATING_SCALE))


def calculate_elo_update(winner_rating: float, loser_rating: float,
                         k_factor: float = DEFAULT_K_FACTOR) -> Tuple[float, float]:
    # Both expectations come from the pre-update ratings.
    expected_winner = expected_score(winner_rating, loser_rating)
    expected_loser = expected_score(loser_rating, winner_rating)

    return (
        winner_rating + k_factor * (1.0 - expected_winner),
        loser_rating + k_factor * (0.0 - expected_loser),
    )
