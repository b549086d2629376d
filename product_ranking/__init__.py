from product_ranking.errors import RankingError, InsufficientCandidates, InvalidDecision
from product_ranking.models import Product, RatingRecord, Matchup, Decision
from product_ranking.elo import expected_score, calculate_elo_update
from product_ranking.matchup import MatchupGenerator
from product_ranking.scoring import RatingEngine
from product_ranking.leaderboard import Leaderboard, LeaderboardEntry, top_entities
from product_ranking.session import RankingSession

__version__ = "1.0.0"
__all__ = [
    "RankingError",
    "InsufficientCandidates",
    "InvalidDecision",
    "Product",
    "RatingRecord",
    "Matchup",
    "Decision",
    "expected_score",
    "calculate_elo_update",
    "MatchupGenerator",
    "RatingEngine",
    "Leaderboard",
    "LeaderboardEntry",
    "top_entities",
    "RankingSession",
]
