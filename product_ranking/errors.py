from typing import Iterable, Optional


class RankingError(ValueError):
    pass


class InsufficientCandidates(RankingError):
    """Fewer than two products are eligible for a matchup."""

    def __init__(self, pool_size: int, tags: Optional[Iterable[str]] = None):
        self.pool_size = pool_size
        self.tags = sorted(tags) if tags else []
        where = f" matching tags {self.tags}" if self.tags else ""
        super().__init__(f"Not enough items to compare: {pool_size} product(s){where}, need at least 2")


class InvalidDecision(RankingError):
    pass
