from typing import FrozenSet, Iterable, List, Optional, Tuple

from product_ranking.catalog import catalog_index
from product_ranking.config import RankingSettings
from product_ranking.errors import InsufficientCandidates, InvalidDecision
from product_ranking.leaderboard import Leaderboard, LeaderboardEntry
from product_ranking.matchup import MatchupGenerator, normalize_tags
from product_ranking.models import CHOICE_SKIP, Decision, Matchup, Product, RatingRecord
from product_ranking.scoring import RatingEngine


class RankingSession:
    """
    Drives the "which one would you rather" game over a product catalog.

    At most one matchup is current. Submitting a choice or skipping consumes
    it and immediately presents the next one using the same tag filter. If the
    filter no longer yields two products, the session just has no current
    matchup and the caller shows an empty state.
    """

    def __init__(
        self,
        catalog: Iterable[Product],
        engine: Optional[RatingEngine] = None,
        generator: Optional[MatchupGenerator] = None,
        settings: Optional[RankingSettings] = None,
        seed: Optional[int] = None,
    ):
        self.settings = settings or RankingSettings()
        self.catalog = catalog_index(catalog)
        self.engine = engine or RatingEngine(
            known_ids=self.catalog.keys(),
            k_factor=self.settings.k_factor,
            initial_rating=self.settings.initial_rating,
            verbose=self.settings.verbose,
        )
        self.generator = generator or MatchupGenerator(
            self.catalog.values(),
            seed=seed if seed is not None else self.settings.seed,
        )
        self.leaderboard = Leaderboard(self.engine, self.catalog)

        self.current_matchup: Optional[Matchup] = None
        self.active_tags: FrozenSet[str] = frozenset()

    def generate_matchup(self, tags: Optional[Iterable[str]] = None) -> Matchup:
        self.active_tags = normalize_tags(tags)
        self.current_matchup = None
        self.current_matchup = self.generator.generate(self.active_tags)
        return self.current_matchup

    def submit(self, choice: str) -> Optional[Tuple[RatingRecord, RatingRecord]]:
        if choice == CHOICE_SKIP:
            self.skip()
            return None
        if self.current_matchup is None:
            raise InvalidDecision("No matchup is currently presented")

        winner_id, loser_id = self.current_matchup.winner_loser(choice)
        result = self.engine.record_decision(winner_id, loser_id, user_id=self.settings.user_id)
        self._next_matchup()
        return result

    def skip(self) -> Optional[Matchup]:
        return self._next_matchup()

    # Read side

    def top_entities(self, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        return self.leaderboard.top_entities(limit if limit is not None else self.settings.leaderboard_size)

    def total_decisions(self) -> int:
        return self.engine.total_decisions()

    def judged_entity_ids(self) -> List[str]:
        return self.engine.judged_entity_ids()

    def history(self) -> List[Decision]:
        return self.engine.history()

    def _next_matchup(self) -> Optional[Matchup]:
        try:
            return self.generate_matchup(self.active_tags)
        except InsufficientCandidates:
            if self.settings.verbose:
                print(f"  [ranking] No further matchups for tags {sorted(self.active_tags)}")
            return None
