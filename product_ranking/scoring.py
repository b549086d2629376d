import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from product_ranking.elo import DEFAULT_K_FACTOR, DEFAULT_RATING, calculate_elo_update
from product_ranking.errors import InvalidDecision
from product_ranking.models import DEFAULT_USER_ID, Decision, RatingRecord
from product_ranking.statistics import bradley_terry_strengths, summarize


class RatingEngine:
    """
    ELO rating table for pairwise product decisions.

    - Records are created lazily at ``initial_rating`` the first time a product
      takes part in a decision, and are never removed.
    - Every decision updates both ratings from their pre-update values, bumps
      the W/L counters and appends an immutable ``Decision`` to the history.
    - Reads return copies; the table itself is only mutated under ``_lock``.
    """

    def __init__(
        self,
        known_ids: Optional[Iterable[str]] = None,
        k_factor: float = DEFAULT_K_FACTOR,
        initial_rating: float = DEFAULT_RATING,
        verbose: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            known_ids: Product ids from the catalog. When given, decisions about
                       any other id are rejected.
            k_factor: Sensitivity of a single decision (default 32)
            initial_rating: Rating assigned on first appearance (default 1500)
            verbose: Print one line per recorded decision
            clock: Timestamp source, injectable for tests
        """
        if k_factor <= 0:
            raise ValueError(f"k_factor must be positive, got {k_factor}")

        self.known_ids = frozenset(known_ids) if known_ids is not None else None
        self.k_factor = k_factor
        self.initial_rating = initial_rating
        self.verbose = verbose
        self.clock = clock

        self._records: Dict[str, RatingRecord] = {}
        self._history: List[Decision] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def record_decision(self, winner_id: str, loser_id: str,
                        user_id: str = DEFAULT_USER_ID) -> Tuple[RatingRecord, RatingRecord]:
        self._validate(winner_id, loser_id)

        with self._lock:
            now = self.clock()
            winner = self._get_or_create(winner_id, now)
            loser = self._get_or_create(loser_id, now)

            winner_before, loser_before = winner.rating, loser.rating
            winner_after, loser_after = calculate_elo_update(winner_before, loser_before, self.k_factor)

            winner.rating = winner_after
            winner.wins += 1
            winner.total_decisions += 1
            winner.updated_at = now

            loser.rating = loser_after
            loser.losses += 1
            loser.total_decisions += 1
            loser.updated_at = now

            self._history.append(Decision(
                id=self._next_id,
                winner_id=winner_id,
                loser_id=loser_id,
                created_at=now,
                winner_rating_before=winner_before,
                loser_rating_before=loser_before,
                winner_rating_after=winner_after,
                loser_rating_after=loser_after,
                user_id=user_id,
            ))
            self._next_id += 1

            result = winner.copy(), loser.copy()

        if self.verbose:
            print(f"  [ranking] {winner_id} beat {loser_id}: "
                  f"{winner_before:.1f} -> {winner_after:.1f}, {loser_before:.1f} -> {loser_after:.1f}")
        return result

    # Query

    def get_record(self, entity_id: str) -> Optional[RatingRecord]:
        with self._lock:
            record = self._records.get(entity_id)
            return record.copy() if record else None

    def get_rating(self, entity_id: str) -> Optional[float]:
        record = self.get_record(entity_id)
        return record.rating if record else None

    def records(self) -> List[RatingRecord]:
        with self._lock:
            return [r.copy() for r in self._records.values()]

    def history(self, entity_id: Optional[str] = None) -> List[Decision]:
        with self._lock:
            if entity_id is None:
                return list(self._history)
            return [d for d in self._history if d.involves(entity_id)]

    def total_decisions(self) -> int:
        with self._lock:
            return len(self._history)

    def judged_entity_ids(self) -> List[str]:
        with self._lock:
            seen: Dict[str, None] = {}
            for d in self._history:
                seen.setdefault(d.winner_id)
                seen.setdefault(d.loser_id)
            return list(seen)

    # Snapshots

    def load_snapshot(self, records: Iterable[RatingRecord], decisions: Iterable[Decision]):
        records = [r.copy() for r in records]
        decisions = sorted(decisions, key=lambda d: d.id)
        for r in records:
            if r.total_decisions != r.wins + r.losses:
                raise ValueError(f"Corrupt rating record for {r.entity_id}: "
                                 f"{r.wins}W + {r.losses}L != {r.total_decisions}")

        if self.known_ids is not None:
            # Products dropped from the catalog keep their history but leave the rating table.
            dropped = sorted(r.entity_id for r in records if r.entity_id not in self.known_ids)
            records = [r for r in records if r.entity_id in self.known_ids]
            if dropped and self.verbose:
                print(f"  [ranking] Ignoring ratings for products not in the catalog: {', '.join(dropped)}")

        with self._lock:
            self._records = {r.entity_id: r for r in records}
            self._history = decisions
            self._next_id = decisions[-1].id + 1 if decisions else 1

    def export_data(self) -> Dict[str, Any]:
        ratings = sorted(self.records(), key=lambda r: (-r.rating, r.entity_id))
        decisions = self.history()

        return {
            'metadata': {
                'algorithm': 'ELO',
                'k_factor': self.k_factor,
                'initial_rating': self.initial_rating,
                'total_entities': len(ratings),
                'total_decisions': len(decisions),
                'export_timestamp': datetime.now().isoformat(),
            },
            'ratings': [r.to_dict() for r in ratings],
            'decisions': [d.to_dict() for d in decisions],
            'statistics': {
                'summary': summarize(decisions),
                'bradley_terry': bradley_terry_strengths([r.entity_id for r in ratings], decisions),
            },
        }

    # Internal helpers

    def _validate(self, winner_id: str, loser_id: str):
        if winner_id == loser_id:
            raise InvalidDecision(f"A product cannot beat itself: {winner_id!r}")
        if self.known_ids is not None:
            unknown = [i for i in (winner_id, loser_id) if i not in self.known_ids]
            if unknown:
                raise InvalidDecision(f"Unknown product id(s): {', '.join(map(repr, unknown))}")

    def _get_or_create(self, entity_id: str, now: float) -> RatingRecord:
        record = self._records.get(entity_id)
        if record is None:
            record = RatingRecord(entity_id=entity_id, rating=self.initial_rating,
                                  created_at=now, updated_at=now)
            self._records[entity_id] = record
        return record
