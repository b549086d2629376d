from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from product_ranking.models import Product, RatingRecord
from product_ranking.scoring import RatingEngine


@dataclass
class LeaderboardEntry:
    rank: int
    entity_id: str
    rating: float
    wins: int
    losses: int
    total_decisions: int
    product: Optional[Product] = None

    @property
    def win_rate(self) -> float:
        return self.wins / self.total_decisions if self.total_decisions else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['win_rate'] = self.win_rate
        data['product'] = self.product.to_dict() if self.product else None
        return data


def top_entities(records: Iterable[RatingRecord], limit: Optional[int] = None,
                 catalog: Optional[Mapping[str, Product]] = None,
                 min_decisions: int = 0) -> List[LeaderboardEntry]:
    """Rank rated products by rating, highest first.

    Equal ratings are ordered by ascending entity id. Products without a
    rating record never appear.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    ranked = sorted(
        (r for r in records if r.total_decisions >= min_decisions),
        key=lambda r: (-r.rating, r.entity_id),
    )
    if limit is not None:
        ranked = ranked[:limit]

    return [
        LeaderboardEntry(
            rank=rank,
            entity_id=r.entity_id,
            rating=r.rating,
            wins=r.wins,
            losses=r.losses,
            total_decisions=r.total_decisions,
            product=catalog.get(r.entity_id) if catalog else None,
        )
        for rank, r in enumerate(ranked, 1)
    ]


class Leaderboard:
    """Read-only view over a RatingEngine."""

    def __init__(self, engine: RatingEngine, catalog: Optional[Mapping[str, Product]] = None):
        self.engine = engine
        self.catalog = catalog

    def top_entities(self, limit: Optional[int] = None, min_decisions: int = 0) -> List[LeaderboardEntry]:
        return top_entities(self.engine.records(), limit, self.catalog, min_decisions)

    def stats(self, entity_id: str) -> Optional[LeaderboardEntry]:
        for entry in self.top_entities():
            if entry.entity_id == entity_id:
                return entry
        return None

    def format_table(self, limit: Optional[int] = 10) -> str:
        title = f"Top {limit}" if limit is not None else "All"
        lines = [
            f"{'='*70}",
            f"PRODUCT RANKINGS ({title})",
            f"{'='*70}",
            f"{'Rank':<6} {'Product':<25} {'Rating':<9} {'W-L':<10} {'WinRate':<8}",
            f"{'-'*70}",
        ]
        for e in self.top_entities(limit):
            label = e.product.name if e.product and e.product.name else e.entity_id
            record = f"{e.wins}-{e.losses}"
            lines.append(f"{e.rank:<6} {label[:25]:<25} {e.rating:<9.1f} {record:<10} {e.win_rate:.1%}")
        lines.append(f"{'='*70}")
        return "\n".join(lines)

    def print(self, limit: Optional[int] = 10):
        print("\n" + self.format_table(limit) + "\n")
