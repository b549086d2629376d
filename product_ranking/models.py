import time
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from product_ranking.errors import InvalidDecision

DEFAULT_USER_ID = "current-user"

CHOICE_A = "A"
CHOICE_B = "B"
CHOICE_SKIP = "skip"
CHOICES = (CHOICE_A, CHOICE_B, CHOICE_SKIP)


def _iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).isoformat()


@dataclass(frozen=True)
class Product:
    """A rankable catalog item. Only ``id`` and ``tags`` matter to the ranking core."""
    id: str
    tags: FrozenSet[str] = frozenset()
    name: str = ""
    brand: str = ""
    category: str = ""
    price: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        return not self.tags.isdisjoint(tags)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['tags'] = sorted(self.tags)
        return data


@dataclass
class RatingRecord:
    entity_id: str
    rating: float
    wins: int = 0
    losses: int = 0
    total_decisions: int = 0
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    @property
    def win_rate(self) -> float:
        return self.wins / self.total_decisions if self.total_decisions else 0.0

    def copy(self) -> "RatingRecord":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['win_rate'] = self.win_rate
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        return data


@dataclass(frozen=True)
class Matchup:
    product_a: Product
    product_b: Product

    def __post_init__(self):
        if self.product_a.id == self.product_b.id:
            raise InvalidDecision(f"Matchup needs two distinct products, got {self.product_a.id!r} twice")

    @property
    def ids(self) -> Tuple[str, str]:
        return self.product_a.id, self.product_b.id

    def winner_loser(self, choice: str) -> Tuple[str, str]:
        if choice == CHOICE_A:
            return self.product_a.id, self.product_b.id
        if choice == CHOICE_B:
            return self.product_b.id, self.product_a.id
        raise InvalidDecision(f"Invalid choice: {choice!r}. Must be 'A' or 'B'")


@dataclass(frozen=True)
class Decision:
    id: int
    winner_id: str
    loser_id: str
    created_at: float
    winner_rating_before: float
    loser_rating_before: float
    winner_rating_after: float
    loser_rating_after: float
    user_id: str = DEFAULT_USER_ID

    def involves(self, entity_id: str) -> bool:
        return entity_id in (self.winner_id, self.loser_id)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['winner_rating_change'] = self.winner_rating_after - self.winner_rating_before
        data['loser_rating_change'] = self.loser_rating_after - self.loser_rating_before
        data['created_at'] = _iso(self.created_at)
        return data
