import random
from typing import FrozenSet, Iterable, List, Optional, Sequence

from product_ranking.errors import InsufficientCandidates
from product_ranking.models import Matchup, Product


def normalize_tags(tags: Optional[Iterable[str]] = None) -> FrozenSet[str]:
    if isinstance(tags, str):
        tags = [tags]
    return frozenset(tags or ())


def filter_by_tags(products: Sequence[Product], tags: Optional[Iterable[str]] = None) -> List[Product]:
    wanted = normalize_tags(tags)
    if not wanted:
        return list(products)
    return [p for p in products if p.has_any_tag(wanted)]


class MatchupGenerator:
    """Draws two distinct products, optionally restricted to a set of tags.

    A product is eligible when it shares at least one tag with the filter.
    Selection is uniform without replacement. The generator never looks at
    ratings.
    """

    def __init__(self, catalog: Iterable[Product], rng: Optional[random.Random] = None,
                 seed: Optional[int] = None):
        self.catalog = tuple(catalog)
        seen = set()
        for product in self.catalog:
            if product.id in seen:
                raise ValueError(f"Duplicate product id in catalog: {product.id}")
            seen.add(product.id)

        self.rng = rng if rng is not None else random.Random(seed)

    def eligible(self, tags: Optional[Iterable[str]] = None) -> List[Product]:
        return filter_by_tags(self.catalog, tags)

    def generate(self, tags: Optional[Iterable[str]] = None) -> Matchup:
        tags = normalize_tags(tags)
        pool = self.eligible(tags)
        if len(pool) < 2:
            raise InsufficientCandidates(len(pool), tags)

        i, j = self.rng.sample(range(len(pool)), 2)
        return Matchup(product_a=pool[i], product_b=pool[j])
