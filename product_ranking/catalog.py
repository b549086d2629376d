from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

import yaml

from product_ranking.models import Product


def product_from_dict(data: Mapping[str, Any]) -> Product:
    if not isinstance(data, Mapping) or not data.get("id"):
        raise ValueError(f"Catalog entry must be a mapping with an 'id': {data!r}")

    # "vibes" is the tag field used by the mobile app's product feed.
    tags = data.get("tags", data.get("vibes")) or []
    if isinstance(tags, str):
        tags = [tags]

    price = data.get("price")
    return Product(
        id=str(data["id"]),
        tags=frozenset(str(t) for t in tags),
        name=str(data.get("name", "")),
        brand=str(data.get("brand", "")),
        category=str(data.get("category", "")),
        price=float(price) if price is not None else None,
    )


def load_catalog(path: str) -> List[Product]:
    """Load products from a YAML or JSON file.

    Accepts either a bare list of products or a mapping with a ``products`` key.
    """
    path = Path(path)
    if not path.exists():
        raise ValueError(f"Catalog file does not exist: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, dict):
        data = data.get("products", [])
    if not isinstance(data, list):
        raise ValueError(f"Catalog must be a list of products: {path}")

    products = [product_from_dict(item) for item in data]
    catalog_index(products)
    return products


def catalog_index(products: Iterable[Product]) -> Dict[str, Product]:
    index: Dict[str, Product] = {}
    for product in products:
        if product.id in index:
            raise ValueError(f"Duplicate product id in catalog: {product.id}")
        index[product.id] = product
    return index
