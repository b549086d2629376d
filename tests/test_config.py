import tempfile
from pathlib import Path

from product_ranking.catalog import catalog_index, load_catalog, product_from_dict
from product_ranking.config import RankingSettings, get_config_value, load_config, resolve_settings

CATALOG_YAML = """
products:
  - id: p1
    name: Denim Jacket
    brand: Levi's
    price: 89.5
    vibes: [y2k, streetwear]
  - id: p2
    name: Linen Dress
    tags: cottagecore
  - id: p3
"""


def test_load_config():
    print("\n" + "="*70)
    print("TEST 1: Config Loading")
    print("="*70)

    assert load_config(None) == {}
    assert load_config("/does/not/exist.yaml") == {}

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("ranking:\n  k_factor: 24\n  leaderboard_size: 5\nstorage:\n  db_path: /tmp/r.db\n")
        config = load_config(str(path))

    assert get_config_value(config, "ranking.k_factor") == 24
    assert get_config_value(config, "ranking.missing", "fallback") == "fallback"
    assert get_config_value(config, "ranking.k_factor.deeper", 1) == 1

    settings = resolve_settings(config)
    assert settings.k_factor == 24.0
    assert settings.leaderboard_size == 5
    assert settings.db_path == "/tmp/r.db"
    assert settings.initial_rating == 1500.0
    assert settings.user_id == "current-user"

    settings = resolve_settings(config, k_factor=40, seed=3, verbose=True)
    assert settings.k_factor == 40.0
    assert settings.seed == 3
    assert settings.verbose is True
    print("✓ Config loading test passed\n")


def test_settings_validation():
    defaults = resolve_settings({})
    assert defaults == RankingSettings()
    assert defaults.leaderboard_size == 10

    for kwargs in ({"k_factor": 0}, {"k_factor": -5}, {"leaderboard_size": -1}):
        try:
            RankingSettings(**kwargs)
            assert False, "Should have raised ValueError"
        except ValueError:
            pass


def test_load_catalog():
    print("\n" + "="*70)
    print("TEST 2: Catalog Loading")
    print("="*70)

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "catalog.yaml"
        path.write_text(CATALOG_YAML)
        products = load_catalog(str(path))

        json_path = Path(tmpdir) / "catalog.json"
        json_path.write_text('[{"id": "j1", "tags": ["a"]}, {"id": 2}]')
        json_products = load_catalog(str(json_path))

    assert [p.id for p in products] == ["p1", "p2", "p3"]
    assert products[0].tags == frozenset({"y2k", "streetwear"})
    assert products[0].price == 89.5
    assert products[0].brand == "Levi's"
    assert products[1].tags == frozenset({"cottagecore"})
    assert products[2].tags == frozenset()
    assert [p.id for p in json_products] == ["j1", "2"]
    print("✓ Catalog loading test passed\n")


def test_catalog_errors():
    try:
        load_catalog("/does/not/exist.yaml")
        assert False, "Should have raised ValueError"
    except ValueError:
        pass

    for bad in ({"name": "no id"}, "just a string"):
        try:
            product_from_dict(bad)
            assert False, "Should have raised ValueError"
        except ValueError:
            pass

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "dupes.yaml"
        path.write_text("- id: a\n- id: a\n")
        try:
            load_catalog(str(path))
            assert False, "Should have raised ValueError"
        except ValueError as e:
            assert "Duplicate" in str(e)

        path.write_text("products: 42\n")
        try:
            load_catalog(str(path))
            assert False, "Should have raised ValueError"
        except ValueError:
            pass

    index = catalog_index([product_from_dict({"id": "x"})])
    assert list(index) == ["x"]
