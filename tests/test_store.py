import tempfile
from pathlib import Path

from product_ranking.scoring import RatingEngine
from product_ranking.store import RankingStore


def test_save_and_load():
    print("\n" + "="*70)
    print("TEST 1: Save and Load")
    print("="*70)

    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "nested" / "rankings.db"

        engine = RatingEngine()
        engine.record_decision("a", "b")
        engine.record_decision("c", "a", user_id="guest")

        with RankingStore(str(db_path)) as store:
            store.save(engine)
            assert store.count_decisions() == 2
        assert db_path.exists()

        with RankingStore(str(db_path)) as store:
            restored = store.load(RatingEngine())

        assert restored.total_decisions() == 2
        assert restored.history() == engine.history()
        for original in engine.records():
            loaded = restored.get_record(original.entity_id)
            assert loaded == original
        print("✓ Save and load test passed\n")


def test_save_is_append_only():
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = str(Path(tmpdir) / "rankings.db")
        engine = RatingEngine()
        engine.record_decision("a", "b")

        with RankingStore(db_path) as store:
            store.save(engine)
            engine.record_decision("b", "a")
            store.save(engine)
            store.save(engine)
            assert store.count_decisions() == 2

            restored = store.load(RatingEngine())
            assert restored.get_record("a").total_decisions == 2
            assert restored.get_rating("a") == engine.get_rating("a")

            restored.record_decision("a", "c")
            assert restored.history()[-1].id == 3


def test_empty_store():
    with tempfile.TemporaryDirectory() as tmpdir:
        with RankingStore(str(Path(tmpdir) / "empty.db")) as store:
            engine = store.load(RatingEngine())
        assert engine.records() == []
        assert engine.total_decisions() == 0
