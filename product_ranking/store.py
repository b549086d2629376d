import sqlite3
from pathlib import Path

from product_ranking.models import Decision, RatingRecord
from product_ranking.scoring import RatingEngine


class RankingStore:
    """SQLite snapshot of a RatingEngine's rating table and decision log."""

    def __init__(self, db_path: str):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = self._init_db()

    def _init_db(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=30.0, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        self._create_schema(conn)
        return conn

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS ratings (
                entity_id TEXT PRIMARY KEY,
                rating REAL NOT NULL,
                wins INTEGER DEFAULT 0,
                losses INTEGER DEFAULT 0,
                total_decisions INTEGER DEFAULT 0,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL,
                CHECK(total_decisions = wins + losses)
            );

            CREATE TABLE IF NOT EXISTS decisions (
                id INTEGER PRIMARY KEY,
                winner_id TEXT NOT NULL,
                loser_id TEXT NOT NULL,
                created_at REAL NOT NULL,
                winner_rating_before REAL NOT NULL,
                loser_rating_before REAL NOT NULL,
                winner_rating_after REAL NOT NULL,
                loser_rating_after REAL NOT NULL,
                user_id TEXT NOT NULL,
                CHECK(winner_id != loser_id)
            );

            CREATE INDEX IF NOT EXISTS idx_rating ON ratings(rating DESC);
            CREATE INDEX IF NOT EXISTS idx_winner ON decisions(winner_id);
            CREATE INDEX IF NOT EXISTS idx_loser ON decisions(loser_id);
        """)

    def save(self, engine: RatingEngine):
        self.conn.executemany(
            """INSERT INTO ratings
               (entity_id, rating, wins, losses, total_decisions, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(entity_id) DO UPDATE SET
                   rating = excluded.rating, wins = excluded.wins, losses = excluded.losses,
                   total_decisions = excluded.total_decisions, updated_at = excluded.updated_at""",
            [(r.entity_id, r.rating, r.wins, r.losses, r.total_decisions, r.created_at, r.updated_at)
             for r in engine.records()]
        )
        # Decisions are append-only; rows already stored are left untouched.
        self.conn.executemany(
            """INSERT OR IGNORE INTO decisions
               (id, winner_id, loser_id, created_at, winner_rating_before, loser_rating_before,
                winner_rating_after, loser_rating_after, user_id)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            [(d.id, d.winner_id, d.loser_id, d.created_at, d.winner_rating_before, d.loser_rating_before,
              d.winner_rating_after, d.loser_rating_after, d.user_id)
             for d in engine.history()]
        )
        self.conn.commit()

    def load(self, engine: RatingEngine) -> RatingEngine:
        records = [RatingRecord(**dict(r)) for r in self.conn.execute("SELECT * FROM ratings").fetchall()]
        decisions = [Decision(**dict(r)) for r in self.conn.execute("SELECT * FROM decisions ORDER BY id").fetchall()]
        engine.load_snapshot(records, decisions)
        return engine

    def count_decisions(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM decisions").fetchone()[0]

    def close(self):
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
