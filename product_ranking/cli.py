"""Command-line front end for ranking products head to head.

  play         Present matchups from a catalog and record your picks
  leaderboard  Show the stored rankings
  export       Dump ratings and decision history as JSON
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from product_ranking.catalog import catalog_index, load_catalog
from product_ranking.config import load_config, resolve_settings
from product_ranking.errors import InsufficientCandidates
from product_ranking.leaderboard import Leaderboard
from product_ranking.models import CHOICE_A, CHOICE_B, CHOICE_SKIP, Product
from product_ranking.scoring import RatingEngine
from product_ranking.session import RankingSession
from product_ranking.store import RankingStore

INPUT_CHOICES = {"a": CHOICE_A, "b": CHOICE_B, "s": CHOICE_SKIP}


def _parse_tags(value: Optional[str]) -> List[str]:
    return [t.strip() for t in value.split(",") if t.strip()] if value else []


def _describe(product: Product) -> str:
    label = product.name or product.id
    extras = [x for x in (product.brand, f"${product.price:.2f}" if product.price is not None else "") if x]
    return f"{label} ({', '.join(extras)})" if extras else label


def play(args, stdin: TextIO = sys.stdin) -> int:
    config = load_config(args.config)
    settings = resolve_settings(config, seed=args.seed, db_path=args.db, verbose=args.verbose)
    session = RankingSession(load_catalog(args.catalog), settings=settings)

    store = RankingStore(settings.db_path) if settings.db_path else None
    if store:
        store.load(session.engine)
        print(f"Loaded {session.total_decisions()} previous decisions from {settings.db_path}")

    try:
        try:
            session.generate_matchup(_parse_tags(args.tags))
        except InsufficientCandidates as e:
            print(f"{e}. Try a wider tag filter.")
            return 1

        rounds = 0
        while session.current_matchup is not None and (args.rounds is None or rounds < args.rounds):
            matchup = session.current_matchup
            print(f"\n[A] {_describe(matchup.product_a)}\n[B] {_describe(matchup.product_b)}")
            print("Pick a, b, s (skip) or q (quit): ", end="", flush=True)

            line = stdin.readline()
            answer = line.strip().lower()
            if not line or answer == "q":
                break
            if answer not in INPUT_CHOICES:
                print(f"Unrecognized input: {answer!r}")
                continue

            result = session.submit(INPUT_CHOICES[answer])
            if result:
                winner, loser = result
                print(f"  {winner.entity_id}: {winner.rating:.1f}  {loser.entity_id}: {loser.rating:.1f}")
            rounds += 1

        if session.current_matchup is None:
            print("\nNot enough items left to compare.")

        session.leaderboard.print(settings.leaderboard_size)
        if store:
            store.save(session.engine)
            print(f"Saved {session.total_decisions()} decisions to {settings.db_path}")
        return 0
    finally:
        if store:
            store.close()


def leaderboard(args) -> int:
    catalog = catalog_index(load_catalog(args.catalog)) if args.catalog else None
    with RankingStore(args.db) as store:
        engine = store.load(RatingEngine(known_ids=catalog.keys() if catalog else None))
    Leaderboard(engine, catalog).print(args.limit)
    return 0


def export(args) -> int:
    with RankingStore(args.db) as store:
        engine = store.load(RatingEngine())
    data = engine.export_data()

    if args.output:
        Path(args.output).write_text(json.dumps(data, indent=2))
        print(f"Exported {data['metadata']['total_decisions']} decisions to {args.output}")
    else:
        print(json.dumps(data, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rank products with head-to-head ELO matchups")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("play", help="Rank products interactively")
    p.add_argument("--catalog", type=str, required=True, help="YAML/JSON product catalog")
    p.add_argument("--tags", type=str, default=None, help="Comma-separated tags to restrict matchups")
    p.add_argument("--rounds", type=int, default=None, help="Stop after this many rounds")
    p.add_argument("--db", type=str, default=None, help="SQLite file to load and save rankings")
    p.add_argument("--seed", type=int, default=None, help="Random seed for matchups")
    p.add_argument("--config", type=str, default=None, help="Path to config YAML file (optional)")
    p.add_argument("--verbose", action="store_true", default=None, help="Print rating updates")
    p.set_defaults(func=play)

    p = sub.add_parser("leaderboard", help="Show stored rankings")
    p.add_argument("--db", type=str, required=True, help="SQLite rankings file")
    p.add_argument("--catalog", type=str, default=None, help="Catalog for product names")
    p.add_argument("--limit", type=int, default=10, help="Number of products to show")
    p.set_defaults(func=leaderboard)

    p = sub.add_parser("export", help="Export rankings as JSON")
    p.add_argument("--db", type=str, required=True, help="SQLite rankings file")
    p.add_argument("--output", type=str, default=None, help="Output file (stdout if omitted)")
    p.set_defaults(func=export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
